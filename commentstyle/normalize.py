"""
Extract the content lines of a comment group.

Each function returns one string per line of comment content with the comment
decoration and the shared indentation removed, whatever form the comment is
currently written in. Block comment lines that are only whitespace become empty
strings.
"""
import re
from typing import List

from commentstyle.forms import is_starred_block
from commentstyle.grouping import CommentGroup
from commentstyle.model import LINEBREAK_RE, Token, TokenKind
from commentstyle.source import SourceCode

# Width of "/* ", which bare-block continuation lines are aligned with.
BARE_BLOCK_PADDING = "   "

_RE_BLANK = re.compile(r"\s*")
_RE_STAR_PREFIX = re.compile(r"\s*\*")
_RE_STAR_PREFIX_AND_SPACE = re.compile(r"\s*\* ?")
_RE_LINE_OFFSET = re.compile(r"(\s*\*?\s*)(.*)")


def _blank_to_empty(line: str) -> str:
    return "" if _RE_BLANK.fullmatch(line) else line


def _all_have_leading_space(lines: List[str]) -> bool:
    return all(line.startswith(" ") for line in lines if line.strip())


def separate_lines_content(group: CommentGroup) -> List[str]:
    """Content of a run of line comments, dropping one leading space if every line has it."""
    values = [comment.value for comment in group]
    if not _all_have_leading_space(values):
        return values
    return [value[1:] if value.startswith(" ") else value for value in values]


def starred_block_content(comment: Token) -> List[str]:
    """Content of a starred block comment, without its delimiter-only first and last lines."""
    lines = [_blank_to_empty(line) for line in LINEBREAK_RE.split(comment.value)[1:-1]]
    after_star = [_RE_STAR_PREFIX.sub("", line, count=1) for line in lines]
    prefix_re = _RE_STAR_PREFIX_AND_SPACE if _all_have_leading_space(after_star) else _RE_STAR_PREFIX
    return [prefix_re.sub("", line, count=1) for line in lines]


def correction_offset(lines: List[str], anchor: str) -> str:
    """
    Return the largest amount by which an interior line is indented less than `anchor`.

    The first line shares its line with the opening delimiter and is skipped.
    """
    offset = ""
    for idx, line in enumerate(lines):
        if idx == 0 or not line.strip():
            continue
        line_offset = _RE_LINE_OFFSET.match(line).group(1)
        if len(line_offset) < len(anchor):
            shortfall = anchor[len(line_offset) - len(anchor):]
            if len(shortfall) > len(offset):
                offset = shortfall
    return offset


def realign_line(line: str, anchor: str, offset: str) -> str:
    """Remove the anchor indentation from one line, keeping any extra indentation."""
    line_offset, contents = _RE_LINE_OFFSET.match(line).groups()
    if len(line_offset) > len(anchor):
        keep = len(line_offset) - len(anchor) + len(offset)
        return line_offset[-keep:] + contents
    return contents


def bare_block_lines(lines: List[str], anchor: str) -> List[str]:
    """Realign the raw lines of a bare block comment against the comment's anchor."""
    lines = [_blank_to_empty(line) for line in lines]
    padded_anchor = anchor + BARE_BLOCK_PADDING
    offset = correction_offset(lines, padded_anchor)
    return [realign_line(line, padded_anchor, offset) for line in lines]


def bare_block_content(source: SourceCode, comment: Token) -> List[str]:
    """Content of a block comment with no per-line decoration."""
    lines = LINEBREAK_RE.split(comment.value)
    # The space before the closing "*/" belongs to the delimiter.
    if len(lines) > 1 and lines[-1].strip() and lines[-1].endswith(" "):
        lines[-1] = lines[-1][:-1]
    return bare_block_lines(lines, source.initial_offset(comment))


def comment_lines(source: SourceCode, group: CommentGroup) -> List[str]:
    """Return the content lines of a group, whatever its current form."""
    first = group[0]
    if first.kind == TokenKind.LINE:
        return separate_lines_content(group)
    if is_starred_block(group):
        return starred_block_content(first)
    return bare_block_content(source, first)

