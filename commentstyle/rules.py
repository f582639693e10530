"""Check comment groups against the configured multiline comment style."""
import re
from typing import Callable, List, Optional, Tuple

import structlog

from commentstyle.converters import to_bare_block, to_separate_lines, to_starred_block
from commentstyle.forms import classify, is_jsdoc, is_starred_block, is_starred_comment_line
from commentstyle.grouping import CommentGroup, group_comments
from commentstyle.model import (LINEBREAK_RE, Diagnostic, MessageKind, Position, Rewrite, Style,
                                StyleOptions, Token, TokenKind)
from commentstyle.normalize import comment_lines
from commentstyle.source import SourceCode

LOGGER = structlog.get_logger(__name__)

BLOCK_END = "*/"

_RE_START_LINE_OK = re.compile(r"\*?\s*")
_RE_NON_BLANK = re.compile(r"\S+")
_RE_STAR_PREFIX = re.compile(r"\s*\*")
_RE_SPACE = re.compile(r"\s*")
_RE_ALIGN_PREFIX = re.compile(r"(\s*(?:/?\*)?(\s*))")
_RE_SLASH_LINE = re.compile(r"\s*/")

GroupValidator = Callable[[SourceCode, CommentGroup, StyleOptions], List[Diagnostic]]


def contains_block_end(lines: List[str]) -> bool:
    """Whether converting these lines to a block comment would end the comment early."""
    return any(BLOCK_END in line for line in lines)


def _guarded(rewrite: Optional[Rewrite], lines: List[str]) -> Optional[Rewrite]:
    if rewrite is None or contains_block_end(lines):
        return None
    return rewrite


def _group_range(group: CommentGroup) -> Tuple[int, int]:
    return group[0].range[0], group[-1].range[1]


def _opening_end(comment: Token) -> Position:
    return Position(comment.start.line, comment.start.column + 2)


def _alignment_offset(source: SourceCode, comment: Token, lines: List[str], line_text: str) -> str:
    """
    Return the indentation to put after the `*` on a line that is missing one.

    The offset is copied from the first line of the comment that has content.
    If no line has content a single space is used.
    """
    indent = _RE_SPACE.match(line_text).group(0)
    for idx, line in enumerate(lines):
        if not _RE_NON_BLANK.search(line):
            continue

        line_to_align_with = source.lines[comment.start.line - 1 + idx]
        prefix, initial_offset = _RE_ALIGN_PREFIX.match(line_to_align_with).groups()
        offset = indent[len(prefix):] + initial_offset
        if _RE_SLASH_LINE.match(line_text) and not offset:
            offset += " "
        return offset
    return " "


def _check_starred_block_structure(source: SourceCode, comment: Token,
                                   content: List[str]) -> List[Diagnostic]:
    lines = LINEBREAK_RE.split(comment.value)
    expected_prefix = f"{source.initial_offset(comment)} *"
    out: List[Diagnostic] = []

    if not _RE_START_LINE_OK.fullmatch(lines[0]):
        start = comment.range[0] + 1 if comment.value.startswith("*") else comment.range[0]
        out.append(
            Diagnostic(MessageKind.START_NEWLINE, comment.start, _opening_end(comment),
                       _guarded(Rewrite(start + 2, start + 2, f"\n{expected_prefix}"), content)))

    if not _RE_SPACE.fullmatch(lines[-1]):
        end = comment.range[1]
        # The space before the closing "*/" goes with the delimiter.
        start = end - 3 if lines[-1].endswith(" ") else end - 2
        out.append(
            Diagnostic(MessageKind.END_NEWLINE,
                       Position(comment.end.line, comment.end.column - 2), comment.end,
                       _guarded(Rewrite(start, end, f"\n{expected_prefix}/"), content)))

    for line_number in range(comment.start.line + 1, comment.end.line + 1):
        line_text = source.lines[line_number - 1]
        if line_text.startswith(expected_prefix):
            continue

        line_start = source.index_from_loc(line_number, 0)
        if is_starred_comment_line(line_text):
            kind = MessageKind.ALIGNMENT
            star_prefix = _RE_STAR_PREFIX.match(line_text).group(0)
            rewrite = Rewrite(line_start, line_start + len(star_prefix), expected_prefix)
        else:
            kind = MessageKind.MISSING_STAR
            indent = _RE_SPACE.match(line_text).group(0)
            offset = _alignment_offset(source, comment, lines, line_text)
            rewrite = Rewrite(line_start, line_start + len(indent), expected_prefix + offset)

        out.append(
            Diagnostic(kind, Position(line_number, 0), Position(line_number, len(line_text)),
                       _guarded(rewrite, content)))

    return out


def check_starred_block(source: SourceCode, group: CommentGroup,
                        options: StyleOptions) -> List[Diagnostic]:
    """Require block comments with a `*` at the start of every line."""
    first = group[0]
    content = comment_lines(source, group)

    if len(group) > 1:
        rewrite = None
        # Content starting with a delimiter character would read as a nested comment.
        if not any(line.startswith("/") for line in content):
            rewrite = Rewrite(*_group_range(group),
                              to_starred_block(content, source.initial_offset(first)))
        return [
            Diagnostic(MessageKind.EXPECTED_BLOCK, first.start, group[-1].end,
                       _guarded(rewrite, content))
        ]

    return _check_starred_block_structure(source, first, content)


def check_bare_block(source: SourceCode, group: CommentGroup,
                     options: StyleOptions) -> List[Diagnostic]:
    """Require block comments without padding stars."""
    if is_jsdoc(group):
        return []

    first = group[0]
    content = comment_lines(source, group)
    anchor = source.initial_offset(first)
    out: List[Diagnostic] = []

    if first.kind == TokenKind.LINE and len(content) > 1:
        rewrite = Rewrite(*_group_range(group), to_bare_block(content, anchor))
        out.append(
            Diagnostic(MessageKind.EXPECTED_BLOCK, first.start, group[-1].end,
                       _guarded(rewrite, content)))

    if is_starred_block(group):
        rewrite = Rewrite(first.range[0], first.range[1], to_bare_block(content, anchor))
        out.append(
            Diagnostic(MessageKind.EXPECTED_BARE_BLOCK, first.start, _opening_end(first),
                       _guarded(rewrite, content)))

    return out


def check_separate_lines(source: SourceCode, group: CommentGroup,
                         options: StyleOptions) -> List[Diagnostic]:
    """Require runs of line comments instead of block comments."""
    first = group[0]
    jsdoc = is_jsdoc(group)

    if first.kind != TokenKind.BLOCK or (jsdoc and not options.check_jsdoc):
        return []

    content = comment_lines(source, group)
    if jsdoc:
        content = content[1:-1]

    # A trailing token on the closing line cannot follow a line comment.
    token_after = source.token_after(first)
    if token_after is not None and token_after.start.line == first.end.line:
        return []

    rewrite = Rewrite(first.range[0], first.range[1],
                      to_separate_lines(content, source.initial_offset(first)))
    return [
        Diagnostic(MessageKind.EXPECTED_LINES, first.start, _opening_end(first),
                   _guarded(rewrite, content))
    ]


def validator_for(style: Style) -> GroupValidator:
    if style == Style.STARRED_BLOCK:
        return check_starred_block
    if style == Style.BARE_BLOCK:
        return check_bare_block
    if style == Style.SEPARATE_LINES:
        return check_separate_lines
    raise ValueError(f"Unknown comment style: {style!r}")


def check_source(source: SourceCode, options: StyleOptions = StyleOptions()) -> List[Diagnostic]:
    """Check every multiline comment in `source`, returning diagnostics in source order."""
    validator = validator_for(options.style)
    out: List[Diagnostic] = []
    for group in group_comments(source, options.ignore_pattern):
        diagnostics = sorted(validator(source, group, options), key=lambda d: d.start)
        if diagnostics:
            LOGGER.debug("Comment group does not match style", style=options.style.value,
                         form=classify(group).value,
                         line=group[0].start.line, size=len(group),
                         problems=[diagnostic.kind.value for diagnostic in diagnostics])
        out.extend(diagnostics)
    return out


def check_text(text: str, options: StyleOptions = StyleOptions()) -> List[Diagnostic]:
    """Tokenize and check C-family source text."""
    return check_source(SourceCode.from_text(text), options)
