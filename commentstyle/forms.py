"""Classify the current form of a comment group."""
import re
from enum import Enum

from commentstyle.grouping import CommentGroup
from commentstyle.model import LINEBREAK_RE, TokenKind

_RE_BLANK = re.compile(r"\s*")
_RE_STARRED_LINE = re.compile(r"\s*\*")
_RE_JSDOC_OPENER = re.compile(r"\*\s*")
_RE_JSDOC_LINE = re.compile(r"\s* ")


class CommentForm(Enum):
    SEPARATE_LINES = "separate-lines"
    STARRED_BLOCK = "starred-block"
    BARE_BLOCK = "bare-block"
    JSDOC = "jsdoc"


def is_starred_comment_line(line: str) -> bool:
    return _RE_STARRED_LINE.match(line) is not None


def is_starred_block(group: CommentGroup) -> bool:
    """Whether the group is a block comment with a leading `*` on every interior line."""
    first = group[0]
    if first.kind != TokenKind.BLOCK:
        return False

    lines = LINEBREAK_RE.split(first.value)
    last = len(lines) - 1
    for idx, line in enumerate(lines):
        if idx in (0, last):
            if not _RE_BLANK.fullmatch(line):
                return False
        elif not is_starred_comment_line(line):
            return False
    return True


def is_jsdoc(group: CommentGroup) -> bool:
    """Whether the group is a `/**` comment using the one-space-after-star convention."""
    first = group[0]
    if first.kind != TokenKind.BLOCK:
        return False

    lines = LINEBREAK_RE.split(first.value)
    return (_RE_JSDOC_OPENER.fullmatch(lines[0]) is not None
            and all(_RE_JSDOC_LINE.match(line) for line in lines[1:-1])
            and _RE_BLANK.fullmatch(lines[-1]) is not None)


def classify(group: CommentGroup) -> CommentForm:
    """Return the form of the group, preferring JSDoc over the other block forms."""
    if group[0].kind != TokenKind.BLOCK:
        return CommentForm.SEPARATE_LINES
    if is_jsdoc(group):
        return CommentForm.JSDOC
    if is_starred_block(group):
        return CommentForm.STARRED_BLOCK
    return CommentForm.BARE_BLOCK
