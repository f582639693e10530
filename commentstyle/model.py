"""Types shared by the comment style checker."""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional, Pattern, Tuple

# Splits comment values and source text into physical lines.
LINEBREAK_RE = re.compile("\r\n|[\r\n\u2028\u2029]")

# Directive comments for other tools are never restyled.
DEFAULT_IGNORE_PATTERN = re.compile(
    r"^\s*(?:eslint|jshint\s+|jslint\s+|istanbul\s+|globals?\s+|exported\s+|jscs)")


class CommentStyleError(Exception):
    """Base class for errors raised by commentstyle."""


class ConfigError(CommentStyleError):
    """Options or a config file could not be understood."""


class SourceError(CommentStyleError):
    """Source text could not be split into tokens."""


class TokenKind(Enum):
    LINE = "Line"
    BLOCK = "Block"
    SHEBANG = "Shebang"
    STRING = "String"
    CODE = "Code"


COMMENT_KINDS = (TokenKind.LINE, TokenKind.BLOCK, TokenKind.SHEBANG)


class Position(NamedTuple):
    """A 1-based line and 0-based column."""

    line: int
    column: int


@dataclass(frozen=True)
class Token:
    """
    One token of source text.

    For comments `value` is the text between the delimiters; for every other
    kind it is the raw text of the token.
    """

    kind: TokenKind
    value: str
    range: Tuple[int, int]
    start: Position
    end: Position

    @property
    def is_comment(self) -> bool:
        return self.kind in COMMENT_KINDS


class Style(Enum):
    STARRED_BLOCK = "starred-block"
    BARE_BLOCK = "bare-block"
    SEPARATE_LINES = "separate-lines"


class MessageKind(Enum):
    EXPECTED_BLOCK = "expected-block"
    EXPECTED_BARE_BLOCK = "expected-bare-block"
    START_NEWLINE = "start-newline"
    END_NEWLINE = "end-newline"
    MISSING_STAR = "missing-star"
    ALIGNMENT = "alignment"
    EXPECTED_LINES = "expected-lines"


MESSAGES = {
    MessageKind.EXPECTED_BLOCK: "Expected a block comment instead of consecutive line comments.",
    MessageKind.EXPECTED_BARE_BLOCK: "Expected a block comment without padding stars.",
    MessageKind.START_NEWLINE: "Expected a linebreak after '/*'.",
    MessageKind.END_NEWLINE: "Expected a linebreak before '*/'.",
    MessageKind.MISSING_STAR: "Expected a '*' at the start of this line.",
    MessageKind.ALIGNMENT: "Expected this line to be aligned with the start of the comment.",
    MessageKind.EXPECTED_LINES: "Expected multiple line comments instead of a block comment.",
}


class Rewrite(NamedTuple):
    """Replace text[start:end] with `text`."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class Diagnostic:
    kind: MessageKind
    start: Position
    end: Position
    rewrite: Optional[Rewrite] = None

    @property
    def message(self) -> str:
        return MESSAGES[self.kind]

    @property
    def fixable(self) -> bool:
        return self.rewrite is not None


@dataclass(frozen=True)
class StyleOptions:
    """The active target style for one pass."""

    style: Style = Style.STARRED_BLOCK
    check_jsdoc: bool = False
    ignore_pattern: Pattern = field(default=DEFAULT_IGNORE_PATTERN, compare=False)
