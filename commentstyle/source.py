"""Source text model: tokens, physical lines and position lookups."""
import bisect
import re
from typing import List, Optional, Sequence

from commentstyle.model import LINEBREAK_RE, Position, SourceError, Token, TokenKind

_RE_IDENTIFIER = re.compile(r"[\w$]+")


class SourceCode:
    """
    Read-only view of one source unit.

    text - the full source text
    tokens - every token in source order, comments included
    """

    def __init__(self, text: str, tokens: Sequence[Token]):
        """Create a source model from text and its tokens."""
        self.text = text
        self.tokens = list(tokens)
        self.comments = [token for token in self.tokens if token.is_comment]
        self.lines = LINEBREAK_RE.split(text)
        self._line_starts = _line_starts(text)
        self._token_starts = [token.range[0] for token in self.tokens]

    @classmethod
    def from_text(cls, text: str) -> "SourceCode":
        """Tokenize C-family source text."""
        return cls(text, tokenize(text))

    def token_before(self, token: Token) -> Optional[Token]:
        """Return the token, comment or not, that ends before `token` starts."""
        idx = bisect.bisect_left(self._token_starts, token.range[0])
        if idx == 0:
            return None
        return self.tokens[idx - 1]

    def token_after(self, token: Token) -> Optional[Token]:
        """Return the token, comment or not, that starts after `token` ends."""
        idx = bisect.bisect_left(self._token_starts, token.range[1])
        if idx >= len(self.tokens):
            return None
        return self.tokens[idx]

    def index_from_loc(self, line: int, column: int) -> int:
        return self._line_starts[line - 1] + column

    def initial_offset(self, token: Token) -> str:
        """Return the text between the start of the token's line and the token."""
        return self.text[token.range[0] - token.start.column:token.range[0]]


def _line_starts(text: str) -> List[int]:
    starts = [0]
    for match in LINEBREAK_RE.finditer(text):
        starts.append(match.end())
    return starts


def _position(line_starts: List[int], index: int) -> Position:
    line_idx = bisect.bisect_right(line_starts, index) - 1
    return Position(line_idx + 1, index - line_starts[line_idx])


class _Scanner:
    """Single pass scanner over C-family text."""

    def __init__(self, text: str):
        self.text = text
        self.line_starts = _line_starts(text)
        self.tokens: List[Token] = []

    def _pos(self, index: int) -> Position:
        return _position(self.line_starts, index)

    def _emit(self, kind: TokenKind, value: str, start: int, end: int) -> None:
        self.tokens.append(Token(kind, value, (start, end), self._pos(start), self._pos(end)))

    def _line_end(self, start: int) -> int:
        match = LINEBREAK_RE.search(self.text, start)
        return match.start() if match else len(self.text)

    def _string_end(self, start: int) -> int:
        quote = self.text[start]
        idx = start + 1
        n = len(self.text)
        while idx < n:
            ch = self.text[idx]
            if ch == "\\":
                idx += 2
                continue
            if ch == quote:
                return idx + 1
            if quote != "`" and ch in "\r\n\u2028\u2029":
                # Unterminated strings stop at the end of their line.
                return idx
            idx += 1
        return n

    def scan(self) -> List[Token]:
        text = self.text
        n = len(text)
        idx = 0

        if text.startswith("#!"):
            end = self._line_end(0)
            self._emit(TokenKind.SHEBANG, text[2:end], 0, end)
            idx = end

        while idx < n:
            ch = text[idx]
            nxt = text[idx + 1] if idx + 1 < n else ""

            if ch.isspace():
                idx += 1
            elif ch == "/" and nxt == "/":
                end = self._line_end(idx)
                self._emit(TokenKind.LINE, text[idx + 2:end], idx, end)
                idx = end
            elif ch == "/" and nxt == "*":
                close = text.find("*/", idx + 2)
                if close == -1:
                    pos = self._pos(idx)
                    raise SourceError(
                        f"Unterminated block comment starting at line {pos.line}, column {pos.column}")
                self._emit(TokenKind.BLOCK, text[idx + 2:close], idx, close + 2)
                idx = close + 2
            elif ch in "'\"`":
                end = self._string_end(idx)
                self._emit(TokenKind.STRING, text[idx:end], idx, end)
                idx = end
            else:
                match = _RE_IDENTIFIER.match(text, idx)
                end = match.end() if match else idx + 1
                self._emit(TokenKind.CODE, text[idx:end], idx, end)
                idx = end

        return self.tokens


def tokenize(text: str) -> List[Token]:
    """
    Split C-family source text into tokens.

    Comments, string literals, identifier runs and single punctuation characters
    are recognised. Regular expression literals are not, so a `/*` inside one is
    read as the start of a comment.
    """
    return _Scanner(text).scan()
