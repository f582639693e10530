"""Select the comments to check and split them into comment groups."""
from typing import List, Pattern, Sequence

import structlog

from commentstyle.model import DEFAULT_IGNORE_PATTERN, Token, TokenKind
from commentstyle.source import SourceCode

LOGGER = structlog.get_logger(__name__)

CommentGroup = Sequence[Token]


def is_inline(source: SourceCode, comment: Token) -> bool:
    """Return True if another token ends on the line the comment starts on."""
    token_before = source.token_before(comment)
    return token_before is not None and token_before.end.line >= comment.start.line


def candidate_comments(source: SourceCode,
                       ignore_pattern: Pattern = DEFAULT_IGNORE_PATTERN) -> List[Token]:
    """Return the comments that may be restyled, in source order."""
    out: List[Token] = []
    for comment in source.comments:
        if comment.kind == TokenKind.SHEBANG:
            continue
        if ignore_pattern.search(comment.value):
            continue
        if is_inline(source, comment):
            continue
        out.append(comment)
    return out


def _continues_group(source: SourceCode, comments: List[Token], idx: int) -> bool:
    comment = comments[idx]
    if comment.kind != TokenKind.LINE or idx == 0:
        return False
    previous = comments[idx - 1]
    if previous.kind != TokenKind.LINE:
        return False
    token_before = source.token_before(comment)
    return token_before is previous and previous.end.line == comment.start.line - 1


def group_comments(source: SourceCode,
                   ignore_pattern: Pattern = DEFAULT_IGNORE_PATTERN) -> List[List[Token]]:
    """
    Partition the candidate comments into comment groups.

    Adjacent line comments on consecutive lines form one group; every block
    comment is a group of its own. Groups that span a single line are dropped.
    """
    comments = candidate_comments(source, ignore_pattern)

    boundaries = [idx for idx in range(len(comments))
                  if not _continues_group(source, comments, idx)]
    boundaries.append(len(comments))

    groups = []
    for start, end in zip(boundaries, boundaries[1:]):
        group = comments[start:end]
        if len(group) == 1 and group[0].start.line == group[0].end.line:
            continue
        groups.append(group)

    LOGGER.debug("Grouped comments", comments=len(source.comments), candidates=len(comments),
                 groups=len(groups))
    return groups
