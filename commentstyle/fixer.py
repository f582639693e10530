"""Apply the rewrites carried by diagnostics to source text."""
from dataclasses import dataclass
from typing import List

import structlog

from commentstyle.model import Diagnostic, StyleOptions
from commentstyle.rules import check_text

LOGGER = structlog.get_logger(__name__)

MAX_FIX_PASSES = 10


@dataclass
class FixResult:
    """
    Outcome of applying rewrites.

    output: The text after rewriting.
    applied: Diagnostics whose rewrite was applied.
    remaining: Diagnostics that were not applied, either unfixable or overlapping an applied one.
    """

    output: str
    applied: List[Diagnostic]
    remaining: List[Diagnostic]

    @property
    def fixed(self) -> bool:
        return bool(self.applied)


def apply_rewrites(text: str, diagnostics: List[Diagnostic]) -> FixResult:
    """
    Apply every non-overlapping rewrite in one pass.

    Rewrites are applied in range order. A rewrite that starts at or before the
    end of the previously applied one is left for a later pass.
    """
    fixable = sorted((d for d in diagnostics if d.rewrite is not None),
                     key=lambda d: (d.rewrite.start, d.rewrite.end))
    remaining = [d for d in diagnostics if d.rewrite is None]
    applied: List[Diagnostic] = []

    parts: List[str] = []
    last_end = -1
    cursor = 0
    for diagnostic in fixable:
        rewrite = diagnostic.rewrite
        if rewrite.start <= last_end or rewrite.start > rewrite.end:
            remaining.append(diagnostic)
            continue
        parts.append(text[cursor:rewrite.start])
        parts.append(rewrite.text)
        cursor = rewrite.end
        last_end = rewrite.end
        applied.append(diagnostic)
    parts.append(text[cursor:])

    remaining.sort(key=lambda d: (d.start, d.end))
    return FixResult("".join(parts), applied, remaining)


def fix_text(text: str, options: StyleOptions = StyleOptions()) -> FixResult:
    """
    Rewrite `text` until no more rewrites apply.

    Returns the final text, every diagnostic that was fixed across all passes and
    the diagnostics still reported on the final text.
    """
    applied: List[Diagnostic] = []
    output = text
    diagnostics = check_text(output, options)
    for fix_pass in range(MAX_FIX_PASSES):
        result = apply_rewrites(output, diagnostics)
        if not result.fixed:
            break
        LOGGER.debug("Applied rewrites", fix_pass=fix_pass + 1, applied=len(result.applied))
        applied.extend(result.applied)
        output = result.output
        diagnostics = check_text(output, options)

    return FixResult(output, applied, diagnostics)
