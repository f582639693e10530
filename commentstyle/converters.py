"""Render content lines in each of the three comment forms."""
from typing import List


def to_starred_block(lines: List[str], anchor: str) -> str:
    body = "\n".join(f"{anchor} * {line}" for line in lines)
    return f"/*\n{body}\n{anchor} */"


def to_separate_lines(lines: List[str], anchor: str) -> str:
    return f"\n{anchor}".join(f"// {line}" for line in lines)


def to_bare_block(lines: List[str], anchor: str) -> str:
    return "/* " + f"\n{anchor}   ".join(lines) + " */"

