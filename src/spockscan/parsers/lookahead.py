"""
spockscan.parsers.lookahead - Bounded forward scans used to accept methods.

Each helper takes the full line list, the index of the heading line, and a
bound, and inspects only lines after the heading.
"""

from __future__ import annotations

from collections.abc import Sequence

from spockscan.parsers.grammar import (
    BLOCK_LABEL_LOOKAHEAD,
    BLOCK_LABEL_PATTERN,
    OPENING_BRACE_LOOKAHEAD,
    is_comment,
)


def has_block_label_nearby(
    lines: Sequence[str],
    start_index: int,
    bound: int = BLOCK_LABEL_LOOKAHEAD,
) -> bool:
    """
    Look for a Spock block label after a method heading.

    Scans lines ``start_index + 1`` up to ``start_index + bound`` (exclusive),
    skipping blank lines and stopping at a line that is exactly ``}``.

    Args:
        lines: All lines of the file.
        start_index: Index of the method heading.
        bound: Lookahead window size.

    Returns:
        True if a block label was found before the window or method ended.
    """
    end = min(len(lines), start_index + bound)
    for j in range(start_index + 1, end):
        stripped = lines[j].strip()
        if not stripped:
            continue
        if BLOCK_LABEL_PATTERN.match(stripped):
            return True
        if stripped == "}":
            return False
    return False


def has_opening_brace_nearby(
    lines: Sequence[str],
    start_index: int,
    bound: int = OPENING_BRACE_LOOKAHEAD,
) -> bool:
    """
    Check that the first code line after a heading opens the method body.

    Blank and comment lines are skipped; the first other line within the
    window decides.
    """
    end = min(len(lines), start_index + bound + 1)
    for j in range(start_index + 1, end):
        stripped = lines[j].strip()
        if not stripped or is_comment(stripped):
            continue
        return stripped.startswith("{")
    return False
