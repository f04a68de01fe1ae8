"""
spockscan.parsers.data_table - Where-block location and iteration recovery.

Supports the two Spock notations for data-driven features:

- Data tables: a header row of variable names followed by one row per
  iteration, cells separated by ``|``/``||`` or ``;``/``;;``.
- Data pipes: ``name << [v1, v2, ...]`` (possibly spanning lines), integer
  ranges ``name << (1..3)``, and multi-variable pipes
  ``[a, b] << [[1, 2], [3, 4]]``.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from spockscan.events import NULL_SINK, EventSink
from spockscan.models import BlockSpan, DataIteration, SourceRange
from spockscan.parsers.grammar import WHERE_LABEL, brace_delta, is_comment
from spockscan.parsers.values import build_display_name, coerce_value, split_top_level

# Priority order for tie-breaking
SEPARATORS = ("||", ";;", "|", ";")
PLACEHOLDER_COLUMN = "_"

_PIPE_PATTERN = re.compile(r"^(?P<var>[A-Za-z_]\w*)\s*<<\s*(?P<expr>.+)$")
_MULTI_PIPE_PATTERN = re.compile(r"^\[(?P<vars>[^\]]+)\]\s*<<\s*(?P<expr>.+)$")
_ASSIGNMENT_PATTERN = re.compile(r"^[A-Za-z_]\w*\s*=(?!=)")
_RANGE_PATTERN = re.compile(r"^\(?\s*(-?\d+)\s*\.\.(<)?\s*(-?\d+)\s*\)?$")
_RECORD_PATTERN = re.compile(r"^new\s+[\w.]+\s*\((?P<args>.*)\)$")
_NAMED_ARG_PATTERN = re.compile(r"^(?P<key>[A-Za-z_]\w*)\s*:\s*(?P<value>.+)$")

RECORD_FIELDS = ("name", "age")


def find_data_block(lines: Sequence[str], method_start_line: int) -> BlockSpan | None:
    """
    Locate the where-block of the method starting at ``method_start_line``.

    Brace balance keeps the search inside the method body. The block starts
    at the first line that is exactly ``where:`` and ends at the next line
    that is exactly ``}`` (or at end of file).

    Returns:
        The block span, or None when the method has no where-block.
    """
    balance = 0
    opened = False

    for i in range(method_start_line, len(lines)):
        stripped = lines[i].strip()
        if stripped == WHERE_LABEL:
            for k in range(i + 1, len(lines)):
                if lines[k].strip() == "}":
                    return BlockSpan(i, k)
            return BlockSpan(i, len(lines))

        delta = brace_delta(lines[i])
        if delta > 0:
            opened = True
        balance += delta
        if opened and balance <= 0:
            return None

    return None


def choose_separator(row: str) -> str | None:
    """
    Pick the separator that occurs most often in a row.

    Doubled separators are counted separately from single ones, so ``a || b``
    counts one ``||`` and no ``|``. Ties go to the earlier entry of
    SEPARATORS. Returns None when the row has no separator.
    """
    counts = {
        "||": row.count("||"),
        ";;": row.count(";;"),
        "|": len(re.findall(r"(?<!\|)\|(?!\|)", row)),
        ";": len(re.findall(r"(?<!;);(?!;)", row)),
    }
    best = max(SEPARATORS, key=lambda sep: (counts[sep], -SEPARATORS.index(sep)))
    if counts[best] == 0:
        return None
    return best


def split_row(row: str) -> list[str]:
    """Split a table row into trimmed, non-empty cells."""
    separator = choose_separator(row)
    if separator is None:
        # Comma-separated rows are accepted when no table separator is present
        return [cell.strip() for cell in split_top_level(row) if cell.strip()]

    pieces = row.split(separator)
    if len(separator) == 2:
        # A doubled separator still allows the single form in the same row
        single = separator[0]
        pieces = [part for piece in pieces for part in piece.split(single)]
    return [cell.strip() for cell in pieces if cell.strip()]


def strip_trailing_comment(text: str) -> str:
    """Remove a ``//`` comment that is not inside a string literal."""
    quote: str | None = None
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif text.startswith("//", i):
            return text[:i].rstrip()
    return text


def read_literal(token: str) -> Any:
    """
    Read one element of a list literal.

    Handles the two-field record constructor ``new Person("Fred", 40)`` /
    ``new Person(name: "Fred", age: 40)``, nested lists, and scalars.
    """
    token = token.strip()

    record = _RECORD_PATTERN.match(token)
    if record:
        args = [arg.strip() for arg in split_top_level(record.group("args")) if arg.strip()]
        if len(args) == len(RECORD_FIELDS):
            named = [_NAMED_ARG_PATTERN.match(arg) for arg in args]
            if all(named):
                return {m.group("key"): coerce_value(m.group("value")) for m in named if m}
            return {key: coerce_value(arg) for key, arg in zip(RECORD_FIELDS, args)}
        return token

    if token.startswith("[") and token.endswith("]"):
        return [read_literal(item) for item in split_top_level(token[1:-1]) if item.strip()]

    return coerce_value(token)


def parse_list_expression(expression: str) -> list[Any] | None:
    """
    Evaluate the right-hand side of a data pipe.

    Returns:
        The element values, or None when the expression is not a literal
        this parser can read (method calls, SQL, etc.).
    """
    expression = expression.strip()

    range_match = _RANGE_PATTERN.match(expression)
    if range_match:
        low = int(range_match.group(1))
        high = int(range_match.group(3))
        if range_match.group(2) is None:
            high += 1
        return list(range(low, high))

    if expression.startswith("[") and expression.endswith("]"):
        inner = expression[1:-1]
        return [read_literal(item) for item in split_top_level(inner) if item.strip()]

    return None


def _collect_expression(lines: Sequence[str], start: int, end: int, first: str) -> tuple[str, int]:
    """Join a list literal that spans lines; returns (text, last line index)."""
    parts = [first]
    depth = first.count("[") - first.count("]")
    last = start
    while first.startswith("[") and depth > 0 and last + 1 < end:
        last += 1
        piece = strip_trailing_comment(lines[last].strip())
        parts.append(piece)
        depth += piece.count("[") - piece.count("]")
    return " ".join(parts), last


def parse_iterations(
    lines: Sequence[str],
    block: BlockSpan,
    method_name: str,
    sink: EventSink = NULL_SINK,
) -> list[DataIteration]:
    """
    Recover one DataIteration per table row or pipe element.

    Indices are assigned in file order across every notation in the block.

    Args:
        lines: All lines of the file.
        block: Where-block span from find_data_block.
        method_name: Raw method name used to build display names.
        sink: Receiver for diagnostic events.

    Returns:
        Iterations in discovery order.
    """
    iterations: list[DataIteration] = []
    header: list[str] | None = None

    def add(values: dict[str, Any], line_number: int) -> None:
        iterations.append(
            DataIteration(
                index=len(iterations),
                data_values=values,
                display_name=build_display_name(method_name, values),
                source_range=SourceRange.for_line(line_number, lines[line_number]),
                original_method_name=method_name,
            )
        )

    body = block.body()
    i = body.start
    while i < body.stop:
        stripped = strip_trailing_comment(lines[i].strip())
        if not stripped or is_comment(stripped):
            i += 1
            continue

        multi = _MULTI_PIPE_PATTERN.match(stripped)
        pipe = multi or _PIPE_PATTERN.match(stripped)
        if pipe:
            expression, last = _collect_expression(
                lines, i, body.stop, pipe.group("expr").strip()
            )
            elements = parse_list_expression(expression)
            if elements is None:
                sink.record("pipe.unreadable", line=i, expression=expression)
            elif multi:
                names = [n.strip() for n in multi.group("vars").split(",") if n.strip()]
                for element in elements:
                    row = element if isinstance(element, list) else [element]
                    add(
                        {n: v for n, v in zip(names, row) if n != PLACEHOLDER_COLUMN},
                        i,
                    )
            else:
                for element in elements:
                    add({pipe.group("var"): element}, i)
            i = last + 1
            continue

        if "<<" in stripped or _ASSIGNMENT_PATTERN.match(stripped):
            # Derived data variables and unsupported pipes
            i += 1
            continue

        cells = split_row(stripped)
        if header is None:
            header = cells
            sink.record("table.header", line=i, columns=header)
        else:
            values = {
                name: coerce_value(cell)
                for name, cell in zip(header, cells)
                if name != PLACEHOLDER_COLUMN
            }
            if values:
                add(values, i)
        i += 1

    sink.record("iterations.parsed", method=method_name, count=len(iterations))
    return iterations
