"""
spockscan.parsers.source - Structural parser for Spock specification files.

Recovers specification classes and their feature methods from raw Groovy
text without a grammar. The scan is line-oriented:

- ``advance()`` moves an immutable ScanState forward by one line and
  reports whether the line declared a class or a method candidate.
- ``accept_method()`` decides whether a candidate is a feature method using
  bounded lookahead (block labels for bare names, opening brace for all).
- SpecificationParser ties both together and attaches data iterations.

Malformed input never raises; at worst methods past the point where the
brace heuristics lose track are not recorded.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field

from spockscan.events import NULL_SINK, EventSink
from spockscan.models import SourceRange, TestClass, TestMethod
from spockscan.parsers.data_table import find_data_block, parse_iterations
from spockscan.parsers.grammar import (
    CLASS_PATTERN,
    LIFECYCLE_METHODS,
    METHOD_HEADER_PATTERN,
    NESTED_CLASS_PATTERN,
    brace_delta,
)
from spockscan.parsers.lookahead import has_block_label_nearby, has_opening_brace_nearby


@dataclass(frozen=True)
class ScanState:
    """
    Position of the scanner relative to class bodies.

    Attributes:
        in_class: Inside a specification class declaration or body
        seen_class_brace: The class body's opening brace has been seen
        class_balance: ``{`` minus ``}`` since the class declaration
        nested_floor: class_balance at a nested class declaration, or None
        nested_opened: The nested class body's opening brace has been seen
    """

    in_class: bool = False
    seen_class_brace: bool = False
    class_balance: int = 0
    nested_floor: int | None = None
    nested_opened: bool = False

    @property
    def in_nested_class(self) -> bool:
        return self.nested_floor is not None


@dataclass(frozen=True)
class ScanStep:
    """Result of advancing the scanner by one line."""

    state: ScanState
    class_match: re.Match[str] | None = None
    method_match: re.Match[str] | None = None


def advance(state: ScanState, line: str) -> ScanStep:
    """
    Advance the scanner over one line.

    Every specification class declaration starts a new class and resets the
    counters from that line, even when the previous class has not closed.
    Inside a class body, other class-like declarations open a nested region
    that is skipped for method discovery until its braces balance out.
    """
    stripped = line.strip()
    delta = brace_delta(line)
    has_open = "{" in line

    class_match = CLASS_PATTERN.match(stripped)
    if class_match:
        seen = has_open
        closed = seen and delta <= 0
        next_state = ScanState() if closed else ScanState(True, seen, delta)
        return ScanStep(next_state, class_match=class_match)

    if not state.in_class:
        return ScanStep(state)

    method_match = None
    nested_floor = state.nested_floor
    nested_opened = state.nested_opened
    if nested_floor is None:
        if state.seen_class_brace and NESTED_CLASS_PATTERN.match(stripped):
            nested_floor = state.class_balance
            nested_opened = False
        else:
            method_match = METHOD_HEADER_PATTERN.match(stripped)

    balance = state.class_balance + delta
    seen = state.seen_class_brace or has_open

    if nested_floor is not None:
        nested_opened = nested_opened or has_open
        if nested_opened and balance <= nested_floor:
            nested_floor = None
            nested_opened = False

    if seen and balance <= 0:
        return ScanStep(ScanState(), method_match=method_match)

    return ScanStep(
        ScanState(True, seen, balance, nested_floor, nested_opened),
        method_match=method_match,
    )


def accept_method(
    lines: Sequence[str],
    index: int,
    match: re.Match[str],
) -> tuple[str | None, str]:
    """
    Apply the acceptance policy to a method heading.

    Returns:
        (name, reason) where name is None for rejected candidates and
        reason names the rule that decided.
    """
    quoted = match.group("quoted")
    name = quoted if quoted is not None else match.group("bare") or ""

    if not name:
        return None, "empty"
    if name in LIFECYCLE_METHODS:
        return None, "lifecycle"
    if quoted is None and not has_block_label_nearby(lines, index):
        return None, "no-block-label"
    if not match.group("brace") and not has_opening_brace_nearby(lines, index):
        return None, "no-opening-brace"
    return name, "accepted"


@dataclass
class _PendingClass:
    name: str
    line: int
    source_range: SourceRange
    is_abstract: bool
    methods: list[TestMethod] = field(default_factory=list)

    def build(self) -> TestClass:
        return TestClass(
            name=self.name,
            declaration_line=self.line,
            source_range=self.source_range,
            is_abstract=self.is_abstract,
            methods=tuple(self.methods),
        )


class SpecificationParser:
    """
    Parser for Spock specification source files.

    Each call to parse() is independent; the parser holds no state between
    calls apart from its configuration.
    """

    def __init__(self, sink: EventSink | None = None, with_data: bool = True) -> None:
        """
        Initialize the parser.

        Args:
            sink: Receiver for diagnostic events. Defaults to discarding them.
            with_data: Recover data iterations for methods with a where-block.
        """
        self._sink = sink or NULL_SINK
        self._with_data = with_data

    def parse(self, content: str) -> list[TestClass]:
        """
        Parse file content into specification classes.

        Args:
            content: Raw text of one source file.

        Returns:
            Classes in declaration order. Empty for files without any
            specification class.
        """
        if not content:
            return []

        lines = [line.rstrip("\r") for line in content.split("\n")]
        classes: list[_PendingClass] = []
        current: _PendingClass | None = None
        state = ScanState()

        for i, line in enumerate(lines):
            step = advance(state, line)

            if step.class_match:
                current = _PendingClass(
                    name=step.class_match.group("name"),
                    line=i,
                    source_range=SourceRange.for_line(i, line),
                    is_abstract=step.class_match.group("abstract") is not None,
                )
                classes.append(current)
                self._sink.record("class.found", name=current.name, line=i)
            elif step.method_match and current is not None:
                method = self._build_method(lines, i, step.method_match)
                if method is not None:
                    current.methods.append(method)

            state = step.state
            if not state.in_class:
                current = None

        return [pending.build() for pending in classes]

    def _build_method(
        self, lines: Sequence[str], index: int, match: re.Match[str]
    ) -> TestMethod | None:
        name, reason = accept_method(lines, index, match)
        if name is None:
            self._sink.record("method.rejected", line=index, reason=reason)
            return None

        self._sink.record("method.accepted", name=name, line=index)
        source_range = SourceRange.for_line(index, lines[index])

        if not self._with_data:
            return TestMethod(name, index, source_range)

        block = find_data_block(lines, index)
        if block is None:
            return TestMethod(name, index, source_range)

        last = min(block.end_line, len(lines) - 1)
        iterations = parse_iterations(lines, block, name, self._sink)
        return TestMethod(
            name=name,
            declaration_line=index,
            source_range=source_range,
            is_data_driven=True,
            data_iterations=tuple(iterations),
            where_block_range=SourceRange(block.start_line, 0, last, len(lines[last])),
        )


def parse_specifications(content: str, sink: EventSink | None = None) -> list[TestClass]:
    """Parse file content with a default SpecificationParser."""
    return SpecificationParser(sink).parse(content)


def create_parser(sink: EventSink | None = None, with_data: bool = True) -> SpecificationParser:
    """
    Factory function to create a SpecificationParser.

    Args:
        sink: Optional receiver for diagnostic events.
        with_data: Recover data iterations for data-driven methods.

    Returns:
        New SpecificationParser instance.
    """
    return SpecificationParser(sink, with_data)
