"""
spockscan.models - Data models for discovered specifications and results.

Discovery produces a tree of TestClass -> TestMethod -> DataIteration.
Result parsing produces flat TestIterationResult sequences that callers
correlate back to the tree by display name or iteration index.

All models are frozen dataclasses; a re-parse replaces the whole tree.
Mapping fields are stored as read-only views, which makes the models that
hold them unhashable.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any


def _read_only(values: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(values))


@dataclass(frozen=True)
class SourceRange:
    """
    A line/column span in a source file.

    Lines and columns are 0-based. The end column is exclusive.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @classmethod
    def for_line(cls, line_number: int, text: str) -> SourceRange:
        """Span covering the whole of one line."""
        return cls(line_number, 0, line_number, len(text))

    def to_dict(self) -> dict[str, int]:
        return {
            "startLine": self.start_line,
            "startColumn": self.start_column,
            "endLine": self.end_line,
            "endColumn": self.end_column,
        }


@dataclass(frozen=True)
class BlockSpan:
    """
    Location of a where-block inside a file.

    Attributes:
        start_line: Index of the ``where:`` label line
        end_line: Index of the closing line (exclusive), or len(lines) at EOF
    """

    start_line: int
    end_line: int

    def body(self) -> range:
        """Line indices between the label and the closing line."""
        return range(self.start_line + 1, self.end_line)


@dataclass(frozen=True)
class DataIteration:
    """
    One parameter set of a data-driven feature method.

    Attributes:
        index: Discovery order within the method (0-based)
        data_values: Variable name -> coerced value, in column order
        display_name: Method name with #placeholders substituted
        source_range: Line of the table row or pipe
        original_method_name: Method name as written in the source
    """

    __hash__ = None  # type: ignore[assignment]

    index: int
    data_values: Mapping[str, Any]
    display_name: str
    source_range: SourceRange
    original_method_name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "data_values", _read_only(self.data_values))

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "dataValues": dict(self.data_values),
            "displayName": self.display_name,
            "sourceRange": self.source_range.to_dict(),
            "originalMethodName": self.original_method_name,
        }


@dataclass(frozen=True)
class TestMethod:
    """
    A feature method inside a specification class.

    Attributes:
        name: Quoted description or bare identifier, without quotes
        declaration_line: 0-based line of the ``def`` heading
        source_range: Span of the heading line
        is_data_driven: True when a where-block was found
        data_iterations: Iterations when data-driven, otherwise None
        where_block_range: Span of the where-block, if any
    """

    __test__ = False

    name: str
    declaration_line: int
    source_range: SourceRange
    is_data_driven: bool = False
    data_iterations: tuple[DataIteration, ...] | None = None
    where_block_range: SourceRange | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "declarationLine": self.declaration_line,
            "sourceRange": self.source_range.to_dict(),
            "isDataDriven": self.is_data_driven,
        }
        if self.data_iterations is not None:
            data["dataIterations"] = [it.to_dict() for it in self.data_iterations]
        if self.where_block_range is not None:
            data["whereBlockRange"] = self.where_block_range.to_dict()
        return data


@dataclass(frozen=True)
class TestClass:
    """
    A class extending Specification.

    Abstract classes are kept in the model; consumers treat them as
    non-runnable.
    """

    __test__ = False

    name: str
    declaration_line: int
    source_range: SourceRange
    is_abstract: bool = False
    methods: tuple[TestMethod, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "declarationLine": self.declaration_line,
            "sourceRange": self.source_range.to_dict(),
            "isAbstract": self.is_abstract,
            "methods": [m.to_dict() for m in self.methods],
        }


@dataclass(frozen=True)
class ErrorLocation:
    """Source position of a failure, taken from a stack frame."""

    file: str
    line: int


@dataclass(frozen=True)
class ErrorInfo:
    """Failure message with an optional source location."""

    error: str
    location: ErrorLocation | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"error": self.error}
        if self.location is not None:
            data["location"] = {"file": self.location.file, "line": self.location.line}
        return data


@dataclass(frozen=True)
class TestIterationResult:
    """
    Outcome of one executed iteration.

    Attributes:
        index: Iteration index reported by the build tool
        display_name: ``<method> [<params>, #<index>]``
        parameters: Parameter name -> coerced value
        success: True only for passing iterations
        duration: Seconds, 0 when unknown
        output: Raw console line or report testcase name
        error_info: Failure details for unsuccessful iterations
    """

    __test__ = False
    __hash__ = None  # type: ignore[assignment]

    index: int
    display_name: str
    parameters: Mapping[str, Any] = field(default_factory=dict)
    success: bool = True
    duration: float = 0.0
    output: str = ""
    error_info: ErrorInfo | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", _read_only(self.parameters))

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "displayName": self.display_name,
            "parameters": dict(self.parameters),
            "success": self.success,
            "duration": self.duration,
            "output": self.output,
            "errorInfo": self.error_info.to_dict() if self.error_info else None,
        }
