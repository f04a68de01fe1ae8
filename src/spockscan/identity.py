"""Test identity utilities for discovered specifications.

Provides the identifiers callers use to key test items and to select tests
on the build tool command line, and the reverse mapping from iteration
names reported by the build tool.

Test item ID format:
    {file_uri}#{ClassName}#{feature name}
    {file_uri}#{ClassName}  (class item)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from spockscan.models import TestClass
from spockscan.parsers.values import parse_parameters
from spockscan.results.junit_xml import ITERATION_NAME_PATTERN


@dataclass(frozen=True)
class IterationInfo:
    """Parts of a reported iteration name ``<base> [<params>, #<index>]``."""

    base_name: str
    index: int
    parameters: dict[str, Any]


def build_test_id(file_uri: str, class_name: str, method_name: str | None = None) -> str:
    """Build a test item ID from file, class and optional feature name.

    Examples:
        >>> build_test_id("file:///w/FooSpec.groovy", "FooSpec", "adds numbers")
        'file:///w/FooSpec.groovy#FooSpec#adds numbers'
        >>> build_test_id("file:///w/FooSpec.groovy", "FooSpec")
        'file:///w/FooSpec.groovy#FooSpec'
    """
    if method_name:
        return f"{file_uri}#{class_name}#{method_name}"
    return f"{file_uri}#{class_name}"


def build_test_filter(class_name: str, method_name: str | None = None) -> str:
    """Build the ``--tests`` / ``-Dtest`` filter for a class or feature.

    Examples:
        >>> build_test_filter("FooSpec", "adds numbers")
        'FooSpec.adds numbers'
    """
    if method_name:
        return f"{class_name}.{method_name}"
    return class_name


def extract_iteration_info(test_name: str) -> IterationInfo | None:
    """Split a reported iteration name into its parts.

    Examples:
        >>> extract_iteration_info("max [a: 1, b: 2, #0]")
        IterationInfo(base_name='max', index=0, parameters={'a': 1, 'b': 2})
        >>> extract_iteration_info("max") is None
        True
    """
    match = ITERATION_NAME_PATTERN.match(test_name)
    if not match:
        return None
    return IterationInfo(
        base_name=match.group("base"),
        index=int(match.group("index")),
        parameters=parse_parameters(match.group("params")),
    )


def strip_iteration_suffix(test_name: str) -> str:
    """Strip the ``[params, #n]`` suffix from a reported name.

    Examples:
        >>> strip_iteration_suffix("max [a: 1, #0]")
        'max'
        >>> strip_iteration_suffix("max")
        'max'
    """
    info = extract_iteration_info(test_name)
    return info.base_name if info else test_name


def runnable_classes(classes: Iterable[TestClass]) -> list[TestClass]:
    """Classes that can be run on their own (abstract ones cannot)."""
    return [cls for cls in classes if not cls.is_abstract]


def is_runnable_file(classes: Iterable[TestClass]) -> bool:
    """True when a file declares at least one runnable class."""
    return bool(runnable_classes(classes))
