"""
spockscan.parsers - Discovery parsers for Spock specification sources.

Exports:
- SpecificationParser: classes and feature methods from file text
- find_data_block / parse_iterations: where-block data recovery
- coerce_value / parse_parameters: shared literal coercion
"""

from spockscan.parsers.data_table import find_data_block, parse_iterations, split_row
from spockscan.parsers.grammar import LIFECYCLE_METHODS, BlockLabel
from spockscan.parsers.source import (
    ScanState,
    SpecificationParser,
    advance,
    create_parser,
    parse_specifications,
)
from spockscan.parsers.values import coerce_value, parse_parameters

__all__ = [
    "BlockLabel",
    "LIFECYCLE_METHODS",
    "ScanState",
    "SpecificationParser",
    "advance",
    "coerce_value",
    "create_parser",
    "find_data_block",
    "parse_iterations",
    "parse_parameters",
    "parse_specifications",
    "split_row",
]
