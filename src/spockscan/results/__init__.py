"""Result parsers for console output and JUnit XML reports."""

from spockscan.results.console import parse_console_output, parse_test_error
from spockscan.results.junit_xml import JUnitXMLParser
from spockscan.results.reconcile import ResultParser, create_parser

__all__ = [
    "JUnitXMLParser",
    "ResultParser",
    "create_parser",
    "parse_console_output",
    "parse_test_error",
]
