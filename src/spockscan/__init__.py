"""
spockscan - Spock specification discovery and result reconciliation

spockscan reads Groovy source files, recovers Spock specification classes,
feature methods and data-driven iterations without a full grammar, and
matches the iterations reported by Gradle or Maven (JUnit XML reports or
console output) back to them.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("spockscan")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from spockscan.events import EventSink, LoggingEventSink, NullEventSink
from spockscan.models import (
    DataIteration,
    ErrorInfo,
    SourceRange,
    TestClass,
    TestIterationResult,
    TestMethod,
)
from spockscan.parsers import SpecificationParser, parse_specifications
from spockscan.results import ResultParser

__all__ = [
    "__version__",
    "DataIteration",
    "ErrorInfo",
    "EventSink",
    "LoggingEventSink",
    "NullEventSink",
    "ResultParser",
    "SourceRange",
    "SpecificationParser",
    "TestClass",
    "TestIterationResult",
    "TestMethod",
    "parse_specifications",
]
