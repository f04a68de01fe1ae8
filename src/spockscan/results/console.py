"""
spockscan.results.console - Iteration results from build tool console text.

Gradle prints one line per executed iteration, e.g.::

    DataDrivenSpec > maximum of two numbers [a: 1, b: 3, c: 3, #0] PASSED

Durations are not part of this format and are always reported as 0.
"""

from __future__ import annotations

import re

from spockscan.events import NULL_SINK, EventSink
from spockscan.models import ErrorInfo, ErrorLocation, TestIterationResult
from spockscan.parsers.values import parse_parameters

STATUSES = ("PASSED", "FAILED", "SKIPPED")

_STACK_FRAME_PATTERN = re.compile(r"at\s+.*\((?P<file>[^()]+\.groovy):(?P<line>\d+)\)")

DEFAULT_ERROR = "Test execution failed"


def iteration_line_pattern(method_name: str) -> re.Pattern[str]:
    """Pattern matching console lines for iterations of one method."""
    return re.compile(
        rf"^.*>\s*{re.escape(method_name)}\s*\[(?P<params>[^\]]+),\s*#(?P<index>\d+)\]"
        rf"\s*(?P<status>{'|'.join(STATUSES)})"
    )


def parse_console_output(
    text: str,
    method_name: str,
    sink: EventSink = NULL_SINK,
) -> list[TestIterationResult]:
    """
    Extract iteration results for one method from console text.

    Args:
        text: Captured stdout/stderr of the build tool.
        method_name: Feature method name, matched literally.
        sink: Receiver for diagnostic events.

    Returns:
        Results in the order their lines appear.
    """
    pattern = iteration_line_pattern(method_name)
    results: list[TestIterationResult] = []

    for line in text.split("\n"):
        match = pattern.match(line.rstrip("\r"))
        if not match:
            continue

        params = match.group("params")
        index = int(match.group("index"))
        status = match.group("status")
        success = status == "PASSED"

        results.append(
            TestIterationResult(
                index=index,
                display_name=f"{method_name} [{params}, #{index}]",
                parameters=parse_parameters(params),
                success=success,
                duration=0.0,
                output=line.strip(),
                error_info=None if success else ErrorInfo(f"Iteration {index} {status}"),
            )
        )
        sink.record("iteration.found", source="console", index=index, status=status)

    sink.record("console.parsed", method=method_name, count=len(results))
    return results


def parse_test_error(output: str) -> ErrorInfo:
    """
    Summarize why a build tool run failed.

    The last matching diagnostic line wins: a FAILED test line, a Spock
    condition/assertion failure, or a Spock/Groovy exception. Without any,
    the first line mentioning an exception, error or failure is used. The
    last ``.groovy`` stack frame supplies the location (0-based line).
    """
    lines = output.split("\n")
    message = DEFAULT_ERROR
    location: ErrorLocation | None = None

    for line in lines:
        if "FAILED" in line and ("Test" in line or "Spec" in line):
            message = line.strip()
        if "Condition not satisfied:" in line or "Assertion failed:" in line:
            message = line.strip()
        if "spock.lang.Specification" in line or "groovy.lang.MissingMethodException" in line:
            message = line.strip()
        if ".groovy:" in line and "at " in line:
            frame = _STACK_FRAME_PATTERN.search(line)
            if frame:
                location = ErrorLocation(frame.group("file"), int(frame.group("line")) - 1)

    if message == DEFAULT_ERROR:
        for line in lines:
            if "Exception" in line or "Error" in line or "failed" in line:
                message = line.strip()
                break

    return ErrorInfo(message, location)
