"""JUnit XML report parser for data-driven iteration results.

Gradle and Maven Surefire write one ``TEST-<class>.xml`` per test class.
Each executed iteration of a data-driven feature appears as a testcase
named ``<feature> [<params>, #<index>]``; other testcases (whole-feature
summaries, unrolled custom names) are not iterations and are skipped.

Testcases are found by tag scanning rather than a full XML parse so that
one truncated or malformed testcase costs only that iteration.
"""

from __future__ import annotations

import re
from pathlib import Path
from html import unescape

from spockscan.buildtool import BuildTool, report_path
from spockscan.events import NULL_SINK, EventSink
from spockscan.models import ErrorInfo, TestIterationResult
from spockscan.parsers.values import parse_parameters

_TESTCASE_PATTERN = re.compile(r"<testcase\b(?P<attrs>[^>]*?)(?P<selfclose>/)?>", re.DOTALL)
_ATTRIBUTE_PATTERN = re.compile(r"([\w:.-]+)\s*=\s*(?:\"([^\"]*)\"|'([^']*)')")
_PROBLEM_OPEN_PATTERN = re.compile(r"<(failure|error)\b")
_PROBLEM_PATTERN = re.compile(
    r"<(?P<tag>failure|error)\b(?P<attrs>[^>]*?)"
    r"(?:/>|>(?P<text>.*?)</(?P=tag)\s*>)",
    re.DOTALL,
)
_CDATA_PATTERN = re.compile(r"<!\[CDATA\[(.*?)\]\]>", re.DOTALL)

ITERATION_NAME_PATTERN = re.compile(
    r"^(?P<base>.+?)\s*\[(?P<params>[^\]]+),\s*#(?P<index>\d+)\]$"
)


def _attributes(text: str) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for match in _ATTRIBUTE_PATTERN.finditer(text):
        value = match.group(2) if match.group(2) is not None else match.group(3)
        attrs[match.group(1)] = unescape(value)
    return attrs


def _element_text(raw: str | None) -> str:
    if not raw:
        return ""
    # Odd pieces are CDATA contents, which are taken literally
    pieces = _CDATA_PATTERN.split(raw)
    text = "".join(piece if i % 2 else unescape(piece) for i, piece in enumerate(pieces))
    return text.strip()


class JUnitXMLParser:
    """
    Parser for JUnit XML reports written by Gradle and Maven.

    Only iteration testcases are returned. A testcase containing a
    ``<failure>`` or ``<error>`` element is unsuccessful and carries that
    element's text (or its ``message`` attribute) as the error.
    """

    def __init__(self, sink: EventSink | None = None) -> None:
        self._sink = sink or NULL_SINK

    def parse(self, content: str, source_path: str = "") -> list[TestIterationResult]:
        """
        Parse report content.

        Args:
            content: XML file content.
            source_path: Report path, used only in events.

        Returns:
            Iteration results in document order.
        """
        results: list[TestIterationResult] = []

        for match in _TESTCASE_PATTERN.finditer(content):
            attrs = _attributes(match.group("attrs"))
            name = attrs.get("name", "")
            iteration = ITERATION_NAME_PATTERN.match(name)
            if not iteration:
                continue

            if match.group("selfclose"):
                body = ""
            else:
                close = content.find("</testcase>", match.end())
                following = content.find("<testcase", match.end())
                if close == -1 or (following != -1 and following < close):
                    self._sink.record("testcase.malformed", name=name, report=source_path)
                    continue
                body = content[match.end() : close]

            error_info: ErrorInfo | None = None
            if _PROBLEM_OPEN_PATTERN.search(body):
                problem = _PROBLEM_PATTERN.search(body)
                if not problem:
                    self._sink.record("testcase.malformed", name=name, report=source_path)
                    continue
                message = _element_text(problem.group("text"))
                if not message:
                    message = _attributes(problem.group("attrs")).get("message", problem.group("tag"))
                error_info = ErrorInfo(message)

            try:
                duration = float(attrs.get("time", "0") or 0)
            except ValueError:
                duration = 0.0

            index = int(iteration.group("index"))
            results.append(
                TestIterationResult(
                    index=index,
                    display_name=name,
                    parameters=parse_parameters(iteration.group("params")),
                    success=error_info is None,
                    duration=duration,
                    output=name,
                    error_info=error_info,
                )
            )
            self._sink.record(
                "iteration.found",
                source="xml",
                index=index,
                status="PASSED" if error_info is None else "FAILED",
            )

        return results

    def parse_file(self, path: Path) -> list[TestIterationResult]:
        """
        Parse a report file.

        A missing or unreadable file yields an empty list.
        """
        if not path.is_file():
            self._sink.record("report.missing", path=str(path))
            return []
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            self._sink.record("report.unreadable", path=str(path), error=str(e))
            return []

        results = self.parse(content, str(path))
        self._sink.record("report.parsed", path=str(path), count=len(results))
        return results

    def parse_report(
        self,
        workspace: Path,
        class_name: str,
        build_tool: BuildTool = BuildTool.GRADLE,
        report_dir: str | Path | None = None,
    ) -> list[TestIterationResult]:
        """Parse the conventional report of ``class_name`` in a workspace."""
        return self.parse_file(report_path(workspace, class_name, build_tool, report_dir))

    def can_parse(self, file_path: Path) -> bool:
        """True for XML files named like JUnit reports."""
        return file_path.suffix.lower() == ".xml" and file_path.name.startswith("TEST-")


def iteration_base_name(display_name: str) -> str | None:
    """Feature name of an iteration testcase name, or None."""
    match = ITERATION_NAME_PATTERN.match(display_name)
    return match.group("base") if match else None
