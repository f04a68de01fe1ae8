"""
spockscan.results.reconcile - Combine report and console results.

The XML report carries real durations and failure text, so it is preferred.
Console text is the fallback for configurations that write no report.
"""

from __future__ import annotations

from pathlib import Path

from spockscan.buildtool import BuildTool
from spockscan.events import NULL_SINK, EventSink
from spockscan.models import TestIterationResult
from spockscan.results.console import parse_console_output
from spockscan.results.junit_xml import JUnitXMLParser


class ResultParser:
    """
    Extracts per-iteration results for one feature method.

    Attributes are configuration only; every call works on its own inputs.
    """

    def __init__(
        self,
        sink: EventSink | None = None,
        build_tool: BuildTool = BuildTool.GRADLE,
        report_dir: str | Path | None = None,
    ) -> None:
        """
        Initialize the parser.

        Args:
            sink: Receiver for diagnostic events.
            build_tool: Selects the conventional report location.
            report_dir: Report directory relative to the workspace, overriding
                the build tool's convention.
        """
        self._sink = sink or NULL_SINK
        self._build_tool = build_tool
        self._report_dir = report_dir
        self._xml = JUnitXMLParser(self._sink)

    def parse_console_output(self, text: str, method_name: str) -> list[TestIterationResult]:
        """Iteration results for ``method_name`` found in console text."""
        return parse_console_output(text, method_name, self._sink)

    def parse_xml_report(self, workspace: str | Path, class_name: str) -> list[TestIterationResult]:
        """
        Iteration results from the report of ``class_name``.

        A missing or unreadable report is not an error and yields [].
        """
        return self._xml.parse_report(
            Path(workspace), class_name, self._build_tool, self._report_dir
        )

    def parse_test_results(
        self,
        console_text: str,
        test_name: str,
        class_name: str,
        workspace: str | Path,
    ) -> list[TestIterationResult]:
        """
        Results for one feature method, preferring the XML report.

        Report iterations are returned unchanged when there is at least one;
        otherwise the console text is parsed for ``test_name``. Matching report
        iterations to a feature is left to the caller.

        Args:
            console_text: Captured build tool output.
            test_name: Feature method name.
            class_name: Class name the report file is keyed by.
            workspace: Workspace root containing the build output.

        Returns:
            Iteration results from exactly one of the two sources.
        """
        xml_results = self.parse_xml_report(workspace, class_name)
        if xml_results:
            self._sink.record("results.source", source="xml", count=len(xml_results))
            return xml_results

        console_results = self.parse_console_output(console_text, test_name)
        self._sink.record("results.source", source="console", count=len(console_results))
        return console_results


def create_parser(
    sink: EventSink | None = None,
    build_tool: BuildTool = BuildTool.GRADLE,
    report_dir: str | Path | None = None,
) -> ResultParser:
    """Factory function to create a ResultParser."""
    return ResultParser(sink, build_tool, report_dir)
