"""
spockscan.commands.results - Show per-iteration results of one feature.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from spockscan.config import get_config, resolve_build_tool
from spockscan.events import LoggingEventSink
from spockscan.results import ResultParser
from spockscan.results.junit_xml import iteration_base_name


def run(args: argparse.Namespace) -> int:
    """Run the results command.

    Returns:
        0 when every iteration passed, 1 when any failed or input could
        not be read.
    """
    workspace = (getattr(args, "workspace", None) or Path.cwd()).resolve()
    config = get_config(getattr(args, "config", None), start=workspace)
    if getattr(args, "build_tool", None):
        config.setdefault("results", {})["build_tool"] = args.build_tool
    build_tool = resolve_build_tool(config, workspace)

    console_text = ""
    console = getattr(args, "console", None)
    if console == "-":
        console_text = sys.stdin.read()
    elif console:
        try:
            console_text = Path(console).read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            print(f"Error: Cannot read console output {console}: {e}", file=sys.stderr)
            return 1

    parser = ResultParser(
        sink=LoggingEventSink(logging.getLogger("spockscan.results")),
        build_tool=build_tool,
        report_dir=config.get("results", {}).get("report_dir") or None,
    )
    results = [
        result
        for result in parser.parse_test_results(
            console_text, args.test_name, args.class_name, workspace
        )
        # The class report also lists the other features of the class
        if iteration_base_name(result.display_name) == args.test_name
    ]
    failed = [r for r in results if not r.success]

    if getattr(args, "json", False):
        print(
            json.dumps(
                {
                    "class": args.class_name,
                    "test": args.test_name,
                    "buildTool": build_tool.value,
                    "results": [r.to_dict() for r in results],
                    "failed": len(failed),
                },
                indent=2,
            )
        )
    elif not getattr(args, "quiet", False):
        if not results:
            print(f"No iteration results found for {args.class_name}.{args.test_name}")
        for result in results:
            mark = "✓" if result.success else "✗"
            line = f"{mark} #{result.index} {result.display_name}"
            if result.duration:
                line += f" ({result.duration:.3f}s)"
            print(line)
            if result.error_info:
                print(f"    {result.error_info.error}")
        if results:
            print(f"{len(results) - len(failed)} passed, {len(failed)} failed")

    return 1 if failed else 0
