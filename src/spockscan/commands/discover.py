"""
spockscan.commands.discover - List discovered specifications.

- `spockscan discover` - scan the configured test directories
- `spockscan discover FILE...` - parse the given files only
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from spockscan.config import get_config
from spockscan.events import LoggingEventSink
from spockscan.models import TestClass
from spockscan.scanner import FileScanResult, ScanResult, WorkspaceScanner


def run(args: argparse.Namespace) -> int:
    """Run the discover command."""
    workspace = (getattr(args, "workspace", None) or Path.cwd()).resolve()
    config = get_config(getattr(args, "config", None), start=workspace)
    sink = LoggingEventSink(logging.getLogger("spockscan.discover"))
    scanner = WorkspaceScanner.from_config(
        config, sink=sink, with_data=not getattr(args, "no_data", False)
    )

    paths: list[Path] = getattr(args, "paths", None) or []
    if paths:
        result = ScanResult()
        for path in paths:
            try:
                file_result = scanner.scan_file(path)
            except OSError as e:
                result.errors.append(f"{path}: {e}")
                continue
            result.files_scanned += 1
            if file_result.classes:
                result.files.append(file_result)
    else:
        result = scanner.scan(workspace)

    for error in result.errors:
        print(f"Error: {error}", file=sys.stderr)

    if getattr(args, "json", False):
        print(
            json.dumps(
                {
                    "files": [f.to_dict() for f in result.files],
                    "filesScanned": result.files_scanned,
                    "testCount": result.test_count,
                    "errors": result.errors,
                },
                indent=2,
            )
        )
    elif not getattr(args, "quiet", False):
        for file_result in result.files:
            _print_file(file_result, workspace)
        print(
            f"{result.test_count} feature(s) in {len(result.files)} file(s) "
            f"({result.files_scanned} scanned)"
        )

    return 1 if result.errors else 0


def _print_file(file_result: FileScanResult, workspace: Path) -> None:
    try:
        shown = file_result.path.resolve().relative_to(workspace)
    except ValueError:
        shown = file_result.path
    print(str(shown))
    for test_class in file_result.classes:
        _print_class(test_class)


def _print_class(test_class: TestClass) -> None:
    suffix = " (abstract)" if test_class.is_abstract else ""
    print(f"  {test_class.name}{suffix}  [line {test_class.declaration_line + 1}]")
    for method in test_class.methods:
        if method.is_data_driven:
            count = len(method.data_iterations or ())
            print(f"    - {method.name}  [{count} iteration(s)]")
            for iteration in method.data_iterations or ():
                print(f"        #{iteration.index} {iteration.display_name}")
        else:
            print(f"    - {method.name}")
