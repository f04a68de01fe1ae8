"""
spockscan.commands.command_cmd - Print the build tool command for a test.
"""

from __future__ import annotations

import argparse
import shlex
import sys
from pathlib import Path

from spockscan.buildtool import GRADLE_DEBUG_PORT, BuildTool, build_command_args
from spockscan.config import get_config, resolve_build_tool
from spockscan.identity import build_test_filter


def run(args: argparse.Namespace) -> int:
    """Run the command command."""
    workspace = (getattr(args, "workspace", None) or Path.cwd()).resolve()
    config = get_config(getattr(args, "config", None), start=workspace)
    if getattr(args, "build_tool", None):
        config.setdefault("results", {})["build_tool"] = args.build_tool
    build_tool = resolve_build_tool(config, workspace)

    debug = getattr(args, "debug", False)
    port = getattr(args, "port", None)
    if debug and build_tool == BuildTool.GRADLE:
        port = GRADLE_DEBUG_PORT
    elif debug and not port:
        print("Error: --port is required to debug with Maven", file=sys.stderr)
        return 1

    command = build_command_args(
        build_tool,
        build_test_filter(args.class_name, getattr(args, "test_name", None)),
        debug=debug,
        debug_port=port,
        workspace=workspace,
    )
    print(shlex.join(command))
    return 0
