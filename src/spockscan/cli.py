"""
spockscan.cli - Command-line interface.

Main entry point for the spockscan CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from spockscan import __version__
from spockscan.commands import command_cmd, discover, results
from spockscan.errors import SpockscanError


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="spockscan",
        description="Discover Spock specifications and reconcile test results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spockscan discover                         # Scan configured test directories
  spockscan discover src/test/groovy/FooSpec.groovy -j
  spockscan results --class FooSpec --test "adds numbers" --console build.log
  spockscan command --class FooSpec --test "adds numbers" --debug

Configuration:
  .spockscan.toml in the working directory or any parent, e.g.

    [discovery]
    test_dirs = ["src/test/groovy"]
    patterns = ["**/*Spec.groovy"]

    [results]
    build_tool = "auto"   # or "gradle", "maven"

  Any key can be overridden with SPOCKSCAN_<SECTION>_<KEY>.

For detailed command help: spockscan <command> --help
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"spockscan {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output (parser events on stderr)",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # discover command
    discover_parser = subparsers.add_parser(
        "discover",
        help="List specification classes, features and data iterations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  spockscan discover                    # Scan the configured workspace
  spockscan discover FooSpec.groovy     # Parse specific files
  spockscan discover --workspace ../app # Scan another workspace
  spockscan discover -j                 # Output JSON for tooling
""",
    )
    discover_parser.add_argument(
        "paths",
        nargs="*",
        type=Path,
        help="Source files to parse (default: scan the workspace)",
    )
    discover_parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help="Workspace root (default: current directory)",
        metavar="DIR",
    )
    discover_parser.add_argument(
        "--no-data",
        action="store_true",
        help="Skip where-block parsing",
    )
    discover_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )

    # results command
    results_parser = subparsers.add_parser(
        "results",
        help="Per-iteration results of a feature from reports or console output",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
The XML report of the class is preferred. Console output is only parsed
when the report has no iterations for the feature.

Examples:
  spockscan results --class com.example.FooSpec --test "max of #a and #b"
  gradle test 2>&1 | spockscan results --class FooSpec --test max --console -
""",
    )
    results_parser.add_argument(
        "--class",
        dest="class_name",
        required=True,
        help="Class name the report file is keyed by",
        metavar="NAME",
    )
    results_parser.add_argument(
        "--test",
        dest="test_name",
        required=True,
        help="Feature method name",
        metavar="NAME",
    )
    results_parser.add_argument(
        "--console",
        help="File with captured build output ('-' for stdin)",
        metavar="FILE",
    )
    results_parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help="Workspace root (default: current directory)",
        metavar="DIR",
    )
    results_parser.add_argument(
        "--build-tool",
        choices=["auto", "gradle", "maven"],
        help="Override results.build_tool",
    )
    results_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )

    # command command
    command_parser = subparsers.add_parser(
        "command",
        help="Print the build tool command that runs a class or feature",
    )
    command_parser.add_argument(
        "--class",
        dest="class_name",
        required=True,
        help="Class name to run",
        metavar="NAME",
    )
    command_parser.add_argument(
        "--test",
        dest="test_name",
        help="Feature method name (default: whole class)",
        metavar="NAME",
    )
    command_parser.add_argument(
        "--workspace",
        type=Path,
        default=None,
        help="Workspace root (default: current directory)",
        metavar="DIR",
    )
    command_parser.add_argument(
        "--build-tool",
        choices=["auto", "gradle", "maven"],
        help="Override results.build_tool",
    )
    command_parser.add_argument(
        "--debug",
        action="store_true",
        help="Suspend the test JVM for a debugger",
    )
    command_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Debug port (Maven only; Gradle uses 5005)",
    )

    # version command
    subparsers.add_parser("version", help="Show version information")

    return parser


def configure_logging(args: argparse.Namespace) -> None:
    """Route parser events to stderr according to -v/-q."""
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install spockscan[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    configure_logging(args)

    try:
        if args.command == "discover":
            return discover.run(args)
        elif args.command == "results":
            return results.run(args)
        elif args.command == "command":
            return command_cmd.run(args)
        elif args.command == "version":
            print(f"spockscan {__version__}")
            return 0
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except SpockscanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
