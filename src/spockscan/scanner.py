"""
spockscan.scanner - Workspace scanner for Spock specification files.

Globs the configured test directories for specification sources, parses
each file independently, and collects the discovered classes per file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from spockscan.events import NULL_SINK, EventSink
from spockscan.identity import runnable_classes
from spockscan.models import TestClass
from spockscan.parsers.source import SpecificationParser


@dataclass
class FileScanResult:
    """
    Classes discovered in one source file.

    Attributes:
        path: Path to the source file
        classes: Specification classes in declaration order
    """

    path: Path
    classes: list[TestClass] = field(default_factory=list)

    @property
    def test_count(self) -> int:
        """Feature methods in runnable classes."""
        return sum(len(cls.methods) for cls in runnable_classes(self.classes))

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "classes": [cls.to_dict() for cls in self.classes],
        }


@dataclass
class ScanResult:
    """
    Result of scanning a workspace.

    Attributes:
        files: Files that declare at least one specification class
        files_scanned: Number of candidate files read
        errors: Files that could not be read, with the reason
    """

    files: list[FileScanResult] = field(default_factory=list)
    files_scanned: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def test_count(self) -> int:
        return sum(f.test_count for f in self.files)


class WorkspaceScanner:
    """
    Finds and parses specification files under a workspace.
    """

    def __init__(
        self,
        test_dirs: list[str] | None = None,
        patterns: list[str] | None = None,
        ignore: list[str] | None = None,
        sink: EventSink | None = None,
        with_data: bool = True,
    ) -> None:
        """
        Initialize the scanner.

        Args:
            test_dirs: Glob patterns for test directories, relative to the
                workspace ("." or "" for the workspace itself).
            patterns: File glob patterns within each test directory.
            ignore: Directory names whose contents are skipped.
            sink: Receiver for diagnostic events.
            with_data: Recover data iterations for data-driven methods.
        """
        self._test_dirs = test_dirs or ["."]
        self._patterns = patterns or ["**/*.groovy"]
        self._ignore = set(ignore or [])
        self._sink = sink or NULL_SINK
        self._parser = SpecificationParser(self._sink, with_data)

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        sink: EventSink | None = None,
        with_data: bool = True,
    ) -> WorkspaceScanner:
        """Create a scanner from the ``[discovery]`` config section."""
        discovery = config.get("discovery", {})
        return cls(
            test_dirs=discovery.get("test_dirs"),
            patterns=discovery.get("patterns"),
            ignore=discovery.get("ignore"),
            sink=sink,
            with_data=with_data,
        )

    def candidate_files(self, base_path: Path) -> list[Path]:
        """Source files matching the configured directories and patterns."""
        seen: set[Path] = set()
        files: list[Path] = []

        for dir_pattern in self._test_dirs:
            if dir_pattern in (".", ""):
                dirs_to_scan = [base_path]
            else:
                dirs_to_scan = sorted(base_path.glob(dir_pattern))

            for test_dir in dirs_to_scan:
                if not test_dir.is_dir():
                    continue
                for file_pattern in self._patterns:
                    for source_file in sorted(test_dir.glob(file_pattern)):
                        if source_file in seen or not source_file.is_file():
                            continue
                        relative = source_file.relative_to(base_path).parts[:-1]
                        if any(part in self._ignore for part in relative):
                            continue
                        seen.add(source_file)
                        files.append(source_file)

        return files

    def scan_file(self, file_path: Path) -> FileScanResult:
        """
        Parse a single file.

        Raises:
            OSError: If the file cannot be read.
        """
        content = file_path.read_text(encoding="utf-8", errors="replace")
        return FileScanResult(file_path, self._parser.parse(content))

    def scan(self, base_path: Path) -> ScanResult:
        """
        Scan a workspace for specification classes.

        Args:
            base_path: Workspace root.

        Returns:
            ScanResult with one entry per file that declares a class.
        """
        result = ScanResult()

        for source_file in self.candidate_files(base_path):
            try:
                file_result = self.scan_file(source_file)
            except OSError as e:
                result.errors.append(f"{source_file}: {e}")
                self._sink.record("file.unreadable", path=str(source_file), error=str(e))
                continue

            result.files_scanned += 1
            if file_result.classes:
                result.files.append(file_result)
            self._sink.record(
                "file.scanned", path=str(source_file), classes=len(file_result.classes)
            )

        return result
