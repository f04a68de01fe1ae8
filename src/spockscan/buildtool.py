"""
spockscan.buildtool - Build tool detection, report layout and commands.

Only command construction lives here; running the build tool is left to
callers.
"""

from __future__ import annotations

import re
import time
from enum import Enum
from pathlib import Path


class BuildTool(str, Enum):
    """Supported build tools."""

    GRADLE = "gradle"
    MAVEN = "maven"


GRADLE_BUILD_FILES = ("build.gradle", "build.gradle.kts")
GRADLE_REPORT_DIR = Path("build") / "test-results" / "test"
MAVEN_REPORT_DIR = Path("target") / "surefire-reports"
GRADLE_DEBUG_PORT = 5005

_GRADLE_NAME_PATTERNS = (
    re.compile(r"rootProject\.name\s*=\s*['\"]([^'\"]+)['\"]"),
    re.compile(r"\bname\s*=\s*['\"]([^'\"]+)['\"]"),
)
_MAVEN_ARTIFACT_PATTERN = re.compile(r"<artifactId>([^<]+)</artifactId>")


def detect_build_tool(workspace: Path) -> BuildTool | None:
    """
    Detect the build tool of a workspace from its build files.

    Gradle wins when both Gradle and Maven build files are present.
    """
    if any((workspace / name).exists() for name in GRADLE_BUILD_FILES):
        return BuildTool.GRADLE
    if (workspace / "pom.xml").exists():
        return BuildTool.MAVEN
    return None


def get_project_name(workspace: Path) -> str:
    """
    Read the project name from the build files.

    Falls back to the workspace directory name when no name is declared or
    the build files cannot be read.
    """
    try:
        for name in ("settings.gradle", "settings.gradle.kts", *GRADLE_BUILD_FILES):
            gradle_file = workspace / name
            if not gradle_file.is_file():
                continue
            content = gradle_file.read_text(encoding="utf-8", errors="replace")
            for pattern in _GRADLE_NAME_PATTERNS:
                match = pattern.search(content)
                if match:
                    return match.group(1)

        pom = workspace / "pom.xml"
        if pom.is_file():
            match = _MAVEN_ARTIFACT_PATTERN.search(pom.read_text(encoding="utf-8", errors="replace"))
            if match:
                return match.group(1).strip()
    except OSError:
        pass

    return workspace.name


def has_gradle_wrapper(workspace: Path) -> bool:
    return (workspace / "gradlew").exists()


def report_dir(build_tool: BuildTool) -> Path:
    """Conventional report directory, relative to the workspace."""
    return GRADLE_REPORT_DIR if build_tool == BuildTool.GRADLE else MAVEN_REPORT_DIR


def report_path(
    workspace: Path,
    class_name: str,
    build_tool: BuildTool = BuildTool.GRADLE,
    override_dir: str | Path | None = None,
) -> Path:
    """
    Path of the XML report written for one test class.

    Args:
        workspace: Workspace root.
        class_name: Class name as passed to the build tool.
        build_tool: Determines the conventional report directory.
        override_dir: Report directory relative to the workspace, if configured.
    """
    directory = Path(override_dir) if override_dir else report_dir(build_tool)
    return workspace / directory / f"TEST-{class_name}.xml"


def build_command_args(
    build_tool: BuildTool,
    test_filter: str,
    debug: bool = False,
    debug_port: int | None = None,
    workspace: Path | None = None,
    timestamp: int | None = None,
) -> list[str]:
    """
    Build the command line that runs one test filter.

    A timestamp system property is appended so the build tool never treats
    the test task as up to date.

    Args:
        build_tool: Gradle or Maven.
        test_filter: ``Class`` or ``Class.method`` filter.
        debug: Suspend the test JVM for a debugger.
        debug_port: Debug port for Maven (Gradle always uses 5005).
        workspace: Used to prefer ``./gradlew`` when a wrapper exists.
        timestamp: Milliseconds since the epoch; defaults to now.

    Returns:
        Program and arguments.
    """
    stamp = timestamp if timestamp is not None else int(time.time() * 1000)

    if build_tool == BuildTool.GRADLE:
        program = "./gradlew" if workspace is not None and has_gradle_wrapper(workspace) else "gradle"
        args = [program, "test", "--tests", test_filter]
        if debug:
            args.append("--debug-jvm")
        args.append(f"-Dorg.gradle.jvmargs=-Dtest.timestamp={stamp}")
        return args

    args = ["mvn", "test", f"-Dtest={test_filter}", f"-Dtest.timestamp={stamp}"]
    if debug and debug_port:
        args.append(
            "-Dmaven.surefire.debug=-agentlib:jdwp=transport=dt_socket,"
            f"server=y,suspend=y,address={debug_port}"
        )
    return args
