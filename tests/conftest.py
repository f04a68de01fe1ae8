"""Shared pytest fixtures for spockscan tests."""

import os
from pathlib import Path
from typing import Any

import pytest


class CollectingSink:
    """Event sink that keeps every event for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def record(self, event: str, **details: Any) -> None:
        self.events.append((event, details))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]


@pytest.fixture
def sink():
    """Event sink collecting parser events."""
    return CollectingSink()


@pytest.fixture
def calculator_spec():
    """A typical specification with plain, tabular and piped features."""
    return """\
package com.example

import spock.lang.Specification

class CalculatorSpec extends Specification {

    def calculator

    def setup() {
        calculator = new Calculator()
    }

    def "adds two numbers"() {
        given:
        def a = 1

        when:
        def result = calculator.add(a, 2)

        then:
        result == 3
    }

    def "maximum of #a and #b is #c"() {
        expect:
        Math.max(a, b) == c

        where:
        a | b || c
        1 | 3 || 3
        7 | 4 || 7
    }

    def squares() {
        expect:
        x * x == y

        where:
        x << [1, 2, 3]
        y << [1, 4, 9]
    }

    def helper(int value) {
        return value * 2
    }

    def cleanup() {
        calculator = null
    }
}
"""


@pytest.fixture
def write_report(tmp_path):
    """Factory writing a Gradle XML report for a class into tmp_path."""

    def _write(class_name: str, testcases: str, workspace: Path = tmp_path) -> Path:
        report_dir = workspace / "build" / "test-results" / "test"
        report_dir.mkdir(parents=True, exist_ok=True)
        path = report_dir / f"TEST-{class_name}.xml"
        path.write_text(
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<testsuite name="{class_name}" tests="1">\n'
            f"{testcases}\n"
            "</testsuite>\n",
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep SPOCKSCAN_* variables from the caller's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("SPOCKSCAN_"):
            monkeypatch.delenv(name)


@pytest.fixture
def gradle_workspace(tmp_path, calculator_spec):
    """A Gradle workspace with one specification and one abstract base."""
    (tmp_path / "build.gradle").write_text("apply plugin: 'groovy'\n", encoding="utf-8")
    (tmp_path / "settings.gradle").write_text("rootProject.name = 'calc'\n", encoding="utf-8")
    spec_dir = tmp_path / "src" / "test" / "groovy" / "com" / "example"
    spec_dir.mkdir(parents=True)
    (spec_dir / "CalculatorSpec.groovy").write_text(calculator_spec, encoding="utf-8")
    (spec_dir / "BaseSpec.groovy").write_text(
        "abstract class BaseSpec extends Specification {\n"
        '    def "shared feature"() {\n'
        "        expect:\n"
        "        true\n"
        "    }\n"
        "}\n",
        encoding="utf-8",
    )
    (spec_dir / "Helper.groovy").write_text("class Helper {}\n", encoding="utf-8")
    return tmp_path
