"""
Tests for the spockscan command-line interface.
"""

import json

import pytest

from spockscan.cli import create_parser, main


class TestParser:
    """Tests for argument parsing."""

    def test_results_requires_class_and_test(self):
        parser = create_parser()

        with pytest.raises(SystemExit):
            parser.parse_args(["results", "--class", "FooSpec"])

    def test_discover_defaults(self):
        args = create_parser().parse_args(["discover"])

        assert args.paths == []
        assert args.no_data is False
        assert args.json is False


class TestMain:
    """Tests for main() dispatch."""

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: spockscan" in capsys.readouterr().out

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert capsys.readouterr().out.startswith("spockscan ")

    def test_config_error_reported(self, tmp_path, capsys):
        """Invalid configuration exits with 1 and an error line."""
        bad = tmp_path / "bad.toml"
        bad.write_text("[results\n")

        code = main(["--config", str(bad), "discover", "--workspace", str(tmp_path)])

        assert code == 1
        assert capsys.readouterr().err.startswith("Error: Invalid TOML")


class TestDiscoverCommand:
    """Tests for `spockscan discover`."""

    def test_text_output(self, gradle_workspace, capsys, monkeypatch):
        monkeypatch.chdir(gradle_workspace)

        assert main(["discover"]) == 0

        out = capsys.readouterr().out
        assert "  CalculatorSpec  [line 5]" in out
        assert "  BaseSpec (abstract)  [line 1]" in out
        assert "    - maximum of #a and #b is #c  [2 iteration(s)]" in out
        assert "        #1 maximum of 7 and 4 is 7" in out
        assert "3 feature(s) in 2 file(s) (2 scanned)" in out

    def test_json_output(self, gradle_workspace, capsys):
        code = main(["discover", "--workspace", str(gradle_workspace), "-j"])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["filesScanned"] == 2
        assert data["testCount"] == 3
        assert data["errors"] == []

    def test_explicit_paths(self, gradle_workspace, capsys):
        spec = gradle_workspace / "src/test/groovy/com/example/CalculatorSpec.groovy"

        code = main(["discover", "--workspace", str(gradle_workspace), "-j", str(spec)])

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert [c["name"] for c in data["files"][0]["classes"]] == ["CalculatorSpec"]

    def test_missing_path_is_error(self, tmp_path, capsys):
        code = main(["discover", "--workspace", str(tmp_path), str(tmp_path / "Nope.groovy")])

        captured = capsys.readouterr()
        assert code == 1
        assert "Error:" in captured.err
        assert "0 feature(s) in 0 file(s) (0 scanned)" in captured.out


class TestResultsCommand:
    """Tests for `spockscan results`."""

    def test_report_results(self, tmp_path, write_report, capsys):
        write_report(
            "MathSpec",
            '<testcase name="max [a: 1, #0]" time="0.25"/>\n'
            '<testcase name="max [a: 2, #1]" time="0.5"><failure>Condition not satisfied:</failure></testcase>',
        )

        code = main(["results", "--class", "MathSpec", "--test", "max", "--workspace", str(tmp_path)])

        out = capsys.readouterr().out
        assert code == 1
        assert "✓ #0 max [a: 1, #0] (0.250s)" in out
        assert "✗ #1 max [a: 2, #1] (0.500s)" in out
        assert "    Condition not satisfied:" in out
        assert "1 passed, 1 failed" in out

    def test_other_features_in_report_not_shown(self, tmp_path, write_report, capsys):
        """Only iterations of the requested feature are listed."""
        write_report(
            "MathSpec",
            '<testcase name="max [a: 1, #0]"/>\n<testcase name="min [a: 1, #0]"/>',
        )

        code = main(["results", "--class", "MathSpec", "--test", "max", "--workspace", str(tmp_path)])

        out = capsys.readouterr().out
        assert code == 0
        assert "max [a: 1, #0]" in out
        assert "min [a: 1, #0]" not in out
        assert "1 passed, 0 failed" in out

    def test_console_file_json(self, tmp_path, capsys):
        log = tmp_path / "build.log"
        log.write_text("MathSpec > max [a: 1, #0] PASSED\n")

        code = main(
            [
                "results",
                "--class",
                "MathSpec",
                "--test",
                "max",
                "--console",
                str(log),
                "--workspace",
                str(tmp_path),
                "--build-tool",
                "maven",
                "-j",
            ]
        )

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["buildTool"] == "maven"
        assert data["failed"] == 0
        assert data["results"][0]["parameters"] == {"a": 1}

    def test_console_from_stdin(self, tmp_path, capsys, monkeypatch):
        import io

        monkeypatch.setattr("sys.stdin", io.StringIO("S > max [a: 1, #0] FAILED\n"))

        code = main(
            ["results", "--class", "S", "--test", "max", "--console", "-", "--workspace", str(tmp_path)]
        )

        assert code == 1
        assert "Iteration 0 FAILED" in capsys.readouterr().out

    def test_nothing_found(self, tmp_path, capsys):
        code = main(["results", "--class", "S", "--test", "max", "--workspace", str(tmp_path)])

        assert code == 0
        assert "No iteration results found for S.max" in capsys.readouterr().out


class TestCommandCommand:
    """Tests for `spockscan command`."""

    def test_gradle_debug(self, gradle_workspace, capsys):
        code = main(
            [
                "command",
                "--class",
                "CalculatorSpec",
                "--test",
                "adds two numbers",
                "--workspace",
                str(gradle_workspace),
                "--debug",
            ]
        )

        out = capsys.readouterr().out
        assert code == 0
        assert out.startswith("gradle test --tests 'CalculatorSpec.adds two numbers' --debug-jvm ")

    def test_maven_debug_requires_port(self, tmp_path, capsys):
        (tmp_path / "pom.xml").write_text("<project/>")

        code = main(["command", "--class", "FooSpec", "--workspace", str(tmp_path), "--debug"])

        assert code == 1
        assert "--port is required" in capsys.readouterr().err

    def test_maven_command(self, tmp_path, capsys):
        (tmp_path / "pom.xml").write_text("<project/>")

        code = main(["command", "--class", "FooSpec", "--workspace", str(tmp_path)])

        assert code == 0
        assert capsys.readouterr().out.startswith("mvn test -Dtest=FooSpec -Dtest.timestamp=")
