"""Tests for the pysg command."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from pysg.cli.main import cli

MakeTree = Callable[[dict[str, str]], Path]

runner = CliRunner()


@pytest.fixture
def project_tree(make_tree: MakeTree) -> Path:
    return make_tree(
        {
            "pkg/__init__.py": "",
            "pkg/core.py": "def run():\n    return helper()\n\n\ndef helper():\n    return 1\n",
            "pkg/broken.py": "def (\n",
            "pkg/notes.txt": "def not_python():\n    pass\n",
            ".hidden/secret.py": "def secret():\n    pass\n",
            "build/gen.py": "def generated():\n    pass\n",
        }
    )


class TestSearch:
    def test_identifiers_in_file(self, make_tree: MakeTree) -> None:
        root = make_tree({"m.py": "def f():\n    x = 1\n"})
        path = str(root / "m.py")

        result = runner.invoke(cli, ["//Identifier", path])

        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == [f"{path}: f", f"{path}: x"]
        assert result.stderr == ""

    def test_directory_walk(self, project_tree: Path) -> None:
        result = runner.invoke(cli, ["-j", "1", "//FunctionDef/Identifier", str(project_tree)])

        assert result.exit_code == 0
        assert sorted(result.stdout.splitlines()) == [
            f"{project_tree / 'pkg' / 'core.py'}: helper",
            f"{project_tree / 'pkg' / 'core.py'}: run",
        ]

    def test_parse_failure_is_diagnostic_not_fatal(self, project_tree: Path) -> None:
        result = runner.invoke(cli, ["-j", "1", "//FunctionDef/Identifier", str(project_tree)])

        assert result.exit_code == 0
        broken = str(project_tree / "pkg" / "broken.py")
        assert f"{broken}: " in result.stderr
        assert "(line 1" in result.stderr
        assert broken not in result.stdout

    def test_parallel_workers(self, project_tree: Path) -> None:
        result = runner.invoke(cli, ["-j", "2", "//Return", str(project_tree)])

        assert result.exit_code == 0
        assert sorted(result.stdout.splitlines()) == [
            f"{project_tree / 'pkg' / 'core.py'}: return 1",
            f"{project_tree / 'pkg' / 'core.py'}: return helper()",
        ]

    def test_line_numbers(self, project_tree: Path) -> None:
        path = str(project_tree / "pkg" / "core.py")

        result = runner.invoke(cli, ["-n", "//Call", path])

        assert result.stdout.splitlines() == [f"{path}:2: helper()"]

    def test_compound_matches_print_one_line_each(self, project_tree: Path) -> None:
        path = str(project_tree / "pkg" / "core.py")

        result = runner.invoke(cli, ["//FunctionDef", path])

        assert result.stdout.splitlines() == [
            f"{path}: def run(): return helper()",
            f"{path}: def helper(): return 1",
        ]

    def test_scalar_expression(self, project_tree: Path) -> None:
        path = str(project_tree / "pkg" / "core.py")

        result = runner.invoke(cli, ["count(//FunctionDef)", path])

        assert result.stdout == f"{path}: 2\n"

    def test_glob_option(self, project_tree: Path) -> None:
        result = runner.invoke(
            cli, ["-j", "1", "-g", "*.txt", "//FunctionDef/Identifier", str(project_tree)]
        )

        assert result.stdout.splitlines() == [
            f"{project_tree / 'pkg' / 'notes.txt'}: not_python"
        ]

    def test_hidden_and_no_ignore(self, project_tree: Path) -> None:
        result = runner.invoke(
            cli,
            ["-j", "1", "--hidden", "--no-ignore", "//FunctionDef/Identifier", str(project_tree)],
        )

        names = {line.rsplit(": ", 1)[1] for line in result.stdout.splitlines()}
        assert names == {"run", "helper", "secret", "generated"}

    def test_stdin(self) -> None:
        result = runner.invoke(cli, ["//Identifier"], input=b"def f():\n    x = 1\n")

        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["<stdin>: f", "<stdin>: x"]

    def test_stdin_parse_failure(self) -> None:
        result = runner.invoke(cli, ["//Identifier"], input=b"def (\n")

        assert result.exit_code == 0
        assert result.stdout == ""
        assert result.stderr.startswith("<stdin>: ")
        assert "(line 1" in result.stderr


class TestFatalErrors:
    def test_query_syntax_error(self, project_tree: Path) -> None:
        result = runner.invoke(cli, ["//[", str(project_tree)])

        assert result.exit_code == 1
        assert result.stdout == ""
        assert "Error: Invalid expression '//['" in result.stderr

    def test_query_evaluation_error(self, project_tree: Path) -> None:
        path = str(project_tree / "pkg" / "core.py")

        result = runner.invoke(cli, ["//Name[@id=$undefined]", path])

        assert result.exit_code == 1
        assert "Error: Failed to evaluate" in result.stderr

    def test_missing_path(self, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["//Name", str(tmp_path / "nope")])

        assert result.exit_code == 1
        assert "No such file or directory" in result.stderr

    def test_invalid_config(self, isolated_config: Path, project_tree: Path) -> None:
        isolated_config.write_text("search: [not, a, mapping\n")

        result = runner.invoke(cli, ["//Name", str(project_tree)])

        assert result.exit_code == 1
        assert "Failed to parse config" in result.stderr

    def test_zero_workers_is_usage_error(self, project_tree: Path) -> None:
        result = runner.invoke(cli, ["-j", "0", "//Name", str(project_tree)])

        assert result.exit_code == 2


class TestOptions:
    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "pysg, version 0.1.0" in result.stdout

    def test_help_lists_options(self) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        for option in ("--line-number", "--glob", "--hidden", "--no-ignore", "--workers", "--stats"):
            assert option in result.stdout

    def test_stats(self, project_tree: Path) -> None:
        result = runner.invoke(
            cli, ["-j", "1", "--stats", "//FunctionDef/Identifier", str(project_tree)]
        )

        assert result.exit_code == 0
        assert "3 files searched, 1 matched, 1 failed, 2 lines printed" in result.stderr

    def test_env_config_applies(
        self, project_tree: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PYSG__SEARCH__HIDDEN", "true")

        result = runner.invoke(cli, ["-j", "1", "//FunctionDef/Identifier", str(project_tree)])

        assert "secret" in result.stdout

    def test_verbose_logs_to_stderr(self, project_tree: Path) -> None:
        result = runner.invoke(cli, ["-v", "-j", "1", "//Name", str(project_tree)])

        assert result.exit_code == 0
        assert "files_discovered" in result.stderr
