"""Tests for the nestlint command line.

Test checking single files and directory trees, text and JSON output,
strict mode, AST dumps, and the argument-parsing entry point.
"""

import json
from pathlib import Path

import pytest

from nestlint.cli import (
    EXIT_FILE_ERROR,
    EXIT_SUCCESS,
    EXIT_VALIDATION_ERRORS,
    check_directory,
    check_file,
    discover_files,
    dump_ast,
    run_check,
)

# =============================================================================
# Sample Nestfiles for Testing
# =============================================================================

VALID_SOURCE = """\
build:
    script: make
dev:
    lint:
        script: ruff check
"""

INVALID_SOURCE = """\
deploy(target: string):
    script: make deploy
"""

WARNING_SOURCE = """\
build:
    desc: Nothing to run
"""


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep user configuration out of the checks."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)


# =============================================================================
# check_file Tests
# =============================================================================


class TestCheckFile:
    """Test check_file function."""

    def test_check_valid_file(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A valid file succeeds silently."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert check_file(nestfile) == EXIT_SUCCESS
        assert capsys.readouterr().out == ""

    def test_check_invalid_file(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Errors are printed and fail the check."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(INVALID_SOURCE)

        assert check_file(nestfile) == EXIT_VALIDATION_ERRORS
        output = capsys.readouterr().out
        assert "error[E0105]" in output
        assert f"--> {nestfile}:1:16" in output
        assert f"Found 1 error in {nestfile}" in output

    def test_check_file_not_found(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A missing file is a file error."""
        assert check_file(tmp_path / "nonexistent") == EXIT_FILE_ERROR
        assert "error: file not found" in capsys.readouterr().err

    def test_check_directory_as_file(self, tmp_path: Path) -> None:
        """A directory is not a file."""
        assert check_file(tmp_path) == EXIT_FILE_ERROR

    def test_warnings_pass_unless_strict(self, tmp_path: Path) -> None:
        """Warnings fail the check only in strict mode."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(WARNING_SOURCE)

        assert check_file(nestfile) == EXIT_SUCCESS
        assert check_file(nestfile, strict=True) == EXIT_VALIDATION_ERRORS

    def test_check_json_output(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """JSON output carries diagnostics and stats."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(INVALID_SOURCE)

        assert check_file(nestfile, json_output=True) == EXIT_VALIDATION_ERRORS
        report = json.loads(capsys.readouterr().out)
        assert report["valid"] is False
        assert report["diagnostics"][0]["code"] == "E0105"
        assert report["counts"] == {"error": 1, "warning": 0, "information": 0}
        assert report["stats"] == {"commands": 1, "imports": 0}

    def test_check_verbose_output(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Verbose mode reports valid files."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        check_file(nestfile, verbose=True)

        assert capsys.readouterr().out == f"{nestfile}: valid (3 commands)\n"


# =============================================================================
# check_directory Tests
# =============================================================================


class TestCheckDirectory:
    """Test directory discovery and checks."""

    def test_discover_files(self, tmp_path: Path) -> None:
        """Known names and patterns are found recursively."""
        project = tmp_path / "project"
        (project / "sub").mkdir(parents=True)
        (project / "nestfile").write_text(VALID_SOURCE)
        (project / "sub" / "tools.nest").write_text(VALID_SOURCE)
        (project / "README.md").write_text("# readme")

        assert discover_files(project) == [
            project / "nestfile",
            project / "sub" / "tools.nest",
        ]

    def test_directory_with_invalid_file(self, tmp_path: Path) -> None:
        """The most severe result wins."""
        project = tmp_path / "project"
        project.mkdir()
        (project / "nestfile").write_text(VALID_SOURCE)
        (project / "broken.nest").write_text(INVALID_SOURCE)

        assert check_directory(project) == EXIT_VALIDATION_ERRORS

    def test_directory_all_valid(self, tmp_path: Path) -> None:
        """A clean tree succeeds."""
        project = tmp_path / "project"
        project.mkdir()
        (project / "Nestfile").write_text(VALID_SOURCE)

        assert check_directory(project) == EXIT_SUCCESS

    def test_directory_not_found(self, tmp_path: Path) -> None:
        """A missing directory is a file error."""
        assert check_directory(tmp_path / "missing") == EXIT_FILE_ERROR

    def test_file_as_directory(self, tmp_path: Path) -> None:
        """A file is not a directory."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert check_directory(nestfile) == EXIT_FILE_ERROR


# =============================================================================
# dump_ast Tests
# =============================================================================


class TestDumpAst:
    """Test the command tree dump."""

    def test_dump_valid_file(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """The tree is printed as JSON."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert dump_ast(nestfile) == EXIT_SUCCESS
        tree = json.loads(capsys.readouterr().out)
        assert [c["name"] for c in tree] == ["build", "dev"]
        assert tree[1]["children"][0]["name"] == "lint"

    def test_dump_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a file error."""
        assert dump_ast(tmp_path / "missing") == EXIT_FILE_ERROR


# =============================================================================
# run_check Tests
# =============================================================================


class TestRunCheck:
    """Test run_check CLI entry point."""

    def test_run_check_valid_file(self, tmp_path: Path) -> None:
        """A valid file succeeds."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert run_check([str(nestfile)]) == EXIT_SUCCESS

    def test_run_check_with_verbose(self, tmp_path: Path) -> None:
        """The verbose flag is accepted."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert run_check(["-v", str(nestfile)]) == EXIT_SUCCESS

    def test_run_check_with_json(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """The json flag switches the output format."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert run_check(["--json", str(nestfile)]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["valid"] is True

    def test_run_check_with_strict(self, tmp_path: Path) -> None:
        """The strict flag fails on warnings."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(WARNING_SOURCE)

        assert run_check([str(nestfile)]) == EXIT_SUCCESS
        assert run_check(["--strict", str(nestfile)]) == EXIT_VALIDATION_ERRORS

    def test_run_check_defaults_to_working_directory(self, tmp_path: Path) -> None:
        """Without paths the working directory is checked."""
        (tmp_path / "nestfile").write_text(INVALID_SOURCE)

        assert run_check([]) == EXIT_VALIDATION_ERRORS

    def test_run_check_strict_from_config(self, tmp_path: Path) -> None:
        """Strict mode can come from the local config file."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(WARNING_SOURCE)
        config_dir = tmp_path / ".nestlint"
        config_dir.mkdir()
        (config_dir / "config.toml").write_text("strict = true\n")

        assert run_check([str(nestfile)]) == EXIT_VALIDATION_ERRORS

    def test_run_check_dump_ast(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """The dump flag prints the tree instead of diagnostics."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(INVALID_SOURCE)

        assert run_check(["--dump-ast", str(nestfile)]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)[0]["name"] == "deploy"

    def test_run_check_dump_ast_directory(
        self,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Dumping a directory prints one tree per discovered file."""
        nestfile = tmp_path / "nestfile"
        nestfile.write_text(VALID_SOURCE)

        assert run_check(["--dump-ast", str(tmp_path)]) == EXIT_SUCCESS
        trees = json.loads(capsys.readouterr().out)
        assert list(trees) == [str(nestfile)]
        assert trees[str(nestfile)][0]["name"] == "build"
