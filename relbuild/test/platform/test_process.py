"""Tests for relbuild.platform.process module."""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

from relbuild.core.result import Err, Ok
from relbuild.platform.process import ProcessError, run

PY = sys.executable


class TestProcessError:
    def test_str_short_command(self) -> None:
        error = ProcessError(("tar", "-czf"), 2, "", "tar: fail")
        assert str(error) == "tar -czf failed (exit 2)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(("go", "build", "-o", "out", "."), 1, "", "")
        assert str(error) == "go build -o ... failed (exit 1)"

    def test_diagnostic_prefers_stderr(self) -> None:
        assert ProcessError(("x",), 1, "out", " err \n").diagnostic == "err"

    def test_diagnostic_falls_back_to_stdout(self) -> None:
        assert ProcessError(("x",), 1, "out\n", "").diagnostic == "out"

    def test_frozen(self) -> None:
        error = ProcessError(("cmd",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([PY, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run(
            [PY, "-c", "import sys; sys.stderr.write('error msg'); sys.exit(42)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == 42
        assert "error msg" in result.error.stderr

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert result.error.stderr

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "marker.txt").write_text("x")

        result = run([PY, "-c", "import os; print(os.listdir('.'))"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "marker.txt" in result.value

    def test_uses_env(self, tmp_path: Path) -> None:
        env = dict(os.environ)
        env["GOOS"] = "plan9"

        result = run([PY, "-c", "import os; print(os.environ['GOOS'])"], cwd=tmp_path, env=env)

        assert isinstance(result, Ok)
        assert result.value.strip() == "plan9"
