"""Tests for release settings resolution."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from relbuild.core.result import Err, Ok
from relbuild.platform.detection import Arch, Platform, PlatformInfo, Target
from relbuild.services.errors import EnvError, InvalidParameter, MissingParameter
from relbuild.services.settings import ReleaseFlags, resolve_settings

HOST = PlatformInfo(platform=Platform.LINUX, arch=Arch.X64)


class TestRequiredFlags:
    def test_missing_version(self) -> None:
        result = resolve_settings(ReleaseFlags(commit="abc123"), {}, HOST)

        assert result == Err(MissingParameter(flag="--version"))

    def test_missing_commit(self) -> None:
        result = resolve_settings(ReleaseFlags(version="1.2.3"), {}, HOST)

        assert result == Err(MissingParameter(flag="--commit"))

    def test_version_checked_before_commit(self) -> None:
        result = resolve_settings(ReleaseFlags(), {}, HOST)

        assert result == Err(MissingParameter(flag="--version"))

    def test_blank_values_count_as_missing(self) -> None:
        result = resolve_settings(ReleaseFlags(version="  ", commit="abc"), {}, HOST)

        assert isinstance(result, Err)
        assert result.error.message == "you must set --version"

    def test_slash_in_version_rejected(self) -> None:
        result = resolve_settings(ReleaseFlags(version="release/1.0", commit="abc"), {}, HOST)

        assert isinstance(result, Err)
        assert isinstance(result.error, InvalidParameter)
        assert result.error.message == "invalid --version: must not contain '/': release/1.0"


class TestResolved:
    def test_target_from_host(self, tmp_path: Path) -> None:
        flags = ReleaseFlags(version="1.2.3", commit="abc123", output_dir=str(tmp_path))

        result = resolve_settings(flags, {}, HOST)

        assert isinstance(result, Ok)
        assert result.value.target == Target("linux", "amd64")
        assert result.value.target_os == "linux"
        assert result.value.target_arch == "amd64"

    def test_environment_target_override(self, tmp_path: Path) -> None:
        flags = ReleaseFlags(version="1.2.3", commit="abc123", output_dir=str(tmp_path))

        result = resolve_settings(flags, {"GOOS": "darwin", "GOARCH": "arm64"}, HOST)

        assert isinstance(result, Ok)
        assert result.value.target == Target("darwin", "arm64")

    def test_output_dir_defaults_to_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        result = resolve_settings(ReleaseFlags(version="1.2.3", commit="abc123"), {}, HOST)

        assert isinstance(result, Ok)
        assert result.value.output_dir == tmp_path.resolve()

    def test_relative_output_dir_resolved(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)

        result = resolve_settings(
            ReleaseFlags(version="1.2.3", commit="abc123", output_dir="dist"), {}, HOST
        )

        assert isinstance(result, Ok)
        assert result.value.output_dir == (tmp_path / "dist").resolve()
        assert result.value.output_dir.is_absolute()

    def test_values_are_stripped(self, tmp_path: Path) -> None:
        flags = ReleaseFlags(version=" 1.2.3 ", commit=" abc123\n", output_dir=str(tmp_path))

        result = resolve_settings(flags, {}, HOST)

        assert isinstance(result, Ok)
        assert (result.value.version, result.value.commit) == ("1.2.3", "abc123")


def test_unresolvable_cwd_is_env_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_cwd() -> Path:
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(Path, "cwd", staticmethod(broken_cwd))

    result = resolve_settings(ReleaseFlags(version="1.2.3", commit="abc123"), os.environ, HOST)

    assert isinstance(result, Err)
    assert isinstance(result.error, EnvError)
    assert "working directory" in result.error.message
