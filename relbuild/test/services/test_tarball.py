"""Tests for the tarball packager."""

from __future__ import annotations

from pathlib import Path

import pytest

from relbuild.core.config import PackageConfig, ProjectConfig
from relbuild.core.result import Err, Ok
from relbuild.output.console import MockConsole
from relbuild.services.tarball import check_output_dir, package_tarball, tarball_name

PROJECT = ProjectConfig(package=PackageConfig(name="app"))


def test_name_encodes_version_os_arch(settings_for) -> None:
    assert tarball_name("app", settings_for("linux", "amd64")) == "app_1.2.3_linux_amd64.tar.gz"


def test_name_is_deterministic(settings_for) -> None:
    assert tarball_name("app", settings_for()) == tarball_name("app", settings_for())


class TestPackageTarball:
    def test_writes_into_output_dir(self, bin_dir: Path, settings_for, toolchain, fake_runner) -> None:
        settings = settings_for()

        result = package_tarball(bin_dir, settings, PROJECT, toolchain, console=MockConsole(), runner=fake_runner)

        assert isinstance(result, Ok)
        assert result.value == settings.output_dir / "app_1.2.3_linux_amd64.tar.gz"
        assert result.value.is_file()
        assert fake_runner.calls[0][1:] == ["-C", str(bin_dir), "-czf", str(result.value), "."]

    def test_rerun_overwrites_same_file(self, bin_dir: Path, settings_for, toolchain, fake_runner) -> None:
        settings = settings_for()

        first = package_tarball(bin_dir, settings, PROJECT, toolchain, console=MockConsole(), runner=fake_runner)
        second = package_tarball(bin_dir, settings, PROJECT, toolchain, console=MockConsole(), runner=fake_runner)

        assert isinstance(first, Ok) and isinstance(second, Ok)
        assert first.value == second.value
        assert [p.name for p in settings.output_dir.iterdir()] == ["app_1.2.3_linux_amd64.tar.gz"]

    def test_does_not_touch_staging(self, bin_dir: Path, settings_for, toolchain, fake_runner) -> None:
        before = sorted(p.relative_to(bin_dir) for p in bin_dir.rglob("*"))

        package_tarball(bin_dir, settings_for(), PROJECT, toolchain, console=MockConsole(), runner=fake_runner)

        assert sorted(p.relative_to(bin_dir) for p in bin_dir.rglob("*")) == before

    def test_tar_failure(self, bin_dir: Path, settings_for, toolchain, make_runner) -> None:
        runner = make_runner(fail={"tar": "tar: write error"})

        result = package_tarball(bin_dir, settings_for(), PROJECT, toolchain, console=MockConsole(), runner=runner)

        assert isinstance(result, Err)
        assert result.error.packager == "tarball"
        assert result.error.detail == "tar: write error"

    def test_missing_output_dir(self, bin_dir: Path, tmp_path: Path, settings_for, toolchain, fake_runner) -> None:
        from dataclasses import replace

        settings = replace(settings_for(), output_dir=tmp_path / "missing")

        result = package_tarball(bin_dir, settings, PROJECT, toolchain, console=MockConsole(), runner=fake_runner)

        assert isinstance(result, Err)
        assert "does not exist" in result.error.reason
        assert fake_runner.calls == []


class TestCheckOutputDir:
    def test_ok(self, tmp_path: Path) -> None:
        assert check_output_dir(tmp_path) is None

    def test_file_is_not_a_directory(self, tmp_path: Path) -> None:
        f = tmp_path / "file"
        f.write_text("")
        assert check_output_dir(f) is not None

    def test_not_writable(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        import relbuild.services.tarball as tarball

        monkeypatch.setattr(tarball.os, "access", lambda path, mode: False)

        problem = check_output_dir(tmp_path)

        assert problem is not None
        assert "not writable" in problem
