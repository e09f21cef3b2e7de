"""Shared fakes for release step tests.

``FakeRunner`` stands in for the external tools: it records every command and
creates the files the real tool would have produced.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import pytest

from relbuild.core.result import Err, Ok, Result
from relbuild.platform.detection import Target
from relbuild.platform.process import ProcessError
from relbuild.services.settings import ReleaseSettings
from relbuild.services.tools_check import Toolchain

TOOL_NAMES = ("git", "go", "tar", "dpkg-deb", "rpmbuild")


def _arg_after(cmd: list[str], flag: str) -> str:
    return cmd[cmd.index(flag) + 1]


class FakeRunner:
    """Records commands and simulates git, go, tar, dpkg-deb and rpmbuild."""

    def __init__(self, fail: Mapping[str, str] | None = None) -> None:
        self.fail = dict(fail or {})
        self.calls: list[list[str]] = []
        self.envs: list[Mapping[str, str] | None] = []
        self.captured: dict[str, str] = {}

    def tools_run(self) -> list[str]:
        return [Path(cmd[0]).name for cmd in self.calls]

    def __call__(
        self,
        cmd: list[str],
        cwd: Path,
        env: Mapping[str, str] | None = None,
    ) -> Result[str, ProcessError]:
        self.calls.append(list(cmd))
        self.envs.append(env)
        tool = Path(cmd[0]).name

        if tool in self.fail:
            return Err(ProcessError(tuple(cmd), 1, "", self.fail[tool]))

        if tool == "git" and "clone" in cmd:
            Path(cmd[-1]).mkdir(parents=True)
        elif tool == "go":
            out = Path(_arg_after(cmd, "-o"))
            out.write_bytes(b"\x7fELF fake binary")
        elif tool == "tar":
            Path(_arg_after(cmd, "-czf")).write_bytes(b"fake tarball")
        elif tool == "dpkg-deb":
            root = Path(cmd[-2])
            self.captured["control"] = (root / "DEBIAN" / "control").read_text(encoding="utf-8")
            self.captured["deb_files"] = "\n".join(
                sorted(p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
            )
            Path(cmd[-1]).write_bytes(b"fake deb")
        elif tool == "rpmbuild":
            spec = Path(cmd[-1])
            self.captured["spec"] = spec.read_text(encoding="utf-8")
            topdir = Path(_arg_after(cmd, "--define").removeprefix("_topdir "))
            arch = _arg_after(cmd, "--target")
            rpm_dir = topdir / "RPMS" / arch
            rpm_dir.mkdir(parents=True)
            (rpm_dir / "built.rpm").write_bytes(b"fake rpm")

        return Ok("")


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def toolchain() -> Toolchain:
    return Toolchain(paths={name: Path(f"/usr/bin/{name}") for name in TOOL_NAMES})


def _fake_which(*missing: str):
    def which(name: str) -> str | None:
        if name in missing:
            return None
        return f"/usr/bin/{name}"

    return which


@pytest.fixture
def make_runner() -> type[FakeRunner]:
    return FakeRunner


@pytest.fixture
def make_which():
    """Factory: ``make_which("rpmbuild")`` finds every tool except rpmbuild."""
    return _fake_which


@pytest.fixture
def settings_for(tmp_path: Path):
    """Factory for ReleaseSettings writing into ``tmp_path/out``."""

    def make(os_name: str = "linux", arch: str = "amd64", version: str = "1.2.3") -> ReleaseSettings:
        out = tmp_path / "out"
        out.mkdir(exist_ok=True)
        return ReleaseSettings(
            version=version,
            commit="abc123",
            target=Target(os=os_name, arch=arch),
            output_dir=out,
        )

    return make


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    """A staging directory holding one built binary at bin/app."""
    d = tmp_path / "staging"
    (d / "bin").mkdir(parents=True)
    (d / "bin" / "app").write_bytes(b"binary")
    return d
