"""Tarball packager.

Archives the whole binary staging directory with ``tar`` under a name that
depends only on package, version and target, so reruns overwrite.
"""

from __future__ import annotations

import os
from pathlib import Path

from relbuild.core.config import ProjectConfig
from relbuild.core.result import Err, Ok, Result
from relbuild.output.console import ConsoleProtocol, Style
from relbuild.platform.process import Runner, run
from relbuild.services.errors import PackagingError
from relbuild.services.settings import ReleaseSettings
from relbuild.services.tools_check import Toolchain


def tarball_name(package: str, settings: ReleaseSettings) -> str:
    """``<package>_<version>_<os>_<arch>.tar.gz``"""
    return f"{package}_{settings.version}_{settings.target_os}_{settings.target_arch}.tar.gz"


def check_output_dir(output_dir: Path) -> str | None:
    """Return why ``output_dir`` cannot receive artifacts, or None if it can."""
    if not output_dir.is_dir():
        return f"output directory does not exist: {output_dir}"
    if not os.access(output_dir, os.W_OK):
        return f"output directory is not writable: {output_dir}"
    return None


def package_tarball(
    bin_dir: Path,
    settings: ReleaseSettings,
    project: ProjectConfig,
    tools: Toolchain,
    *,
    console: ConsoleProtocol,
    runner: Runner = run,
) -> Result[Path, PackagingError]:
    """Write the release tarball into the output directory."""
    problem = check_output_dir(settings.output_dir)
    if problem is not None:
        return Err(PackagingError(packager="tarball", reason=problem))

    out = settings.output_dir / tarball_name(project.package.name, settings)
    cmd = [tools.path("tar"), "-C", str(bin_dir), "-czf", str(out), "."]
    console.print(" ".join(cmd), Style.DIM)
    result = runner(cmd, cwd=bin_dir)
    if isinstance(result, Err):
        return Err(
            PackagingError(
                packager="tarball",
                reason=f"tar failed (exit {result.error.returncode})",
                detail=result.error.diagnostic,
            )
        )
    return Ok(out)
