"""Debian package builder.

Stages a ``dpkg-deb`` input tree (binaries under the install prefix plus
``DEBIAN/control``) in its own temporary directory and builds the .deb into the
output directory. The tree never outlives this step.
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from relbuild.core.config import PackageConfig, ProjectConfig
from relbuild.core.result import Err, Ok, Result
from relbuild.output.console import ConsoleProtocol, Style
from relbuild.platform.process import Runner, run
from relbuild.services.errors import PackagingError
from relbuild.services.layout import stage_install_tree
from relbuild.services.settings import ReleaseSettings
from relbuild.services.tools_check import Toolchain

_DEB_ARCH = {
    "amd64": "amd64",
    "arm64": "arm64",
    "386": "i386",
    "arm": "armhf",
}


def deb_arch(goarch: str) -> str:
    return _DEB_ARCH.get(goarch, goarch)


def deb_name(package: str, settings: ReleaseSettings) -> str:
    """``<package>_<version>_<debarch>.deb``"""
    return f"{package}_{settings.version}_{deb_arch(settings.target_arch)}.deb"


def control_file(package: PackageConfig, settings: ReleaseSettings) -> str:
    """Render ``DEBIAN/control``."""
    lines = [
        f"Package: {package.name}",
        f"Version: {settings.version}",
        f"Architecture: {deb_arch(settings.target_arch)}",
        f"Maintainer: {package.maintainer}",
        f"Section: {package.section}",
        f"Priority: {package.priority}",
    ]
    if package.homepage:
        lines.append(f"Homepage: {package.homepage}")
    if package.depends:
        lines.append(f"Depends: {', '.join(package.depends)}")

    # Extended description lines are indented; blank lines become " ."
    description = package.description.splitlines() or [package.name]
    lines.append(f"Description: {description[0]}")
    lines.extend(f" {line}" if line.strip() else " ." for line in description[1:])
    return "\n".join(lines) + "\n"


def package_deb(
    bin_dir: Path,
    settings: ReleaseSettings,
    project: ProjectConfig,
    tools: Toolchain,
    *,
    console: ConsoleProtocol,
    runner: Runner = run,
) -> Result[Path, PackagingError]:
    """Build the .deb for a Linux target."""
    out = settings.output_dir / deb_name(project.package.name, settings)

    try:
        workdir = tempfile.TemporaryDirectory(prefix="relbuild-deb-")
    except OSError as e:
        return Err(PackagingError(packager="deb", reason=f"cannot create staging directory: {e}"))

    with workdir as tmp:
        root = Path(tmp) / "root"
        try:
            stage_install_tree(bin_dir, root, project.package.install_prefix)
            debian = root / "DEBIAN"
            debian.mkdir()
            debian.chmod(0o755)
            (debian / "control").write_text(control_file(project.package, settings), encoding="utf-8")
        except OSError as e:
            return Err(PackagingError(packager="deb", reason=f"cannot stage Debian layout: {e}"))

        cmd = [tools.path("dpkg-deb"), "--build", "--root-owner-group", str(root), str(out)]
        console.print(" ".join(cmd), Style.DIM)
        result = runner(cmd, cwd=Path(tmp))
        if isinstance(result, Err):
            return Err(
                PackagingError(
                    packager="deb",
                    reason=f"dpkg-deb failed (exit {result.error.returncode})",
                    detail=result.error.diagnostic,
                )
            )

    return Ok(out)
