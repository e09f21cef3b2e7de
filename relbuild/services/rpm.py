"""RPM package builder.

Stages an install tree and a generated spec file inside a private rpmbuild
``_topdir``, runs ``rpmbuild -bb`` and moves the resulting .rpm into the
output directory.
"""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path

from relbuild.core.config import PackageConfig, ProjectConfig
from relbuild.core.result import Err, Ok, Result
from relbuild.output.console import ConsoleProtocol, Style
from relbuild.platform.process import Runner, run
from relbuild.services.errors import PackagingError
from relbuild.services.layout import installed_files, stage_install_tree
from relbuild.services.settings import ReleaseSettings
from relbuild.services.tools_check import Toolchain

_RPM_ARCH = {
    "amd64": "x86_64",
    "arm64": "aarch64",
    "386": "i686",
    "arm": "armv7hl",
}

RPM_RELEASE = "1"


def rpm_arch(goarch: str) -> str:
    return _RPM_ARCH.get(goarch, goarch)


def rpm_version(version: str) -> str:
    """RPM forbids '-' in Version; '~' keeps pre-releases sorting first."""
    return version.replace("-", "~")


def rpm_name(package: str, settings: ReleaseSettings) -> str:
    """``<package>-<version>-<release>.<rpmarch>.rpm``"""
    return (
        f"{package}-{rpm_version(settings.version)}-{RPM_RELEASE}"
        f".{rpm_arch(settings.target_arch)}.rpm"
    )


def spec_file(package: PackageConfig, settings: ReleaseSettings, root: Path) -> str:
    """Render the rpmbuild spec for the staged tree at ``root``."""
    lines = [
        # Go binaries are static and already stripped of debug paths.
        "%global debug_package %{nil}",
        "%global __os_install_post %{nil}",
        "%define _build_id_links none",
        "",
        f"Name: {package.name}",
        f"Version: {rpm_version(settings.version)}",
        f"Release: {RPM_RELEASE}",
        f"Summary: {package.summary}",
        f"License: {package.license}",
        f"Packager: {package.maintainer}",
    ]
    if package.homepage:
        lines.append(f"URL: {package.homepage}")
    lines.extend(f"Requires: {dep}" for dep in package.depends)
    lines += [
        "",
        "%description",
        package.description,
        "",
        "%install",
        "mkdir -p %{buildroot}",
        f'cp -a "{root}/." %{{buildroot}}/',
        "",
        "%files",
    ]
    lines.extend(f'"{path}"' for path in installed_files(root))
    return "\n".join(lines) + "\n"


def package_rpm(
    bin_dir: Path,
    settings: ReleaseSettings,
    project: ProjectConfig,
    tools: Toolchain,
    *,
    console: ConsoleProtocol,
    runner: Runner = run,
) -> Result[Path, PackagingError]:
    """Build the .rpm for a Linux target."""
    out = settings.output_dir / rpm_name(project.package.name, settings)

    try:
        workdir = tempfile.TemporaryDirectory(prefix="relbuild-rpm-")
    except OSError as e:
        return Err(PackagingError(packager="rpm", reason=f"cannot create staging directory: {e}"))

    with workdir as tmp:
        topdir = Path(tmp)
        root = topdir / "root"
        spec_path = topdir / "SPECS" / f"{project.package.name}.spec"
        try:
            stage_install_tree(bin_dir, root, project.package.install_prefix)
            spec_path.parent.mkdir(parents=True)
            spec_path.write_text(spec_file(project.package, settings, root), encoding="utf-8")
        except OSError as e:
            return Err(PackagingError(packager="rpm", reason=f"cannot stage rpm layout: {e}"))

        cmd = [
            tools.path("rpmbuild"),
            "-bb",
            "--target",
            rpm_arch(settings.target_arch),
            "--define",
            f"_topdir {topdir}",
            str(spec_path),
        ]
        console.print(" ".join(cmd), Style.DIM)
        result = runner(cmd, cwd=topdir)
        if isinstance(result, Err):
            return Err(
                PackagingError(
                    packager="rpm",
                    reason=f"rpmbuild failed (exit {result.error.returncode})",
                    detail=result.error.diagnostic,
                )
            )

        produced = sorted((topdir / "RPMS").rglob("*.rpm"))
        if not produced:
            return Err(PackagingError(packager="rpm", reason="rpmbuild produced no .rpm file"))

        try:
            shutil.move(str(produced[0]), str(out))
        except OSError as e:
            return Err(PackagingError(packager="rpm", reason=f"cannot write {out}: {e}"))

    return Ok(out)
