"""Binary builder.

Checks the sources out at the requested commit and compiles every configured
binary for the target with ``go build``, stamping version and commit into the
executable through linker flags.

Outputs land in the binary staging directory, laid out as ``<dir>/<name>``
relative to the install prefix (``bin/app``, ``sbin/mount.app``). The staging
directory itself is owned by the caller through ``staging_directory()``.
"""

from __future__ import annotations

import shutil
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from relbuild.core.config import ProjectConfig
from relbuild.core.result import Err, Ok, Result
from relbuild.output.console import ConsoleProtocol, Style
from relbuild.platform.process import Runner, run
from relbuild.services.errors import BuildError
from relbuild.services.settings import ReleaseSettings
from relbuild.services.tools_check import Toolchain


@contextmanager
def staging_directory(prefix: str = "relbuild-bin-") -> Iterator[Path]:
    """Create a fresh binary staging directory and remove it on exit."""
    path = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


def _quote_ldflag(arg: str) -> str:
    # go splits -ldflags on whitespace and honours single or double quotes.
    if not any(c.isspace() or c in "'\"" for c in arg):
        return arg
    quote = '"' if "'" in arg else "'"
    return f"{quote}{arg}{quote}"


def ldflags(project: ProjectConfig, settings: ReleaseSettings) -> str:
    """Linker flags injecting version and commit into the binary."""
    version = _quote_ldflag(f"{project.source.version_var}={settings.version}")
    commit = _quote_ldflag(f"{project.source.commit_var}={settings.commit}")
    return f"-X {version} -X {commit}"


def go_environment(environ: Mapping[str, str], settings: ReleaseSettings) -> dict[str, str]:
    """Subprocess environment pinning the Go target and disabling cgo."""
    env = dict(environ)
    env["GOOS"] = settings.target_os
    env["GOARCH"] = settings.target_arch
    env["CGO_ENABLED"] = "0"
    return env


def build_binaries(
    settings: ReleaseSettings,
    project: ProjectConfig,
    tools: Toolchain,
    bin_dir: Path,
    *,
    console: ConsoleProtocol,
    environ: Mapping[str, str],
    runner: Runner = run,
) -> Result[list[Path], BuildError]:
    """Build release binaries into ``bin_dir``.

    Returns:
        Ok(paths) of the produced binaries, Err(BuildError) on failure.
    """
    try:
        workdir = tempfile.TemporaryDirectory(prefix="relbuild-src-")
    except OSError as e:
        return Err(BuildError(stage="clone", reason=f"cannot create source directory: {e}"))

    with workdir as tmp:
        src_dir = Path(tmp) / "src"

        clone = [tools.path("git"), "clone", "--quiet", project.source.repository, str(src_dir)]
        console.print(" ".join(clone), Style.DIM)
        cloned = runner(clone, cwd=Path(tmp), env=environ)
        if isinstance(cloned, Err):
            return Err(
                BuildError(
                    stage="clone",
                    reason=f"cannot clone {project.source.repository}",
                    detail=cloned.error.diagnostic,
                )
            )

        checkout = [
            tools.path("git"),
            "-c",
            "advice.detachedHead=false",
            "checkout",
            "--quiet",
            settings.commit,
        ]
        console.print(" ".join(checkout), Style.DIM)
        checked_out = runner(checkout, cwd=src_dir, env=environ)
        if isinstance(checked_out, Err):
            return Err(
                BuildError(
                    stage="checkout",
                    reason=f"cannot check out {settings.commit}",
                    detail=checked_out.error.diagnostic,
                )
            )

        env = go_environment(environ, settings)
        flags = ldflags(project, settings)
        built: list[Path] = []
        for binary in project.binaries:
            out = bin_dir / binary.dir / f"{binary.name}{settings.target.exe_suffix}"
            try:
                out.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return Err(BuildError(stage="output", reason=f"cannot create {out.parent}: {e}"))

            cmd = [
                tools.path("go"),
                "build",
                "-trimpath",
                "-o",
                str(out),
                "-ldflags",
                flags,
                binary.package,
            ]
            console.print(" ".join(cmd), Style.DIM)
            compiled = runner(cmd, cwd=src_dir, env=env)
            if isinstance(compiled, Err):
                return Err(
                    BuildError(
                        stage="compile",
                        reason=f"go build {binary.package} failed (exit {compiled.error.returncode})",
                        detail=compiled.error.diagnostic,
                    )
                )

            if not out.is_file():
                return Err(BuildError(stage="output", reason=f"expected output missing: {out}"))
            built.append(out)

    return Ok(built)
