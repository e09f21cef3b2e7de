"""Release orchestration.

Runs the release steps strictly in order and stops at the first failure:

    check_tools -> resolve_settings -> build_binaries -> package_tarball
        -> package_deb (linux) -> package_rpm (linux, --rpm)

The binary staging directory is created right before the build and removed on
every exit path once it exists. Artifacts already written stay in place when a
later step fails.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager, ExitStack
from dataclasses import dataclass, field
from pathlib import Path

from relbuild.core.config import ProjectConfig
from relbuild.core.result import Err, Ok, Result
from relbuild.output.console import ConsoleProtocol
from relbuild.platform.detection import PlatformInfo, detect, detect_target
from relbuild.platform.process import Runner, run
from relbuild.services.builder import build_binaries, staging_directory
from relbuild.services.deb import package_deb
from relbuild.services.errors import BuildError, ReleaseError, StepFailed
from relbuild.services.rpm import package_rpm
from relbuild.services.settings import ReleaseFlags, ReleaseSettings, resolve_settings
from relbuild.services.tarball import package_tarball
from relbuild.services.tools_check import Which, check_tools, required_tools


@dataclass(frozen=True, slots=True)
class ReleaseReport:
    settings: ReleaseSettings
    artifacts: tuple[Path, ...]


def _step(name: str) -> Callable[[ReleaseError], StepFailed]:
    def tag(error: ReleaseError) -> StepFailed:
        return StepFailed(step=name, cause=error)

    return tag


def _default_environ() -> Mapping[str, str]:
    return dict(os.environ)


@dataclass(slots=True)
class ReleasePipeline:
    """One release run's collaborators.

    Attributes:
        project: What to build and how to package it.
        console: Progress output.
        environ: Build environment (GOOS/GOARCH overrides, PATH for tools).
        which: Executable lookup used by the tool check.
        runner: Subprocess runner shared by every step.
        host: Host platform; detected when None.
        staging: Factory for the binary staging directory.
    """

    project: ProjectConfig
    console: ConsoleProtocol
    environ: Mapping[str, str] = field(default_factory=_default_environ)
    which: Which = shutil.which
    runner: Runner = run
    host: PlatformInfo | None = None
    staging: Callable[[], AbstractContextManager[Path]] = staging_directory

    def run(self, flags: ReleaseFlags) -> Result[ReleaseReport, StepFailed]:
        host = self.host or detect()

        self.console.header("Checking tools")
        target = detect_target(self.environ, host)
        tools = check_tools(required_tools(target.os, rpm=flags.rpm), which=self.which)
        if isinstance(tools, Err):
            return tools.map_err(_step("check_tools"))
        toolchain = tools.value

        settings_result = resolve_settings(flags, self.environ, host)
        if isinstance(settings_result, Err):
            return settings_result.map_err(_step("resolve_settings"))
        settings = settings_result.value
        self.console.info(
            f"{self.project.package.name} {settings.version} ({settings.commit}) "
            f"for {settings.target} -> {settings.output_dir}"
        )

        artifacts: list[Path] = []
        with ExitStack() as stack:
            try:
                bin_dir = stack.enter_context(self.staging())
            except OSError as e:
                error = BuildError(stage="output", reason=f"cannot create staging directory: {e}")
                return Err(StepFailed(step="build_binaries", cause=error))

            self.console.header("Building binaries")
            built = build_binaries(
                settings,
                self.project,
                toolchain,
                bin_dir,
                console=self.console,
                environ=self.environ,
                runner=self.runner,
            )
            if isinstance(built, Err):
                return built.map_err(_step("build_binaries"))

            self.console.header("Packaging tarball")
            tarball = package_tarball(
                bin_dir, settings, self.project, toolchain, console=self.console, runner=self.runner
            )
            if isinstance(tarball, Err):
                return tarball.map_err(_step("package_tarball"))
            artifacts.append(tarball.value)

            if not settings.target.is_linux:
                self.console.info(f"skipping .deb/.rpm: target os is {settings.target_os}")
                return Ok(ReleaseReport(settings=settings, artifacts=tuple(artifacts)))

            self.console.header("Packaging .deb")
            deb = package_deb(
                bin_dir, settings, self.project, toolchain, console=self.console, runner=self.runner
            )
            if isinstance(deb, Err):
                return deb.map_err(_step("package_deb"))
            artifacts.append(deb.value)

            if flags.rpm:
                self.console.header("Packaging .rpm")
                rpm = package_rpm(
                    bin_dir,
                    settings,
                    self.project,
                    toolchain,
                    console=self.console,
                    runner=self.runner,
                )
                if isinstance(rpm, Err):
                    return rpm.map_err(_step("package_rpm"))
                artifacts.append(rpm.value)

        return Ok(ReleaseReport(settings=settings, artifacts=tuple(artifacts)))
