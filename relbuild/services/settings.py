"""Release settings resolution.

Turns raw flag values plus the build environment into the ``ReleaseSettings``
every later step reads.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from relbuild.core.result import Err, Ok, Result
from relbuild.platform.detection import PlatformInfo, Target, detect_target
from relbuild.services.errors import EnvError, InvalidParameter, MissingParameter


@dataclass(frozen=True, slots=True)
class ReleaseFlags:
    """Raw user input, as parsed from the command line."""

    version: str = ""
    commit: str = ""
    output_dir: str | None = None
    rpm: bool = False


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """Fully resolved settings for one release run."""

    version: str
    commit: str
    target: Target
    output_dir: Path

    @property
    def target_os(self) -> str:
        return self.target.os

    @property
    def target_arch(self) -> str:
        return self.target.arch


def resolve_settings(
    flags: ReleaseFlags,
    environ: Mapping[str, str],
    host: PlatformInfo | None = None,
) -> Result[ReleaseSettings, MissingParameter | InvalidParameter | EnvError]:
    """Validate flags and derive environment-determined settings."""
    version = flags.version.strip()
    if not version:
        return Err(MissingParameter(flag="--version"))
    if "/" in version:
        # The version is part of every artifact file name.
        return Err(InvalidParameter(flag="--version", reason=f"must not contain '/': {version}"))

    commit = flags.commit.strip()
    if not commit:
        return Err(MissingParameter(flag="--commit"))

    target = detect_target(environ, host)

    try:
        if flags.output_dir:
            output_dir = Path(flags.output_dir).expanduser().resolve()
        else:
            output_dir = Path.cwd().resolve()
    except OSError as e:
        return Err(EnvError(f"cannot determine working directory: {e}"))

    return Ok(
        ReleaseSettings(
            version=version,
            commit=commit,
            target=target,
            output_dir=output_dir,
        )
    )
