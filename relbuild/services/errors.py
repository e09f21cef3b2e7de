"""Release error kinds.

Each kind exposes ``message`` (one line), ``detail`` (tool output, if any) and
``hint`` (what to do about it, if anything useful can be said).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Packager = Literal["tarball", "deb", "rpm"]
BuildStage = Literal["clone", "checkout", "compile", "output"]


@dataclass(frozen=True, slots=True)
class MissingParameter:
    flag: str
    detail: str | None = None
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"you must set {self.flag}"


@dataclass(frozen=True, slots=True)
class InvalidParameter:
    flag: str
    reason: str
    detail: str | None = None
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"invalid {self.flag}: {self.reason}"


@dataclass(frozen=True, slots=True)
class EnvError:
    message: str
    detail: str | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class ToolNotFound:
    tool: str
    detail: str | None = None
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"required tool not found on PATH: {self.tool}"


@dataclass(frozen=True, slots=True)
class BuildError:
    stage: BuildStage
    reason: str
    detail: str | None = None
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"{self.stage}: {self.reason}"


@dataclass(frozen=True, slots=True)
class PackagingError:
    packager: Packager
    reason: str
    detail: str | None = None
    hint: str | None = None

    @property
    def message(self) -> str:
        return f"{self.packager} packaging failed: {self.reason}"


ReleaseError = MissingParameter | InvalidParameter | EnvError | ToolNotFound | BuildError | PackagingError


@dataclass(frozen=True, slots=True)
class StepFailed:
    """A release error tagged with the pipeline step that produced it."""

    step: str
    cause: ReleaseError

    @property
    def message(self) -> str:
        return f"{self.step}: {self.cause.message}"

    @property
    def detail(self) -> str | None:
        return self.cause.detail

    @property
    def hint(self) -> str | None:
        return self.cause.hint
