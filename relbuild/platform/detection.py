"""Host platform detection and Go target naming.

The release target is the host platform expressed in Go's GOOS/GOARCH
vocabulary. ``GOOS``/``GOARCH`` in the build environment override the host
values, the same way ``go build`` itself treats them.
"""

from __future__ import annotations

import platform as _platform
import sys as _sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum, auto
from functools import lru_cache

__all__ = [
    "Arch",
    "Platform",
    "PlatformInfo",
    "Target",
    "detect",
    "detect_arch",
    "detect_platform",
    "detect_target",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = auto()
    MACOS = auto()
    WINDOWS = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def goos(self) -> str:
        """GOOS value for this platform."""
        return {
            Platform.LINUX: "linux",
            Platform.MACOS: "darwin",
            Platform.WINDOWS: "windows",
        }.get(self, "unknown")


class Arch(Enum):
    """CPU architecture."""

    X64 = auto()
    X86 = auto()
    ARM64 = auto()
    ARM = auto()
    UNKNOWN = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def goarch(self) -> str:
        """GOARCH value for this architecture."""
        return {
            Arch.X64: "amd64",
            Arch.X86: "386",
            Arch.ARM64: "arm64",
            Arch.ARM: "arm",
        }.get(self, "unknown")


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected host platform. Use ``detect()`` to get an instance."""

    platform: Platform
    arch: Arch

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@dataclass(frozen=True, slots=True)
class Target:
    """Build target in Go naming (``linux``/``amd64``)."""

    os: str
    arch: str

    @property
    def is_linux(self) -> bool:
        return self.os == "linux"

    @property
    def exe_suffix(self) -> str:
        return ".exe" if self.os == "windows" else ""

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    machine = _platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return Arch.X64
    if machine in ("i386", "i686", "x86"):
        return Arch.X86
    if machine in ("aarch64", "arm64"):
        return Arch.ARM64
    if machine.startswith("arm"):
        return Arch.ARM
    return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect host platform information (cached)."""
    return PlatformInfo(platform=detect_platform(), arch=detect_arch())


def detect_target(environ: Mapping[str, str], host: PlatformInfo | None = None) -> Target:
    """Derive the build target from the environment.

    ``GOOS``/``GOARCH`` win over the host values when set and non-empty.
    """
    info = host or detect()
    goos = environ.get("GOOS", "").strip() or info.platform.goos
    goarch = environ.get("GOARCH", "").strip() or info.arch.goarch
    return Target(os=goos, arch=goarch)
