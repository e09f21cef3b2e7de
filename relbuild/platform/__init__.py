"""Platform abstraction layer."""

from .detection import (
    Arch,
    Platform,
    PlatformInfo,
    Target,
    detect,
    detect_target,
)
from .process import (
    ProcessError,
    Runner,
    run,
)

__all__ = [
    # detection
    "Arch",
    "Platform",
    "PlatformInfo",
    "Target",
    "detect",
    "detect_target",
    # process
    "ProcessError",
    "Runner",
    "run",
]
