"""Release services.

Each module implements one pipeline step; ``pipeline`` sequences them.
"""

from relbuild.services.errors import (
    BuildError,
    EnvError,
    InvalidParameter,
    MissingParameter,
    PackagingError,
    ReleaseError,
    StepFailed,
    ToolNotFound,
)
from relbuild.services.pipeline import ReleasePipeline, ReleaseReport
from relbuild.services.settings import ReleaseFlags, ReleaseSettings

__all__ = [
    # errors
    "BuildError",
    "EnvError",
    "InvalidParameter",
    "MissingParameter",
    "PackagingError",
    "ReleaseError",
    "StepFailed",
    "ToolNotFound",
    # pipeline
    "ReleaseFlags",
    "ReleasePipeline",
    "ReleaseReport",
    "ReleaseSettings",
]
