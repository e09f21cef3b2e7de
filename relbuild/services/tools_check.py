"""Tool availability check.

Resolves every external executable the run will need before any work starts,
so a missing ``rpmbuild`` is reported up front instead of after a full build.
"""

from __future__ import annotations

import shutil
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path

from relbuild.core.result import Err, Ok, Result
from relbuild.services.errors import ToolNotFound

Which = Callable[[str], str | None]

_HINTS: Mapping[str, str] = {
    "git": "install git (apt install git / dnf install git)",
    "go": "install Go: https://go.dev/dl/",
    "tar": "install tar (apt install tar / dnf install tar)",
    "dpkg-deb": "install dpkg (apt install dpkg / dnf install dpkg)",
    "rpmbuild": "install rpmbuild (apt install rpm / dnf install rpm-build)",
}


@dataclass(frozen=True, slots=True)
class Toolchain:
    """Resolved executable paths, keyed by tool name."""

    paths: Mapping[str, Path]

    def path(self, name: str) -> str:
        """Absolute path of a resolved tool.

        Raises:
            KeyError: If the tool was not part of the checked set.
        """
        return str(self.paths[name])


def required_tools(target_os: str, *, rpm: bool) -> tuple[str, ...]:
    """Names of the executables a run for ``target_os`` needs."""
    tools = ["git", "go", "tar"]
    if target_os == "linux":
        tools.append("dpkg-deb")
        if rpm:
            tools.append("rpmbuild")
    return tuple(tools)


def check_tools(names: Iterable[str], *, which: Which = shutil.which) -> Result[Toolchain, ToolNotFound]:
    """Resolve each tool on PATH; fail on the first one missing."""
    paths: dict[str, Path] = {}
    for name in names:
        found = which(name)
        if not found:
            return Err(ToolNotFound(tool=name, hint=_HINTS.get(name)))
        paths[name] = Path(found)
    return Ok(Toolchain(paths=paths))
