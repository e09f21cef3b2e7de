"""Install-tree staging shared by the deb and rpm packagers."""

from __future__ import annotations

import shutil
from pathlib import Path


def stage_install_tree(bin_dir: Path, root: Path, install_prefix: str) -> Path:
    """Copy the staged binaries under ``root/<install_prefix>``.

    Creates ``root`` (mode 0755) if needed and returns the prefix directory.

    Raises:
        OSError: If the tree cannot be created or copied.
    """
    root.mkdir(parents=True, exist_ok=True)
    root.chmod(0o755)
    prefix_dir = root / install_prefix.strip("/")
    prefix_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(bin_dir, prefix_dir, dirs_exist_ok=True)
    return prefix_dir


def installed_files(root: Path) -> list[str]:
    """Absolute install paths of every regular file under ``root``, sorted."""
    return sorted("/" + p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file())
