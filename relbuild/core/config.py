"""Typed project configuration.

A ``relbuild.toml`` describes what gets built and how it is packaged:

    [package]
    name = "app"
    maintainer = "Release Engineering <release@example.com>"
    depends = ["fuse"]

    [source]
    repository = "https://github.com/example/app"
    version_var = "main.version"
    commit_var = "main.commit"

    [[binaries]]
    name = "app"
    package = "./cmd/app"
    dir = "bin"

Every field has a default so a missing file yields a usable config that builds
the Go module in the current directory.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_str, get_str_list, get_table, get_table_list

__all__ = [
    "BinaryConfig",
    "ConfigError",
    "DEFAULT_CONFIG_NAME",
    "PackageConfig",
    "ProjectConfig",
    "SourceConfig",
    "load_config",
    "load_config_or_default",
]

DEFAULT_CONFIG_NAME = "relbuild.toml"

DEFAULT_PACKAGE_NAME = "app"
DEFAULT_MAINTAINER = "Release Engineering <release@example.com>"
DEFAULT_DESCRIPTION = "Release build"
DEFAULT_LICENSE = "Apache-2.0"
DEFAULT_INSTALL_PREFIX = "/usr"
DEFAULT_VERSION_VAR = "main.version"
DEFAULT_COMMIT_VAR = "main.commit"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the project config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PackageConfig:
    """Metadata written into .deb control files and .rpm spec files."""

    name: str = DEFAULT_PACKAGE_NAME
    maintainer: str = DEFAULT_MAINTAINER
    description: str = DEFAULT_DESCRIPTION
    homepage: str | None = None
    license: str = DEFAULT_LICENSE
    depends: tuple[str, ...] = ()
    section: str = "utils"
    priority: str = "optional"
    install_prefix: str = DEFAULT_INSTALL_PREFIX

    @property
    def summary(self) -> str:
        """First line of the description."""
        return self.description.splitlines()[0] if self.description else self.name


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Where the sources come from and which linker symbols receive build metadata."""

    repository: str = "."
    version_var: str = DEFAULT_VERSION_VAR
    commit_var: str = DEFAULT_COMMIT_VAR


@dataclass(frozen=True, slots=True)
class BinaryConfig:
    """One ``go build`` output.

    Attributes:
        name: Output file name (without platform suffix).
        package: Go package path passed to ``go build``.
        dir: Directory under the install prefix (``bin``, ``sbin``, ...).
    """

    name: str
    package: str = "."
    dir: str = "bin"


def _default_binaries() -> tuple[BinaryConfig, ...]:
    return (BinaryConfig(name=DEFAULT_PACKAGE_NAME),)


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Main configuration container."""

    package: PackageConfig = field(default_factory=PackageConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    binaries: tuple[BinaryConfig, ...] = field(default_factory=_default_binaries)

    @classmethod
    def from_dict(cls, data: Mapping[str, object], *, base_dir: Path) -> ProjectConfig:
        """Create a config from parsed TOML.

        Local repository paths are resolved against ``base_dir`` (the directory
        holding the config file).
        """
        package: StrDict = get_table(data, "package") or {}
        source: StrDict = get_table(data, "source") or {}
        name = get_str(package, "name") or DEFAULT_PACKAGE_NAME

        binaries = tuple(
            BinaryConfig(
                name=bin_name,
                package=get_str(entry, "package") or ".",
                dir=get_str(entry, "dir") or "bin",
            )
            for entry in get_table_list(data, "binaries") or []
            if (bin_name := get_str(entry, "name")) is not None
        )

        return cls(
            package=PackageConfig(
                name=name,
                maintainer=get_str(package, "maintainer") or DEFAULT_MAINTAINER,
                description=get_str(package, "description") or DEFAULT_DESCRIPTION,
                homepage=get_str(package, "homepage"),
                license=get_str(package, "license") or DEFAULT_LICENSE,
                depends=tuple(get_str_list(package, "depends") or ()),
                section=get_str(package, "section") or "utils",
                priority=get_str(package, "priority") or "optional",
                install_prefix=get_str(package, "install_prefix") or DEFAULT_INSTALL_PREFIX,
            ),
            source=SourceConfig(
                repository=_resolve_repository(get_str(source, "repository") or ".", base_dir),
                version_var=get_str(source, "version_var") or DEFAULT_VERSION_VAR,
                commit_var=get_str(source, "commit_var") or DEFAULT_COMMIT_VAR,
            ),
            binaries=binaries or (BinaryConfig(name=name),),
        )


def _resolve_repository(repository: str, base_dir: Path) -> str:
    """Anchor local clone sources to the config directory; leave URLs alone."""
    if "://" in repository or repository.startswith("git@"):
        return repository
    path = Path(repository).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    return str(path.resolve())


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, converting read and syntax errors."""
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def load_config(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load and parse a project config from a TOML file.

    Args:
        path: Path to the relbuild.toml file

    Returns:
        Ok(ProjectConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ProjectConfig.from_dict(result.value, base_dir=path.parent.resolve()))
    except (OSError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> Result[ProjectConfig, ConfigError]:
    """Load config if the file exists, otherwise return defaults anchored at its directory.

    A file that exists but cannot be parsed is still an error.
    """
    if not path.exists():
        try:
            return Ok(ProjectConfig.from_dict({}, base_dir=path.parent.resolve()))
        except OSError:
            # Unresolvable working directory; settings resolution reports it.
            return Ok(ProjectConfig())
    return load_config(path)
