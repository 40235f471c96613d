"""Typed release configuration.

Settings come from three layers, later layers win:

1. built-in defaults (the constants below)
2. an optional ``relflow.toml`` at the repository root
3. environment variables (``GITHUB_USER``, ``DOCKER_USER``, ``RELEASE_NAME``,
   ``RELEASE_DESCRIPTION``, ``SUDO``)

Example ``relflow.toml``::

    [release]
    github_user = "acme"
    github_repo = "widget"

    [build]
    build_command = ["make", "release"]
    artifact = "bin/widget"

    [paths]
    manifests = ["deploy/widget.yaml", "deploy/widget-compose.yaml"]
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_raw_str, get_str, get_str_list, get_table

__all__ = [
    "BuildSettings",
    "CONFIG_FILENAME",
    "ConfigError",
    "PathsSettings",
    "ReleaseConfig",
    "ReleaseSettings",
    "load_config",
]

CONFIG_FILENAME = "relflow.toml"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

DEFAULT_GITHUB_USER = "relflow"
DEFAULT_DOCKER_USER = "relflow"
DEFAULT_RELEASE_DESCRIPTION = "See CHANGELOG.md for the list of changes."
DEFAULT_SUDO = "sudo"

DEFAULT_RELEASES_DIR = "releases"
DEFAULT_CHANGELOG = "CHANGELOG.md"
DEFAULT_VERSION_FILE = "main.go"
# Two groups: everything before the version literal, and the closing quote.
DEFAULT_VERSION_PATTERN = r'((?:[Vv]ersion)\s*=\s*")[^"]*(")'
DEFAULT_MANIFESTS = ("deploy/kubernetes.yaml", "deploy/docker-compose.yaml")

DEFAULT_BUILD_COMMAND = ("make", "release")
DEFAULT_TEST_COMMAND = ("make", "test")
DEFAULT_PUSH_COMMAND = ("make", "push")
DEFAULT_VERSION_ARGS = ("version",)


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when the configuration cannot be loaded or is invalid."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class ReleaseSettings:
    """Hosting and naming settings for the release records."""

    github_user: str = DEFAULT_GITHUB_USER
    github_repo: str = ""
    registry_user: str = DEFAULT_DOCKER_USER
    release_name: str = ""
    release_description: str = DEFAULT_RELEASE_DESCRIPTION
    sudo: str = DEFAULT_SUDO

    @property
    def slug(self) -> str:
        """Hosting repository as ``owner/name``."""
        return f"{self.github_user}/{self.github_repo}"


@dataclass(frozen=True, slots=True)
class BuildSettings:
    """Commands handed to the external build toolchain.

    ``artifact`` is relative to the build directory; an empty value means
    ``bin/<github_repo>``.
    """

    build_command: tuple[str, ...] = DEFAULT_BUILD_COMMAND
    test_command: tuple[str, ...] = DEFAULT_TEST_COMMAND
    push_command: tuple[str, ...] = DEFAULT_PUSH_COMMAND
    version_args: tuple[str, ...] = DEFAULT_VERSION_ARGS
    artifact: str = ""


@dataclass(frozen=True, slots=True)
class PathsSettings:
    """Paths relative to the repository root (or to the build directory)."""

    releases_dir: str = DEFAULT_RELEASES_DIR
    changelog: str = DEFAULT_CHANGELOG
    version_file: str = DEFAULT_VERSION_FILE
    version_pattern: str = DEFAULT_VERSION_PATTERN
    manifests: tuple[str, ...] = DEFAULT_MANIFESTS


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Main configuration container."""

    release: ReleaseSettings = field(default_factory=ReleaseSettings)
    build: BuildSettings = field(default_factory=BuildSettings)
    paths: PathsSettings = field(default_factory=PathsSettings)

    @property
    def artifact(self) -> str:
        return self.build.artifact or f"bin/{self.release.github_repo}"

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        project_name: str,
        env: Mapping[str, str],
    ) -> ReleaseConfig:
        """Create a config from a parsed TOML mapping plus environment overrides."""
        release: StrDict = get_table(data, "release") or {}
        build: StrDict = get_table(data, "build") or {}
        paths: StrDict = get_table(data, "paths") or {}

        github_repo = get_str(release, "github_repo") or project_name
        sudo = get_raw_str(release, "sudo")
        if "SUDO" in env:
            # An explicitly empty SUDO disables privilege escalation.
            sudo = env["SUDO"].strip()

        return cls(
            release=ReleaseSettings(
                github_user=_env(env, "GITHUB_USER")
                or get_str(release, "github_user")
                or DEFAULT_GITHUB_USER,
                github_repo=github_repo,
                registry_user=_env(env, "DOCKER_USER")
                or get_str(release, "registry_user")
                or DEFAULT_DOCKER_USER,
                release_name=_env(env, "RELEASE_NAME")
                or get_str(release, "release_name")
                or project_name,
                release_description=_env(env, "RELEASE_DESCRIPTION")
                or get_raw_str(release, "release_description")
                or DEFAULT_RELEASE_DESCRIPTION,
                sudo=DEFAULT_SUDO if sudo is None else sudo,
            ),
            build=BuildSettings(
                build_command=_tuple(build, "build_command") or DEFAULT_BUILD_COMMAND,
                test_command=_tuple(build, "test_command") or DEFAULT_TEST_COMMAND,
                push_command=_tuple(build, "push_command") or DEFAULT_PUSH_COMMAND,
                version_args=_tuple(build, "version_args") or DEFAULT_VERSION_ARGS,
                artifact=get_str(build, "artifact") or "",
            ),
            paths=PathsSettings(
                releases_dir=get_str(paths, "releases_dir") or DEFAULT_RELEASES_DIR,
                changelog=get_str(paths, "changelog") or DEFAULT_CHANGELOG,
                version_file=get_str(paths, "version_file") or DEFAULT_VERSION_FILE,
                version_pattern=get_raw_str(paths, "version_pattern")
                or DEFAULT_VERSION_PATTERN,
                manifests=_tuple(paths, "manifests") or DEFAULT_MANIFESTS,
            ),
        )


def _env(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key, "").strip()
    return value or None


def _tuple(table: Mapping[str, object], key: str) -> tuple[str, ...] | None:
    items = get_str_list(table, key)
    if not items:
        return None
    return tuple(items)


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file; a missing file is an empty table."""
    import tomllib

    try:
        content = path.read_bytes()
    except FileNotFoundError:
        return Ok({})
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except OSError as e:
        return Err(ConfigError(f"Error reading {path}: {e}", path=path))

    try:
        data_obj: object = tomllib.loads(content.decode("utf-8"))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Invalid UTF-8 in config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(data)


def _validate(config: ReleaseConfig, path: Path) -> Result[ReleaseConfig, ConfigError]:
    try:
        pattern = re.compile(config.paths.version_pattern)
    except re.error as e:
        return Err(ConfigError(f"Invalid paths.version_pattern: {e}", path=path))
    if pattern.groups != 2:
        return Err(
            ConfigError(
                "paths.version_pattern must have exactly two groups "
                "(text before the version, text after it)",
                path=path,
            )
        )
    if len(config.paths.manifests) != 2:
        return Err(ConfigError("paths.manifests must name exactly two files", path=path))
    return Ok(config)


def load_config(
    repo_root: Path,
    env: Mapping[str, str] | None = None,
) -> Result[ReleaseConfig, ConfigError]:
    """Load ``relflow.toml`` from ``repo_root`` and apply environment overrides.

    Args:
        repo_root: Repository top-level directory; its name is the default
            project name.
        env: Environment mapping (defaults to ``os.environ``).

    Returns:
        Ok(ReleaseConfig) on success, Err(ConfigError) on failure
    """
    path = repo_root / CONFIG_FILENAME
    parsed = _parse_toml(path)
    if isinstance(parsed, Err):
        return parsed

    config = ReleaseConfig.from_dict(
        parsed.value,
        project_name=repo_root.name,
        env=os.environ if env is None else env,
    )
    return _validate(config, path)
