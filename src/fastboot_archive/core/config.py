"""Typed deploy configuration.

Options may be given in the camelCase spelling used by deploy hosts
(``fastbootDistDir``) or in snake_case (``fastboot_dist_dir``). They are
validated once here; the rest of the pipeline only sees
:class:`FastbootDeployConfig`.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from .exceptions import ConfigError

logger = logging.getLogger("fastboot_archive.core.config")

CONFIG_FILENAME = "fastboot-deploy.yml"
CONFIG_SECTION = "fastboot-app-server"

DEFAULT_FASTBOOT_DIST_DIR = "tmp/fastboot-deploy"
DEFAULT_ARCHIVE_PREFIX = "dist-"

ENV_FASTBOOT_DIST_DIR = "FASTBOOT_DIST_DIR"
ENV_ARCHIVE_PREFIX = "FASTBOOT_ARCHIVE_PREFIX"
ENV_IGNORE_FILES = "FASTBOOT_IGNORE_FILES"

_KEY_ALIASES = {
    "fastbootDistDir": "fastboot_dist_dir",
    "fastboot_dist_dir": "fastboot_dist_dir",
    "ignoreFiles": "ignore_files",
    "ignore_files": "ignore_files",
    "archivePrefix": "archive_prefix",
    "archive_prefix": "archive_prefix",
}


@dataclasses.dataclass(frozen=True)
class FastbootDeployConfig:
    fastboot_dist_dir: Path = Path(DEFAULT_FASTBOOT_DIST_DIR)
    ignore_files: tuple[str, ...] = ()
    archive_prefix: str = DEFAULT_ARCHIVE_PREFIX

    def resolve_dist_dir(self, base_dir: Optional[Path] = None) -> Path:
        if base_dir is None or self.fastboot_dist_dir.is_absolute():
            return self.fastboot_dist_dir
        return Path(base_dir) / self.fastboot_dist_dir

    def with_overrides(self, **changes: Any) -> "FastbootDeployConfig":
        filtered = {key: value for key, value in changes.items() if value is not None}
        if not filtered:
            return self
        merged = {
            "fastboot_dist_dir": self.fastboot_dist_dir,
            "ignore_files": self.ignore_files,
            "archive_prefix": self.archive_prefix,
        }
        merged.update(filtered)
        return parse_config(merged)


def _parse_dist_dir(value: Any) -> Path:
    if isinstance(value, Path):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError("fastbootDistDir must be a non-empty string path")
    return Path(value.strip())


def _parse_ignore_files(value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ConfigError("ignoreFiles must be a string or a list of strings")
    patterns: list[str] = []
    for entry in value:
        if not isinstance(entry, str):
            raise ConfigError("ignoreFiles must be a list of strings")
        if not entry.strip():
            raise ConfigError("ignoreFiles entries must not be empty")
        patterns.append(entry.strip())
    return tuple(patterns)


def _parse_archive_prefix(value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise ConfigError("archivePrefix must be a non-empty string")
    if "/" in value or "\\" in value:
        raise ConfigError("archivePrefix must not contain a path separator")
    return value


def parse_config(raw: Optional[Mapping[str, Any]]) -> FastbootDeployConfig:
    if raw is None:
        return FastbootDeployConfig()
    if not isinstance(raw, Mapping):
        raise ConfigError("Deploy configuration must be a mapping")
    normalized: Dict[str, Any] = {}
    for key, value in raw.items():
        canonical = _KEY_ALIASES.get(key)
        if canonical is None:
            raise ConfigError(f"Unknown deploy configuration option: {key}")
        if canonical in normalized:
            raise ConfigError(f"Deploy configuration option given twice: {key}")
        normalized[canonical] = value

    config = FastbootDeployConfig()
    kwargs: Dict[str, Any] = {}
    if "fastboot_dist_dir" in normalized:
        kwargs["fastboot_dist_dir"] = _parse_dist_dir(normalized["fastboot_dist_dir"])
    if "ignore_files" in normalized:
        kwargs["ignore_files"] = _parse_ignore_files(normalized["ignore_files"])
    if "archive_prefix" in normalized:
        kwargs["archive_prefix"] = _parse_archive_prefix(normalized["archive_prefix"])
    return dataclasses.replace(config, **kwargs)


def _env_overrides(env: Mapping[str, str]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    dist_dir = env.get(ENV_FASTBOOT_DIST_DIR)
    if dist_dir:
        overrides["fastboot_dist_dir"] = dist_dir
    prefix = env.get(ENV_ARCHIVE_PREFIX)
    if prefix:
        overrides["archive_prefix"] = prefix
    ignore = env.get(ENV_IGNORE_FILES)
    if ignore:
        overrides["ignore_files"] = [p.strip() for p in ignore.split(",") if p.strip()]
    return overrides


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in config file {path}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    if CONFIG_SECTION in loaded:
        section = loaded[CONFIG_SECTION]
        if section is None:
            return {}
        if not isinstance(section, dict):
            raise ConfigError(f"{CONFIG_SECTION} section must be a mapping")
        return dict(section)
    return dict(loaded)


def load_config(
    path: Optional[Union[str, Path]] = None,
    *,
    base_dir: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> FastbootDeployConfig:
    """Load the deploy configuration.

    An explicit ``path`` must exist. Without one, ``fastboot-deploy.yml`` in
    ``base_dir`` (or the working directory) is used when present. Values
    from ``FASTBOOT_*`` environment variables override the file.
    """
    env = os.environ if env is None else env
    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
        raw = _read_yaml(config_path)
    else:
        config_path = (base_dir or Path.cwd()) / CONFIG_FILENAME
        raw = _read_yaml(config_path) if config_path.exists() else {}

    config = parse_config(raw)
    overrides = _env_overrides(env)
    if overrides:
        logger.debug("Applying environment overrides: %s", sorted(overrides))
        config = config.with_overrides(**overrides)
    return config
