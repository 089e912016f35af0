"""Core archive-build primitives."""

from .archiver import ArchiveRequest, ArchiveResult, archive, build_archive
from .config import FastbootDeployConfig, load_config, parse_config
from .exceptions import (
    ArchiveIOError,
    ConfigError,
    FastbootArchiveError,
    InvalidArgumentError,
    SourceNotFoundError,
)
from .manifest import ManifestRenderer, make_manifest_renderer, parse_manifest
from .matcher import compile_ignore
from .naming import archive_file_name, manifest_fields
from .pipeline import DeployPreparation, DeploySetup, FastbootDeployPipeline
from .staging import stage_output_dir

__all__ = [
    "ArchiveIOError",
    "ArchiveRequest",
    "ArchiveResult",
    "ConfigError",
    "DeployPreparation",
    "DeploySetup",
    "FastbootArchiveError",
    "FastbootDeployConfig",
    "FastbootDeployPipeline",
    "InvalidArgumentError",
    "ManifestRenderer",
    "SourceNotFoundError",
    "archive",
    "archive_file_name",
    "build_archive",
    "compile_ignore",
    "load_config",
    "make_manifest_renderer",
    "manifest_fields",
    "parse_config",
    "parse_manifest",
    "stage_output_dir",
]
