"""Explicit stage -> archive sequence for one deploy attempt.

A deploy host drives the steps in order::

    pipeline = FastbootDeployPipeline(load_config())
    setup = pipeline.setup()
    pipeline.will_build()
    # ... host builds into dist_dir ...
    prepared = await pipeline.did_prepare(dist_dir, revision_key)
    manifest = prepared.fastboot_downloader_manifest_content(bucket, revision_key)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from .archiver import ArchiveRequest, ArchiveResult, archive
from .config import FastbootDeployConfig
from .manifest import ManifestRenderer, make_manifest_renderer
from .naming import archive_file_name
from .staging import stage_output_dir

logger = logging.getLogger("fastboot_archive.core.pipeline")


@dataclass(frozen=True)
class DeploySetup:
    archive_prefix: str
    manifest_renderer: ManifestRenderer

    def to_context(self) -> dict[str, Any]:
        return {
            "fastbootArchivePrefix": self.archive_prefix,
            "fastbootDownloaderManifestContent": self.manifest_renderer,
        }


@dataclass(frozen=True)
class DeployPreparation:
    fastboot_archive_name: str
    fastboot_archive_path: Path
    fastboot_downloader_manifest_content: ManifestRenderer
    archive: ArchiveResult

    def to_context(self) -> dict[str, Any]:
        return {
            "fastbootArchiveName": self.fastboot_archive_name,
            "fastbootArchivePath": str(self.fastboot_archive_path),
            "fastbootDownloaderManifestContent": self.fastboot_downloader_manifest_content,
        }


class FastbootDeployPipeline:
    def __init__(
        self,
        config: Optional[FastbootDeployConfig] = None,
        *,
        base_dir: Optional[Path] = None,
        entry_root: Optional[str] = None,
    ) -> None:
        self._config = config or FastbootDeployConfig()
        self._base_dir = base_dir
        self._entry_root = entry_root
        self._renderer = make_manifest_renderer()

    @property
    def config(self) -> FastbootDeployConfig:
        return self._config

    @property
    def output_dir(self) -> Path:
        return self._config.resolve_dist_dir(self._base_dir)

    def setup(self) -> DeploySetup:
        return DeploySetup(
            archive_prefix=self._config.archive_prefix,
            manifest_renderer=self._renderer,
        )

    def will_build(self) -> None:
        logger.info("Staging output directory %s", self.output_dir)
        stage_output_dir(self.output_dir)

    async def did_prepare(
        self,
        dist_dir: Path,
        revision_key: str,
        *,
        archive_prefix: Optional[str] = None,
    ) -> DeployPreparation:
        prefix = self._config.archive_prefix if archive_prefix is None else archive_prefix
        request = ArchiveRequest(
            source_dir=Path(dist_dir),
            output_dir=self.output_dir,
            archive_name=archive_file_name(prefix, revision_key),
            ignore_pattern=self._config.ignore_files or None,
            entry_root=self._entry_root,
        )
        logger.info("Preparing archive %s from %s", request.archive_name, dist_dir)
        result = await archive(request)
        return DeployPreparation(
            fastboot_archive_name=result.archive_name,
            fastboot_archive_path=result.archive_path,
            fastboot_downloader_manifest_content=self._renderer,
            archive=result,
        )

    async def run(self, dist_dir: Path, revision_key: str) -> DeployPreparation:
        """Stage then archive, for hosts that have already built ``dist_dir``."""
        self.will_build()
        return await self.did_prepare(dist_dir, revision_key)
