from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Callable, List, NoReturn, Optional

import typer

from ....core.config import FastbootDeployConfig
from ....core.exceptions import FastbootArchiveError
from ....core.manifest import make_manifest_renderer
from ....core.pipeline import FastbootDeployPipeline


def register_archive_commands(
    app: typer.Typer,
    *,
    require_config: Callable[[Optional[Path]], FastbootDeployConfig],
    raise_exit: Callable[..., NoReturn],
) -> None:
    @app.command("stage")
    def stage(
        config: Optional[Path] = typer.Option(
            None, "--config", help="Path to fastboot-deploy.yml"
        ),
    ) -> None:
        """Remove the configured output directory left by a previous run."""
        pipeline = FastbootDeployPipeline(require_config(config))
        try:
            pipeline.will_build()
        except FastbootArchiveError as exc:
            raise_exit(str(exc), cause=exc)
        typer.echo(f"Cleaned {pipeline.output_dir}")

    @app.command("prepare")
    def prepare(
        dist_dir: Path = typer.Argument(..., help="Build output directory to archive"),
        revision_key: str = typer.Option(
            ..., "--revision-key", "-r", help="Unique revision identifier"
        ),
        config: Optional[Path] = typer.Option(
            None, "--config", help="Path to fastboot-deploy.yml"
        ),
        prefix: Optional[str] = typer.Option(
            None, "--prefix", help="Archive name prefix (overrides config)"
        ),
        ignore: Optional[List[str]] = typer.Option(
            None, "--ignore", help="Glob of files to leave out; repeatable"
        ),
        skip_stage: bool = typer.Option(
            False, "--skip-stage", help="Keep the existing output directory"
        ),
        output_json: bool = typer.Option(False, "--json", help="Emit JSON output"),
    ) -> None:
        """Archive DIST_DIR into <output>/<prefix><revision-key>.zip."""
        deploy_config = require_config(config)
        try:
            deploy_config = deploy_config.with_overrides(
                archive_prefix=prefix,
                ignore_files=list(ignore) if ignore else None,
            )
            pipeline = FastbootDeployPipeline(deploy_config)
            if not skip_stage:
                pipeline.will_build()
            prepared = asyncio.run(pipeline.did_prepare(dist_dir, revision_key))
        except FastbootArchiveError as exc:
            raise_exit(str(exc), cause=exc)

        if output_json:
            payload = {
                "fastbootArchiveName": prepared.fastboot_archive_name,
                "fastbootArchivePath": str(prepared.fastboot_archive_path),
                "entries": list(prepared.archive.entries),
            }
            typer.echo(json.dumps(payload, indent=2))
            return
        typer.echo(
            f"Wrote {prepared.fastboot_archive_path} "
            f"({len(prepared.archive.entries)} file(s))"
        )

    @app.command("manifest")
    def manifest(
        bucket: str = typer.Option(..., "--bucket", help="Storage bucket name"),
        key: str = typer.Option(..., "--key", help="Revision key of the archive"),
    ) -> None:
        """Print the downloader manifest JSON."""
        renderer = make_manifest_renderer()
        try:
            typer.echo(renderer(bucket, key))
        except FastbootArchiveError as exc:
            raise_exit(str(exc), cause=exc)
