from __future__ import annotations

from pathlib import Path
from typing import NoReturn, Optional

import typer

from ....core.config import FastbootDeployConfig, load_config
from ....core.exceptions import ConfigError


def get_version() -> str:
    import importlib.metadata

    try:
        return importlib.metadata.version("fastboot-archive")
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def raise_exit(message: str, *, cause: Optional[BaseException] = None) -> NoReturn:
    typer.echo(message, err=True)
    if cause is not None:
        raise typer.Exit(code=1) from cause
    raise typer.Exit(code=1)


def require_config(config_path: Optional[Path]) -> FastbootDeployConfig:
    try:
        return load_config(config_path)
    except ConfigError as exc:
        raise_exit(f"Invalid configuration: {exc}", cause=exc)
