from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .exceptions import ArchiveIOError

logger = logging.getLogger("fastboot_archive.core.staging")


def stage_output_dir(output_dir: Path) -> None:
    """Remove ``output_dir`` and everything beneath it, if present.

    A missing path is not an error, so repeated calls are harmless.
    """
    output_dir = Path(output_dir)
    try:
        if output_dir.is_symlink() or output_dir.is_file():
            output_dir.unlink()
        elif output_dir.is_dir():
            shutil.rmtree(output_dir)
        else:
            logger.debug("Nothing to clean at %s", output_dir)
            return
    except FileNotFoundError:
        # Removed concurrently; the end state is the same.
        return
    except OSError as exc:
        raise ArchiveIOError(
            f"Failed to clean output directory {output_dir}: {exc}", path=output_dir
        ) from exc
    logger.info("Cleaned stale output directory %s", output_dir)
