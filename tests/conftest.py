"""Test harness configuration.

This repo uses a `src/` layout. Ensure tests always import the in-repo code
rather than an older installed `fastboot_archive`.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS = 60


def pytest_configure() -> None:
    repo_root = Path(__file__).resolve().parents[1]
    src_path = str(repo_root / "src")
    if sys.path[:1] != [src_path] and src_path not in sys.path:
        sys.path.insert(0, src_path)


def pytest_collection_modifyitems(
    session: pytest.Session, config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Apply a default per-test timeout to non-integration tests."""
    _ = session, config
    for item in items:
        if item.get_closest_marker("integration") is not None:
            continue
        item.add_marker(pytest.mark.timeout(DEFAULT_NON_INTEGRATION_TIMEOUT_SECONDS))


@pytest.fixture()
def dist_dir(tmp_path: Path) -> Path:
    """A small build output tree: deploy.txt, assets/app.js, assets/app.map."""
    root = tmp_path / "deploy-dist"
    (root / "assets").mkdir(parents=True)
    (root / "deploy.txt").write_text("deployment", encoding="utf-8")
    (root / "assets" / "app.js").write_text("deployment", encoding="utf-8")
    (root / "assets" / "app.map").write_text("deployment", encoding="utf-8")
    return root


@pytest.fixture()
def anyio_backend() -> str:
    """The code under test is built on asyncio; run anyio tests on it only."""
    return "asyncio"
