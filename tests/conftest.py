"""Shared test fixtures for glance."""

from __future__ import annotations

from pathlib import Path

import pytest

from glance.live.cache import Artifact, RenderCache
from glance.live.notifier import ChangeNotifier


@pytest.fixture
def markdown_file(tmp_path: Path) -> Path:
    """A Markdown document in its own directory."""
    path = tmp_path / "notes.md"
    path.write_text("# Hello\n\nFirst draft.\n", encoding="utf-8")
    return path


@pytest.fixture
def notifier() -> ChangeNotifier:
    """A notifier with the default mailbox capacity."""
    return ChangeNotifier()


@pytest.fixture
def cache(notifier: ChangeNotifier) -> RenderCache:
    """A render cache primed with a small artifact."""
    return RenderCache(Artifact(html="<h1>Hello</h1>", source_name="notes.md"), notifier)


@pytest.fixture(autouse=True)
def _isolate_config_files(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory so no glance.toml leaks in."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
