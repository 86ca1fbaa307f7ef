"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from caskforge.core.recipe import load_recipe
from caskforge.models.recipe import Recipe
from caskforge.utils.shell import CommandResult


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG and install directory at a temporary location."""
    root = tmp_path / "home"
    root.mkdir()
    monkeypatch.setenv("HOME", str(root))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(root / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(root / "state"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(root / "cache"))
    monkeypatch.setenv("CASKFORGE_APPDIR", str(root / "Applications"))
    monkeypatch.setenv("CASKFORGE_BINDIR", str(root / "bin"))
    return root


@pytest.fixture
def recipe() -> Recipe:
    """The bundled TrackWeight recipe."""
    return load_recipe("trackweight")


@pytest.fixture
def staged_path(tmp_path: Path) -> Path:
    """An empty staging checkout directory."""
    path = tmp_path / "staging" / "trackweight-1.0.3"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def built_app(recipe: Recipe) -> Callable[[Path], Path]:
    """Factory creating the bundle xcodebuild would produce in a checkout."""

    def _make(staged: Path) -> Path:
        app = staged / recipe.artifact.built_path(recipe.build)
        macos = app / "Contents" / "MacOS"
        macos.mkdir(parents=True)
        (macos / "TrackWeight").write_text("#!/bin/sh\n")
        (app / "Contents" / "Info.plist").write_text("<plist/>")
        return app

    return _make


@pytest.fixture
def fake_xcodebuild(built_app: Callable[[Path], Path]) -> Callable[..., CommandResult]:
    """run_command stand-in that behaves like a successful xcodebuild run."""

    def _run(args: list[str], **kwargs: object) -> CommandResult:
        built_app(Path(str(kwargs["cwd"])))
        return CommandResult(stdout="** BUILD SUCCEEDED **", stderr="", returncode=0)

    return _run
