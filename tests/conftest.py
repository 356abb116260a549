"""Shared fixtures for FabForge tests."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from fabforge.config import AppConfig
from fabforge.rig.node import SkeleNode
from fabforge.workspace import Workspace


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's ~/.fabforge and FABFORGE_* variables out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))
    for key in list(os.environ):
        if key.startswith("FABFORGE_"):
            monkeypatch.delenv(key)
    return home


@pytest.fixture
def sample_data() -> dict:
    """A small arm rig: shoulder -> elbow -> hand sprite, plus a body sprite."""
    return {
        "angle": 0,
        "mag": 1,
        "id": "root",
        "children": [
            {
                "angle": 90,
                "mag": 2,
                "id": "shoulder",
                "children": [
                    {
                        "angle": 90,
                        "mag": 1,
                        "id": "elbow",
                        "children": [
                            {"angle": 0, "mag": 0.5, "id": "hand", "uri": "sprite:hand", "sort": 2},
                        ],
                    },
                    {"angle": 0, "mag": 0.3, "id": "sleeve", "uri": "sprite:sleeve", "sort": 1},
                ],
            },
            {"angle": 0, "mag": 1.5, "id": "body", "uri": "sprite:body", "props": {"tint": 3}},
        ],
    }


@pytest.fixture
def sample_skele(sample_data: dict) -> SkeleNode:
    return SkeleNode.from_data(sample_data)


@pytest.fixture
def fab_file(tmp_path: Path, sample_data: dict) -> Path:
    path = tmp_path / "arm.fab.json"
    path.write_text(
        json.dumps({"name": "arm", "description": "test arm", "skele": sample_data}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def workspace() -> Workspace:
    return Workspace(AppConfig())
