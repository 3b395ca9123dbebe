"""
Test configuration and shared fixtures.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml


@pytest.fixture
def sample_records() -> list[dict]:
    """Raw annotation records as the review UI sends them (camelCase)."""
    return [
        {
            "id": "c1",
            "userId": "u1",
            "authorName": "Ana Silva",
            "timestamp": 1.0,
            "duration": 2.5,
            "text": "Color shift here",
            "status": "open",
            "createdAt": "2026-02-15T12:00:00Z",
        },
        {
            "id": "c2",
            "userId": "u2",
            "timestamp": 65.5,
            "text": 'He said, "hi"',
            "status": "resolved",
            "replies": [],
        },
        {
            "id": "c3",
            "userId": "u1",
            "authorName": "Ana Silva",
            "timestamp": 10.0,
            "duration": 0.5,
            "text": "Fix <title> & 'logo'",
            "status": "open",
        },
    ]


@pytest.fixture
def tmp_project(tmp_path: Path) -> Path:
    """Create a temporary project directory with a PAL reviewline.yaml."""
    project_dir = tmp_path / "test_project"
    project_dir.mkdir()

    config = {"project_name": "test_project", "rate_profile": "pal"}
    with open(project_dir / "reviewline.yaml", "w") as f:
        yaml.dump(config, f)

    return project_dir
