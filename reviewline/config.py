"""
reviewline.config - YAML config loading, profile merging, validation.

Handles loading reviewline.yaml from a project directory and applying
frame-rate profile defaults. Only the CLI reads configuration; exporters
take every value as an explicit argument.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pydantic
import yaml
from pydantic import BaseModel, Field, field_validator

from reviewline.exceptions import ConfigError

CONFIG_FILENAME = "reviewline.yaml"


class ReviewlineConfig(BaseModel):
    """Resolved configuration for a Reviewline project."""

    project_name: str = "untitled"
    version_number: int = Field(default=1, ge=1)
    rate_profile: str = "film"
    frame_rate: int = Field(default=24, gt=0, strict=True)

    formats: list[str] = Field(default_factory=lambda: ["edl", "xml", "csv"])
    include_resolved: bool = True
    output_dir: str = "exports"

    profile_config_path: Path | None = None

    @field_validator("rate_profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        if v not in BUILTIN_PROFILES:
            raise ValueError(f"rate_profile must be one of: {set(BUILTIN_PROFILES)}")
        return v

    @field_validator("formats")
    @classmethod
    def validate_formats(cls, v: list[str]) -> list[str]:
        valid = {"edl", "xml", "csv"}
        normalized = [f.lower() for f in v]
        unknown = [f for f in normalized if f not in valid]
        if unknown:
            raise ValueError(f"formats must be drawn from: {valid}, got {unknown}")
        if not normalized:
            raise ValueError("formats must not be empty")
        return normalized


BUILTIN_PROFILES: dict[str, dict[str, Any]] = {
    "film": {"frame_rate": 24},
    "pal": {"frame_rate": 25},
    "ntsc": {"frame_rate": 30},
}


def load_profile(name: str) -> dict[str, Any]:
    """Load a built-in frame-rate profile by name."""
    if name in BUILTIN_PROFILES:
        return BUILTIN_PROFILES[name].copy()
    raise ValueError(f"Unknown profile: {name}")


def merge_config(project_config: dict[str, Any], profile: dict[str, Any]) -> dict[str, Any]:
    """Merge project config with profile defaults. Project config takes precedence."""
    merged = profile.copy()
    for key, value in project_config.items():
        if value is not None:
            merged[key] = value
    return merged


def load_config(project_dir: Path) -> ReviewlineConfig:
    """Load and validate configuration from a project directory.

    Raises:
        FileNotFoundError: If reviewline.yaml is missing
        ConfigError: If the file is not valid YAML or fails validation
    """
    config_file = project_dir / CONFIG_FILENAME
    if not config_file.exists():
        raise FileNotFoundError(f"No {CONFIG_FILENAME} found in {project_dir}")

    try:
        with open(config_file, encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(raw_config, dict):
        raise ConfigError(f"{config_file} must contain a mapping")

    profile_name = raw_config.get("rate_profile", "film")
    try:
        profile = load_profile(profile_name)
    except ValueError as e:
        raise ConfigError(str(e)) from e

    merged = merge_config(raw_config, profile)
    merged["profile_config_path"] = config_file

    try:
        return ReviewlineConfig(**merged)
    except pydantic.ValidationError as e:
        raise ConfigError(f"Invalid configuration in {config_file}: {e}") from e


def create_default_config(project_name: str, profile: str = "film") -> dict[str, Any]:
    """Create a default config for a new project."""
    defaults = {
        "project_name": project_name,
        "version_number": 1,
        "rate_profile": profile,
        "formats": ["edl", "xml", "csv"],
        "include_resolved": True,
        "output_dir": "exports",
    }
    return merge_config(defaults, load_profile(profile))


def write_config(config: dict[str, Any], path: Path) -> None:
    """Write configuration to a YAML file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
