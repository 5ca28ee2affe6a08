"""Unified configuration loaded from .daytrace.toml, env vars, and CLI flags.

Each layer overrides the previous one: field defaults, then the TOML
file, then DAYTRACE_* environment variables, then `daytrace extract` flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from daytrace.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".daytrace.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
    Path.home() / ".config" / "daytrace",
]


class ClusterSectionConfig(BaseModel):
    """[clusters] section."""

    engagement_threshold: float = Field(default=0.5, ge=0.0, le=1.0)
    session_gap_minutes: float = Field(default=45, gt=0)
    similarity_threshold: float = Field(default=0.3, ge=0.0, le=1.0)
    min_cluster_size: int = Field(default=2, ge=2)

    @property
    def session_gap(self) -> timedelta:
        return timedelta(minutes=self.session_gap_minutes)


class TaskSectionConfig(BaseModel):
    """[tasks] section."""

    deep_learning_min_turns: int = Field(default=5, ge=1)


class MissionSectionConfig(BaseModel):
    """[missions] section."""

    window_minutes: float = Field(default=10, gt=0)
    search_link_minutes: float = Field(default=5, gt=0)

    @property
    def window(self) -> timedelta:
        return timedelta(minutes=self.window_minutes)

    @property
    def search_link_window(self) -> timedelta:
        return timedelta(minutes=self.search_link_minutes)


class DaytraceConfig(BaseModel):
    """Top-level configuration for the semantic extraction pass."""

    clusters: ClusterSectionConfig = Field(default_factory=ClusterSectionConfig)
    tasks: TaskSectionConfig = Field(default_factory=TaskSectionConfig)
    missions: MissionSectionConfig = Field(default_factory=MissionSectionConfig)


_CLI_FIELDS: dict[str, tuple[str, str]] = {
    "session_gap": ("clusters", "session_gap_minutes"),
    "similarity": ("clusters", "similarity_threshold"),
    "engagement": ("clusters", "engagement_threshold"),
    "min_cluster_size": ("clusters", "min_cluster_size"),
    "window": ("missions", "window_minutes"),
    "deep_learning_turns": ("tasks", "deep_learning_min_turns"),
}


_ENV_FIELDS: dict[str, tuple[str, str]] = {
    "DAYTRACE_SESSION_GAP_MINUTES": ("clusters", "session_gap_minutes"),
    "DAYTRACE_SIMILARITY_THRESHOLD": ("clusters", "similarity_threshold"),
    "DAYTRACE_ENGAGEMENT_THRESHOLD": ("clusters", "engagement_threshold"),
    "DAYTRACE_MISSION_WINDOW_MINUTES": ("missions", "window_minutes"),
}


def load_config(path: str | Path | None = None) -> DaytraceConfig:
    """Build the extraction config for one run.

    An explicit ``path`` wins; a missing explicit file is reported and
    the defaults are used. Without one, the first ``.daytrace.toml``
    found in the working directory or ``~/.config/daytrace`` is read,
    falling back to ``~/.config/daytrace/config.toml``. The
    ``DAYTRACE_*`` environment variables are applied on top.

    Raises:
        ConfigError: If a TOML or environment value is out of range.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        global_config = Path.home() / ".config" / "daytrace" / "config.toml"
        if not data and global_config.exists():
            data = _load_toml(global_config)
            logger.info("Loaded config from %s", global_config)

    config = _validate(data, "config file") if data else DaytraceConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: DaytraceConfig, **cli_kwargs: object) -> DaytraceConfig:
    """Apply the ``extract`` command's threshold flags to ``config``.

    Flags left at ``None`` keep the configured value; names without a
    config field (see ``_CLI_FIELDS``) are ignored.

    Raises:
        ConfigError: If a flag value is out of range.
    """
    data = config.model_dump()
    for key, value in cli_kwargs.items():
        if value is None or key not in _CLI_FIELDS:
            continue
        section, field = _CLI_FIELDS[key]
        data[section][field] = value
    return _validate(data, "command-line options")


def _validate(data: dict[str, object], source: str) -> DaytraceConfig:
    try:
        return DaytraceConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings from {source}: {exc}") from exc


def _load_toml(path: Path) -> dict[str, object]:
    """Read a TOML file; unparsable files are logged and treated as empty."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: DaytraceConfig) -> DaytraceConfig:
    """Overlay the numeric ``DAYTRACE_*`` variables; non-numbers are skipped."""
    data = config.model_dump()
    for env_var, (section, field) in _ENV_FIELDS.items():
        value = os.environ.get(env_var)
        if value is None:
            continue
        try:
            data[section][field] = float(value)
        except ValueError:
            logger.warning("Ignoring %s=%r: not a number", env_var, value)
    return _validate(data, "environment variables")
