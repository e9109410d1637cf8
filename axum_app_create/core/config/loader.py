"""
User configuration loader — reads ~/.axum-app-create.yml.

The file is optional.  It currently holds one setting::

    template_dir: ~/my-axum-templates

A broken file never stops the tool: it is logged as a warning and the
defaults are used instead.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError, field_validator

logger = logging.getLogger(__name__)

USER_CONFIG_FILE = ".axum-app-create.yml"
USER_CONFIG_ENV = "AAC_USER_CONFIG"


class UserConfig(BaseModel):
    """Per-user defaults."""

    template_dir: Path | None = None

    @field_validator("template_dir", mode="before")
    @classmethod
    def _expand(cls, value: object) -> object:
        if isinstance(value, str):
            if not value.strip():
                return None
            return Path(value).expanduser()
        return value


def user_config_path() -> Path:
    """Location of the user config (``$AAC_USER_CONFIG`` overrides the home default)."""
    override = os.environ.get(USER_CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / USER_CONFIG_FILE


def load_user_config(path: Path | None = None) -> UserConfig:
    """Load the user config, falling back to defaults on any problem.

    Args:
        path: Explicit config path (default: ``user_config_path()``).

    Returns:
        UserConfig — defaults when the file is absent or invalid.
    """
    path = path or user_config_path()
    if not path.is_file():
        logger.debug("No user config at %s", path)
        return UserConfig()

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read user config %s: %s — using defaults", path, e)
        return UserConfig()

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        logger.warning("Invalid YAML in user config %s: %s — using defaults", path, e)
        return UserConfig()

    if data is None:
        return UserConfig()
    if not isinstance(data, dict):
        logger.warning(
            "Expected a YAML mapping in %s, got %s — using defaults", path, type(data).__name__
        )
        return UserConfig()

    try:
        config = UserConfig.model_validate(data)
    except ValidationError as e:
        logger.warning("Invalid user config %s: %s — using defaults", path, e)
        return UserConfig()

    logger.debug("Loaded user config from %s", path)
    return config


def resolve_template_dir(cli_flag: Path | None, user_config: UserConfig | None = None) -> Path | None:
    """Pick the custom template directory: CLI flag > user config > none."""
    if cli_flag is not None:
        return cli_flag
    if user_config is not None and user_config.template_dir is not None:
        return user_config.template_dir
    return None
