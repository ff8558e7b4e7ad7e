"""Configuration loader for nestlint."""

import tomllib
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, ValidationError

from nestlint.log import get_logger

logger = get_logger(__name__)

CONFIG_DIR_NAME = ".nestlint"
CONFIG_FILE_NAME = "config.toml"

DEFAULT_FILE_NAMES = ["nestfile", "Nestfile", "nest", "Nest"]
DEFAULT_FILE_PATTERNS = ["*.nest"]


class LintConfig(BaseModel):
    """Lint settings read from ``config.toml``."""

    strict: bool = False
    output_format: Literal["text", "json"] = "text"
    file_names: list[str] = Field(default_factory=lambda: list(DEFAULT_FILE_NAMES))
    file_patterns: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FILE_PATTERNS),
    )


def _read_toml(path: Path) -> dict[str, Any]:
    """Read a TOML file, returning an empty table when it is missing or invalid."""
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.debug("Failed to load config %s: %s", path, e)
        return {}


def load_config(working_dir: Path, home_dir: Path | None = None) -> LintConfig:
    """Load lint configuration with priority: local > global > defaults.

    Args:
        working_dir: Directory holding the local ``.nestlint/config.toml``.
        home_dir: Directory holding the global ``.nestlint/config.toml``;
            defaults to the user's home directory.

    Returns:
        The merged configuration. Invalid files are ignored.

    """
    home = home_dir if home_dir is not None else Path.home()
    merged: dict[str, Any] = {}
    for path in (
        home / CONFIG_DIR_NAME / CONFIG_FILE_NAME,
        working_dir / CONFIG_DIR_NAME / CONFIG_FILE_NAME,
    ):
        table = _read_toml(path)
        try:
            LintConfig.model_validate(table)
        except ValidationError as e:
            logger.warning("Ignoring invalid config %s: %s", path, e)
            continue
        merged.update(table)

    return LintConfig.model_validate(merged)
