"""Settings for the application JSON post processor.

Settings live in an optional TOML file with an ``[appjson]`` table:

    [appjson]
    order = -2147483643
    web_context_available = true

Missing files and missing tables yield the defaults.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import SettingsError
from .post_processor import (
    HIGHEST_PRECEDENCE,
    LOWEST_PRECEDENCE,
    ApplicationJsonEnvironmentPostProcessor,
)

# Conditional TOML import: stdlib tomllib (3.11+) or fallback tomli (<3.11)
try:
    import tomllib  # Python 3.11+
except ImportError:
    try:
        import tomli as tomllib  # type: ignore
    except ImportError:
        tomllib = None  # type: ignore

logger = logging.getLogger(__name__)

SETTINGS_TABLE = "appjson"


class ProcessorSettings(BaseModel):
    """Host-supplied knobs for ``ApplicationJsonEnvironmentPostProcessor``."""

    order: int = Field(
        default=ApplicationJsonEnvironmentPostProcessor.DEFAULT_ORDER,
        description="Post processor order; lower runs first",
    )
    web_context_available: Optional[bool] = Field(
        default=None,
        description="Override web context detection; None defers to the environment",
    )

    model_config = ConfigDict(extra="forbid")

    @field_validator("order")
    @classmethod
    def validate_order(cls, v: int) -> int:
        if v < HIGHEST_PRECEDENCE or v > LOWEST_PRECEDENCE:
            raise ValueError(f"order must be between {HIGHEST_PRECEDENCE} and {LOWEST_PRECEDENCE}")
        return v

    def create_post_processor(self) -> ApplicationJsonEnvironmentPostProcessor:
        return ApplicationJsonEnvironmentPostProcessor(
            order=self.order,
            web_context_available=self.web_context_available,
        )


def _read_toml(path: Path) -> Dict[str, Any]:
    if tomllib is None:
        raise SettingsError("tomllib/tomli not available; install tomli for TOML support")
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise SettingsError(f"Failed to read settings from {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML in {path}: {e}") from e


def load_settings(path: Optional[Path] = None) -> ProcessorSettings:
    """Load settings from ``path``; defaults when ``path`` is None or absent."""
    if path is None:
        return ProcessorSettings()
    if not path.exists():
        logger.debug("Settings file %s not found; using defaults", path)
        return ProcessorSettings()

    data = _read_toml(path)
    table = data.get(SETTINGS_TABLE, {})
    if not isinstance(table, dict):
        raise SettingsError(f"[{SETTINGS_TABLE}] must be a table: {path}")
    try:
        return ProcessorSettings(**table)
    except ValidationError as e:
        raise SettingsError(f"Invalid settings in {path}: {e}") from e
