"""Configuration for shapecheck.

Settings are read from the environment (``SHAPECHECK_*``) or a ``.env`` file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ShapecheckConfig(BaseSettings):
    """Environment-driven settings."""

    log_level: str = Field(default="WARNING", description="Log level for the stderr sink")
    path_separator: str = Field(
        default=".", description="Separator used when rendering issue paths"
    )
    default_unknown_keys: Literal["strip", "passthrough", "strict"] = Field(
        default="strip",
        description="Unknown key policy for object schemas built without an explicit policy",
    )

    model_config = SettingsConfigDict(
        env_prefix="SHAPECHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_config() -> ShapecheckConfig:
    """Return the process-wide config, loaded on first use."""
    return ShapecheckConfig()
