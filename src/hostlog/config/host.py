"""
Host Process Configuration.

Settings the default host reads from the process environment when the
embedding application does not inject its own capabilities.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_ENVIRONMENT_TYPE


class HostSettings(BaseSettings):
    """
    Host runtime flags.
    Prefix: HOST_
    """

    model_config = SettingsConfigDict(
        env_prefix="HOST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    debug: bool = Field(default=False, description="Route fallback output to stderr instead of files")
    environment_type: str = Field(
        default=DEFAULT_ENVIRONMENT_TYPE,
        description="Environment type (development, testing, staging, production)",
    )
    uploads_dir: Optional[Path] = Field(default=None, description="Root directory for component output")

    @field_validator("environment_type")
    @classmethod
    def normalize_environment_type(cls, v: str) -> str:
        return v.strip().lower() or DEFAULT_ENVIRONMENT_TYPE
