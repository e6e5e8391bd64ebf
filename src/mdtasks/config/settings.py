"""Application settings."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

from ..models.task import MetadataFormat


class Settings(BaseSettings):
    """Application settings, overridable through MDTASKS_* variables."""

    project_root: Path = Field(
        default=Path(),
        description="Path to project root containing mdtasks.yml",
    )

    metadata_format: MetadataFormat | None = Field(
        default=None,
        description="Override the configured metadata format",
    )

    verbose: int = Field(
        default=0,
        description="Verbosity level (0=off, 1=INFO, 2+=DEBUG)",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional path to write logs to file",
    )

    model_config = {
        "env_prefix": "MDTASKS_",
    }
