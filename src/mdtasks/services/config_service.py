"""Configuration service for loading mdtasks.yml."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models.mdtasks_config import MdtasksConfig

logger = logging.getLogger(__name__)


class ConfigService:
    """Service for loading and caching the project configuration."""

    CONFIG_FILE = "mdtasks.yml"

    def __init__(self, project_root: Path) -> None:
        """Initialize the config service.

        Args:
            project_root: Directory holding mdtasks.yml
        """
        self.project_root = project_root
        self._config: MdtasksConfig | None = None
        self._config_error: str | None = None

    @property
    def config_path(self) -> Path:
        return self.project_root / self.CONFIG_FILE

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    def get_config(self) -> MdtasksConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._load_config()
        return self._config

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._config_error = None

    def _fallback(self, error: str) -> MdtasksConfig:
        self._config_error = error
        logger.warning(error)
        return MdtasksConfig.default()

    def _load_config(self) -> MdtasksConfig:
        """Load configuration from file or return default."""
        self._config_error = None

        if not self.config_path.exists():
            logger.debug(f"No {self.CONFIG_FILE} found, using defaults")
            return MdtasksConfig.default()

        try:
            with open(self.config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            return self._fallback(f"Invalid YAML in {self.CONFIG_FILE}: {e}")
        except OSError as e:
            return self._fallback(f"Error reading {self.CONFIG_FILE}: {e}")

        if data is None:
            return self._fallback(f"{self.CONFIG_FILE} is empty")
        if not isinstance(data, dict):
            return self._fallback(f"{self.CONFIG_FILE} must contain a mapping")

        try:
            config = MdtasksConfig(**data)
        except ValidationError as e:
            return self._fallback(f"Invalid {self.CONFIG_FILE}: {e}")

        logger.info(
            f"Loaded {self.CONFIG_FILE} with {len(config.sort.criteria)} sort criteria"
        )
        return config
