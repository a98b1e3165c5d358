"""Configuration manager for loading and validating project settings."""

import yaml
from pathlib import Path

from .models import ProjectConfig


class ConfigManager:
    """Manages project configuration loading and validation."""

    def __init__(self, config_path: str | Path) -> None:
        """Initialize configuration manager.

        Args:
            config_path: Path to the project configuration file
        """
        self.config_path = Path(config_path)
        self._config: ProjectConfig | None = None

    def load_config(self) -> ProjectConfig:
        """Load and validate project configuration.

        Returns:
            Validated project configuration

        Raises:
            FileNotFoundError: If config file doesn't exist
            yaml.YAMLError: If config file is invalid YAML
            ValidationError: If config doesn't match schema
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with open(self.config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        self._config = ProjectConfig(**config_data)
        return self._config

    @property
    def config(self) -> ProjectConfig:
        """Get the loaded configuration.

        Returns:
            Project configuration (loads if not already loaded)
        """
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def resolve_path(self, path: str) -> Path:
        """Resolve a path from the config relative to the config file's directory."""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.config_path.parent / candidate

    def get_schema_path(self) -> Path:
        return self.resolve_path(self.config.schema_path)

    def get_csv_path(self) -> Path:
        return self.resolve_path(self.config.csv.file_path)

    def get_matches_path(self) -> Path | None:
        matches_path = self.config.reconciliation.matches_path
        return self.resolve_path(matches_path) if matches_path else None

    def get_output_path(self) -> Path | None:
        output_path = self.config.output_path
        return self.resolve_path(output_path) if output_path else None
