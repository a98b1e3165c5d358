"""Configuration management for Wikibase Schema Kit."""

from .manager import ConfigManager
from .models import CSVFileConfig, ProjectConfig, ReconciliationConfig

__all__ = ["ConfigManager", "CSVFileConfig", "ProjectConfig", "ReconciliationConfig"]
