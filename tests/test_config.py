"""Tests for project configuration and settings."""

import pytest
import yaml
from pydantic import ValidationError

from wsk.config import ConfigManager
from wsk.config.settings import Settings


def _write_config(directory, data):
    path = directory / "project.yml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


class TestConfigManager:
    def test_load_config(self, tmp_path):
        path = _write_config(
            tmp_path,
            {
                "name": "universities",
                "schema_path": "schema.json",
                "csv": {"file_path": "data/universities.csv", "delimiter": ";"},
                "reconciliation": {"id_columns": ["qid"], "matches_path": "matches.csv"},
                "engine": {"mode": "row-based", "facets": []},
            },
        )
        manager = ConfigManager(path)
        config = manager.config

        assert config.name == "universities"
        assert config.csv.delimiter == ";"
        assert config.csv.encoding == "utf-8"
        assert config.reconciliation.id_columns == ["qid"]
        assert config.engine == {"mode": "row-based", "facets": []}
        assert config.output_path is None

    def test_paths_resolve_against_config_directory(self, tmp_path):
        path = _write_config(
            tmp_path,
            {
                "name": "universities",
                "schema_path": "schema.json",
                "csv": {"file_path": str(tmp_path / "elsewhere.csv")},
                "output_path": "out/updates.json",
            },
        )
        manager = ConfigManager(path)

        assert manager.get_schema_path() == tmp_path / "schema.json"
        assert manager.get_csv_path() == tmp_path / "elsewhere.csv"
        assert manager.get_output_path() == tmp_path / "out" / "updates.json"
        assert manager.get_matches_path() is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ConfigManager(tmp_path / "missing.yml").load_config()

    def test_invalid_config(self, tmp_path):
        path = _write_config(tmp_path, {"name": "no schema"})
        with pytest.raises(ValidationError):
            ConfigManager(path).load_config()


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WSK_LOG_LEVEL", raising=False)
        monkeypatch.delenv("WSK_EVALUATION_WORKERS", raising=False)
        settings = Settings(_env_file=None)
        assert settings.log_level == "INFO"
        assert settings.evaluation_workers == 1

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("WSK_EVALUATION_WORKERS", "4")
        monkeypatch.setenv("WSK_LOG_LEVEL", "DEBUG")
        settings = Settings(_env_file=None)
        assert settings.evaluation_workers == 4
        assert settings.log_level == "DEBUG"

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("WSK_LOG_LEVEL", "warning")
        assert Settings(_env_file=None).log_level == "WARNING"

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("WSK_LOG_LEVEL", "bogus")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)
