"""Tests for the command line interface."""

import json
import shutil
from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from wsk.cli import cli

SCHEMA_DIR = Path(__file__).parent / "data" / "schema"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tmp_path):
    """A project directory with schema, table, matches and config."""
    shutil.copy(SCHEMA_DIR / "inception.json", tmp_path / "schema.json")
    (tmp_path / "universities.csv").write_text(
        "subject,inception,reference\n"
        "University of Ljubljana,1919,http://www.ljubljana-slovenia.com/university-ljubljana\n"
        "University of Warwick,1965,\n",
        encoding="utf-8",
    )
    (tmp_path / "matches.csv").write_text(
        "row,column,id\n0,subject,Q1377\n1,subject,Q865528\n", encoding="utf-8"
    )
    config = {
        "name": "universities",
        "schema_path": "schema.json",
        "csv": {"file_path": "universities.csv"},
        "reconciliation": {"matches_path": "matches.csv"},
        "output_path": "out/updates.json",
    }
    config_path = tmp_path / "project.yml"
    config_path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return config_path


class TestNormalize:
    def test_prints_canonical_schema(self, runner):
        result = runner.invoke(cli, ["normalize", "--path", str(SCHEMA_DIR / "history_of_medicine.json")])

        assert result.exit_code == 0, result.output
        expected = json.loads(
            (SCHEMA_DIR / "history_of_medicine_normalized.json").read_text(encoding="utf-8")
        )
        assert json.loads(result.output) == expected

    def test_writes_output_file(self, runner, tmp_path):
        target = tmp_path / "normalized.json"
        result = runner.invoke(
            cli, ["normalize", "--path", str(SCHEMA_DIR / "roarmap.json"), "--output", str(target)]
        )

        assert result.exit_code == 0, result.output
        document = json.loads(target.read_text(encoding="utf-8"))
        assert "itemDocuments" not in document
        assert len(document["statements"]) == 3

    def test_invalid_schema_aborts(self, runner, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text('{"statements": [{"subject": {}}]}', encoding="utf-8")
        result = runner.invoke(cli, ["normalize", "--path", str(broken)])
        assert result.exit_code != 0


class TestEvaluate:
    def test_writes_item_updates(self, runner, project):
        result = runner.invoke(cli, ["evaluate", "--config", str(project)])

        assert result.exit_code == 0, result.output
        updates = json.loads((project.parent / "out" / "updates.json").read_text(encoding="utf-8"))
        assert [update["id"] for update in updates] == ["Q1377", "Q865528"]
        assert "P571" in updates[0]["claims"]

    def test_output_option_and_workers(self, runner, project, tmp_path):
        target = tmp_path / "elsewhere.json"
        result = runner.invoke(
            cli, ["evaluate", "--config", str(project), "--output", str(target), "--workers", "2"]
        )

        assert result.exit_code == 0, result.output
        assert len(json.loads(target.read_text(encoding="utf-8"))) == 2

    def test_facets_from_config(self, runner, project):
        config = yaml.safe_load(project.read_text(encoding="utf-8"))
        config["engine"] = {
            "mode": "row-based",
            "facets": [{"type": "text", "columnName": "reference", "query": "www"}],
        }
        project.write_text(yaml.safe_dump(config), encoding="utf-8")

        result = runner.invoke(cli, ["evaluate", "--config", str(project)])

        assert result.exit_code == 0, result.output
        updates = json.loads((project.parent / "out" / "updates.json").read_text(encoding="utf-8"))
        assert [update["id"] for update in updates] == ["Q1377"]

    def test_missing_column_aborts(self, runner, project):
        (project.parent / "universities.csv").write_text("subject\nUniversity of Ljubljana\n", encoding="utf-8")
        result = runner.invoke(cli, ["evaluate", "--config", str(project)])
        assert result.exit_code != 0


class TestLogLevel:
    def test_unknown_log_level_is_a_usage_error(self, runner):
        result = runner.invoke(
            cli, ["--log-level", "bogus", "normalize", "--path", str(SCHEMA_DIR / "inception.json")]
        )
        assert result.exit_code == 2
        assert "bogus" in result.output

    def test_log_level_is_case_insensitive(self, runner):
        result = runner.invoke(
            cli, ["--log-level", "debug", "normalize", "--path", str(SCHEMA_DIR / "inception.json")]
        )
        assert result.exit_code == 0, result.output
