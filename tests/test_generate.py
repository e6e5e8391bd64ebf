"""Tests for generate command."""

from pathlib import Path

import yaml

from mdtasks.cli.generate import CONFIG_FILE, generate_config_yaml, run_generate
from mdtasks.models import MdtasksConfig
from mdtasks.services import ConfigService


class TestGenerateConfigYaml:
    """Tests for generate_config_yaml function."""

    def test_generates_valid_yaml(self):
        """Generated YAML is valid and parseable."""
        parsed = yaml.safe_load(generate_config_yaml())

        assert parsed["version"] == 1
        assert parsed["metadata_format"] == "tasks"
        assert "statuses" in parsed
        assert "sort" in parsed

    def test_includes_header_comments(self):
        content = generate_config_yaml()

        assert content.startswith("# mdtasks Configuration")
        assert "# sort:" in content

    def test_matches_default_config(self):
        """Generated config round-trips to MdtasksConfig.default()."""
        parsed = yaml.safe_load(generate_config_yaml())

        assert MdtasksConfig(**parsed) == MdtasksConfig.default()


class TestRunGenerate:
    """Tests for run_generate."""

    def test_prints_by_default(self, tmp_path: Path, capsys):
        assert run_generate(tmp_path) == 0

        out = capsys.readouterr().out
        assert "metadata_format" in out
        assert not (tmp_path / CONFIG_FILE).exists()

    def test_writes_config(self, tmp_path: Path):
        assert run_generate(tmp_path, write=True) == 0

        service = ConfigService(tmp_path)
        service.get_config()
        assert (tmp_path / CONFIG_FILE).exists()
        assert not service.has_config_error

    def test_existing_config_untouched(self, tmp_path: Path, capsys):
        config_path = tmp_path / CONFIG_FILE
        config_path.write_text("version: 1\n")

        assert run_generate(tmp_path, write=True) == 1
        assert config_path.read_text() == "version: 1\n"
        assert "Config exists" in capsys.readouterr().err
