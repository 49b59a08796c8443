"""Tests for configuration loading."""

from pathlib import Path

import pytest

from tasksync.config import (
    AppConfig,
    load_config,
)
from tasksync.errors import ConfigError


class TestAppConfig:
    """Tests for AppConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = AppConfig()

        assert config.paths.tasks_dir is None
        assert config.output.show_results is True
        assert config.output.max_value_width == 60
        assert config.logging.level == "WARNING"
        assert config.logging.console_logging is True

    def test_tasks_dir_from_environment(self, monkeypatch, tmp_path):
        """Test TSYNC_TASKS_DIR provides the default tasks_dir."""
        monkeypatch.setenv("TSYNC_TASKS_DIR", str(tmp_path))

        config = AppConfig()

        assert config.paths.tasks_dir == tmp_path

    def test_from_yaml_missing_file(self, tmp_path):
        """Test loading from non-existent file returns defaults."""
        config = AppConfig.from_yaml(tmp_path / "nonexistent.yaml")

        assert config.output.show_results is True

    def test_from_yaml_valid_file(self, tmp_path):
        """Test loading from valid YAML file."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
paths:
  tasks_dir: /custom/tasks

output:
  show_results: false
  max_value_width: 30

logging:
  level: DEBUG
""")
        config = AppConfig.from_yaml(config_file)

        assert config.paths.tasks_dir == Path("/custom/tasks")
        assert config.output.show_results is False
        assert config.output.max_value_width == 30
        assert config.logging.level == "DEBUG"

    def test_from_yaml_partial_config(self, tmp_path):
        """Test loading partial config preserves defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
output:
  max_value_width: 10
""")
        config = AppConfig.from_yaml(config_file)

        assert config.output.max_value_width == 10
        assert config.output.show_results is True
        assert config.logging.level == "WARNING"

    def test_from_yaml_empty_file(self, tmp_path):
        """Test empty YAML file returns defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        config = AppConfig.from_yaml(config_file)

        assert config.output.show_results is True

    def test_unknown_keys_ignored(self, tmp_path):
        """Test unknown sections and keys are ignored."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
output:
  colour: blue
  show_results: false
retries:
  count: 3
""")
        config = AppConfig.from_yaml(config_file)

        assert config.output.show_results is False
        assert not hasattr(config.output, "colour")
        assert not hasattr(config, "retries")

    def test_non_mapping_section_ignored(self, tmp_path):
        """Test a section that is not a mapping keeps its defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
output: true
logging:
  level: debug
""")
        config = AppConfig.from_yaml(config_file)

        assert config.output.show_results is True
        assert config.output.max_value_width == 60
        assert config.logging.level == "DEBUG"

    def test_top_level_list_gives_defaults(self, tmp_path):
        """Test a document that is not a mapping gives the default config."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- output\n- logging\n")

        config = AppConfig.from_yaml(config_file)

        assert config == AppConfig()

    def test_invalid_yaml(self, tmp_path):
        """Test unparsable YAML raises ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("output: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            AppConfig.from_yaml(config_file)

    def test_unknown_logging_level(self, tmp_path):
        """Test an unknown logging level raises ConfigError."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging:\n  level: LOUD\n")

        with pytest.raises(ConfigError, match="Unknown logging level: 'LOUD'"):
            AppConfig.from_yaml(config_file)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_defaults(self, tmp_path):
        """Test load_config returns defaults when no config exists."""
        config = load_config(config_dir=tmp_path / "empty")

        assert isinstance(config, AppConfig)
        assert config.output.show_results is True

    def test_load_config_explicit_path(self, sample_config):
        """Test load_config with explicit path."""
        config = load_config(sample_config)

        assert config.output.max_value_width == 20
        assert config.logging.level == "DEBUG"

    def test_load_config_from_config_dir(self, sample_config):
        """Test load_config finds config.yaml in the config directory."""
        config = load_config(config_dir=sample_config.parent)

        assert config.output.max_value_width == 20

    def test_load_config_from_env_dir(self, sample_config, monkeypatch):
        """Test TSYNC_CONFIG_DIR selects the config directory."""
        monkeypatch.setenv("TSYNC_CONFIG_DIR", str(sample_config.parent))

        config = load_config()

        assert config.output.max_value_width == 20

    def test_load_config_from_cwd(self, tmp_path, monkeypatch):
        """Test tsync.yaml in the working directory is used."""
        (tmp_path / "tsync.yaml").write_text("output:\n  max_value_width: 7\n")
        monkeypatch.chdir(tmp_path)

        config = load_config()

        assert config.output.max_value_width == 7
