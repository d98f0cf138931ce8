from pathlib import Path

import pytest

from openmcf.config import CliConfig, ConfigError, ConfigLoader, LogFormat


@pytest.fixture
def clean_env(monkeypatch):
    for key in (
        "OPENMCF_CONFIG_PATH",
        "OPENMCF_LOG_LEVEL",
        "OPENMCF_LOG_FORMAT",
        "OPENMCF_PROVIDER_CONFIG_DIR",
        "OPENMCF_STRICT_REFERENCES",
    ):
        monkeypatch.delenv(key, raising=False)


class TestCliConfig:
    """Tests for the configuration model."""

    def test_defaults(self):
        config = CliConfig()
        assert config.log_level == "WARNING"
        assert config.log_format == LogFormat.CONSOLE
        assert config.provider_config_dir is None
        assert config.strict_references is False

    def test_log_level_is_upper_cased(self):
        assert CliConfig(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValueError):
            CliConfig(log_level="chatty")

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError):
            CliConfig(default_engine="pulumi")


@pytest.mark.usefixtures("clean_env")
class TestConfigLoader:
    """Tests for merging file, environment and CLI sources."""

    def test_missing_file_gives_defaults(self, tmp_path):
        config = ConfigLoader(tmp_path / "absent.yaml").load()
        assert config == CliConfig()

    def test_loads_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("log_level: info\nprovider_config_dir: /etc/openmcf\n")
        config = ConfigLoader(path).load()
        assert config.log_level == "INFO"
        assert config.provider_config_dir == Path("/etc/openmcf")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert ConfigLoader(path).load() == CliConfig()

    def test_environment_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text("log_level: info\nstrict_references: false\n")
        monkeypatch.setenv("OPENMCF_LOG_LEVEL", "error")
        monkeypatch.setenv("OPENMCF_STRICT_REFERENCES", "true")
        config = ConfigLoader(path).load()
        assert config.log_level == "ERROR"
        assert config.strict_references is True

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("log_format: json\n")
        monkeypatch.setenv("OPENMCF_CONFIG_PATH", str(path))
        loader = ConfigLoader()
        assert loader.config_path == path
        assert loader.load().log_format == LogFormat.JSON

    def test_cli_args_override_everything(self, tmp_path, monkeypatch):
        monkeypatch.setenv("OPENMCF_LOG_LEVEL", "error")
        loader = ConfigLoader(tmp_path / "absent.yaml")
        config = loader.merge_cli_args(loader.load(), {"log_level": "debug", "log_format": None})
        assert config.log_level == "DEBUG"
        assert config.log_format == LogFormat.CONSOLE

    def test_invalid_yaml_raises_config_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("log_level: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            ConfigLoader(path).load()

    def test_non_mapping_file_raises_config_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            ConfigLoader(path).load()

    def test_invalid_value_raises_config_error(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("log_level: chatty\n")
        with pytest.raises(ConfigError, match="validation failed"):
            ConfigLoader(path).load()

    def test_invalid_cli_arg_raises_config_error(self, tmp_path):
        loader = ConfigLoader(tmp_path / "absent.yaml")
        with pytest.raises(ConfigError, match="Invalid command line options"):
            loader.merge_cli_args(loader.load(), {"log_format": "xml"})
