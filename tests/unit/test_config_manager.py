"""Tests for ConfigManager."""

from pathlib import Path

import pytest
import yaml

from techlife.config.manager import ConfigManager
from techlife.config.schema import SiteConfig
from techlife.utils.errors import InvalidConfigError
from techlife.utils.paths import get_config_dir


class TestConfigManager:
    """Tests for ConfigManager class."""

    def test_init_with_custom_dir(self, tmp_path: Path) -> None:
        """Test ConfigManager initialization with custom directory."""
        manager = ConfigManager(config_dir=tmp_path)
        assert manager.config_dir == tmp_path
        assert manager.config_file == tmp_path / "config.yaml"

    def test_init_uses_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that TECHLIFE_CONFIG_DIR picks the default directory."""
        monkeypatch.setenv("TECHLIFE_CONFIG_DIR", str(tmp_path))

        manager = ConfigManager()

        assert get_config_dir() == tmp_path
        assert manager.config_file == tmp_path / "config.yaml"

    def test_load_config_creates_default_if_missing(self, tmp_path: Path) -> None:
        """Test that load_config creates default config if file doesn't exist."""
        manager = ConfigManager(config_dir=tmp_path / "nested")
        config = manager.load_config()

        assert isinstance(config, SiteConfig)
        assert config == SiteConfig()
        assert manager.config_file.exists()

        # The written default must load back to the same values
        assert manager.load_config() == SiteConfig()

    def test_load_config_from_existing_file(self, tmp_path: Path, sample_config_dict: dict) -> None:
        """Test loading config from existing file."""
        with open(tmp_path / "config.yaml", "w", encoding="utf-8") as f:
            yaml.safe_dump(sample_config_dict, f)

        config = ConfigManager(config_dir=tmp_path).load_config()

        assert config.version == "1"
        assert config.is_production
        assert config.base_url == "https://example.com"
        assert config.questions.max_submissions == 5
        assert config.questions.min_form_time_ms == 3000

    def test_load_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("", encoding="utf-8")
        assert ConfigManager(config_dir=tmp_path).load_config() == SiteConfig()

    def test_save_config(self, tmp_path: Path) -> None:
        """Test saving configuration."""
        manager = ConfigManager(config_dir=tmp_path)
        config = SiteConfig(log_level="DEBUG", site_title="Технологии и жизнь")

        manager.save_config(config)

        # Read back and verify
        with open(manager.config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f)
        assert data["log_level"] == "DEBUG"
        assert "Технологии" in manager.config_file.read_text(encoding="utf-8")
        assert manager.load_config() == config

    def test_invalid_value_raises(self, tmp_path: Path) -> None:
        """Test that schema violations surface as InvalidConfigError."""
        (tmp_path / "config.yaml").write_text("log_level: LOUD\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError, match="Invalid configuration"):
            ConfigManager(config_dir=tmp_path).load_config()

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        (tmp_path / "config.yaml").write_text("paths: [unclosed\n", encoding="utf-8")

        with pytest.raises(InvalidConfigError):
            ConfigManager(config_dir=tmp_path).load_config()
