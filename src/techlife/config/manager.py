"""Configuration manager for loading and saving the site config."""

from pathlib import Path

import yaml

from techlife.config.defaults import DEFAULT_SITE_CONFIG, get_default_config_content
from techlife.config.schema import SiteConfig
from techlife.utils.errors import InvalidConfigError
from techlife.utils.paths import get_config_dir, get_config_file


class ConfigManager:
    """Manages the Techlife configuration file."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the
                platform config dir (or ``TECHLIFE_CONFIG_DIR``).
        """
        if config_dir is None:
            self.config_dir = get_config_dir()
            self.config_file = get_config_file()
        else:
            self.config_dir = config_dir
            self.config_file = config_dir / "config.yaml"

    def load_config(self) -> SiteConfig:
        """Load and validate the site configuration.

        Returns:
            Validated SiteConfig instance

        Raises:
            InvalidConfigError: If config is invalid
        """
        if not self.config_file.exists():
            self._create_default_config()
            return DEFAULT_SITE_CONFIG.model_copy(deep=True)

        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return SiteConfig(**data)
        except Exception as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: SiteConfig) -> None:
        """Save the site configuration.

        Args:
            config: SiteConfig instance to save
        """
        data = config.model_dump(mode="json")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def _create_default_config(self) -> None:
        """Create default config.yaml file."""
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_file.write_text(get_default_config_content(), encoding="utf-8")
