"""Default configuration values."""

import yaml

from techlife.config.schema import SiteConfig

DEFAULT_SITE_CONFIG = SiteConfig()


def get_default_config_content() -> str:
    """Return the YAML written when no config file exists yet."""
    data = DEFAULT_SITE_CONFIG.model_dump(mode="json")
    header = "# Techlife site configuration\n"
    return header + yaml.safe_dump(
        data, default_flow_style=False, sort_keys=False, allow_unicode=True
    )
