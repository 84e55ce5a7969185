from .loader import DEFAULT_CONFIG_TEMPLATE, load_config
from .models import PluginsConfig, UrlpipeConfig

__all__ = [
    "DEFAULT_CONFIG_TEMPLATE",
    "PluginsConfig",
    "UrlpipeConfig",
    "load_config",
]
