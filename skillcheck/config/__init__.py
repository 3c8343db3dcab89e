"""Configuration for skillcheck"""

from .schema import Config, LayoutConfig, RulesConfig
from .validator import ConfigValidator, load_config, CONFIG_FILE

__all__ = [
    "Config",
    "LayoutConfig",
    "RulesConfig",
    "ConfigValidator",
    "load_config",
    "CONFIG_FILE",
]
