"""Configuration management with Pydantic validation"""

from .schema import (
    AppConfig,
    DataConfig,
    SplitConfig,
    IntervalConfig,
    NormalizeConfig,
    VizConfig,
    OutputConfig,
    LoggingConfig,
)
from .loader import default_config, load_config, load_yaml, save_config

__all__ = [
    "AppConfig",
    "DataConfig",
    "SplitConfig",
    "IntervalConfig",
    "NormalizeConfig",
    "VizConfig",
    "OutputConfig",
    "LoggingConfig",
    "default_config",
    "load_config",
    "load_yaml",
    "save_config",
]
