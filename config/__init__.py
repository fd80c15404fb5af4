"""Configuration for recap enhancer."""

from config.settings import EnhancementConfig, RecapSettings, build_enhancement_config

__all__ = [
    "RecapSettings",
    "EnhancementConfig",
    "build_enhancement_config",
]
