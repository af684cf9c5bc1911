"""Engine configuration management."""

from questionnaire.config.engine import (
    EngineConfig,
    get_engine_config,
    load_engine_config,
    reset_engine_config_cache,
)

__all__ = [
    "EngineConfig",
    "get_engine_config",
    "load_engine_config",
    "reset_engine_config_cache",
]
