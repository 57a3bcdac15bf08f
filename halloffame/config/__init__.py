from halloffame.config.settings import Settings, get_bool_env, get_settings
from halloffame.config.logging_config import setup_logging

__all__ = ["Settings", "get_bool_env", "get_settings", "setup_logging"]
