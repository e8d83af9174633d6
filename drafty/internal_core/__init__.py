from .config import DraftyConfig, configure_logging, load_config

__all__ = ["DraftyConfig", "configure_logging", "load_config"]
