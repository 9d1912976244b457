from .manager import ConfigManager
from .parser import parse_config, parse_config_file, resolve_config_path

__all__ = ["ConfigManager", "parse_config", "parse_config_file", "resolve_config_path"]
