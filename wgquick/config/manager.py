#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration management module for wg-quick.
This module loads the tool's own settings; interface config files are handled by `config.parser`.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger("wg-quick")

DEFAULT_CONFIG_DIR = "/data/misc/wireguard"
DEFAULT_TOOL_CONFIG = f"{DEFAULT_CONFIG_DIR}/wg-quick.json"


class ConfigManager:
    """Manager for wg-quick settings."""

    def load_tool_config(self) -> Dict[str, Any]:
        """Load settings, starting from defaults.
        Precedence: env > JSON file (WG_QUICK_CONFIG) > defaults.
        A missing file is fine; a file that is not valid JSON is fatal.
        """
        cfg: Dict[str, Any] = {
            "config_dir": DEFAULT_CONFIG_DIR,
            "policy_driver": "ndc",
            "fwmark": 0x20000,
            "network_users": "0-99999",
            "logging": {"level": "INFO", "format": "%(message)s"},
        }
        cfg_path = os.environ.get("WG_QUICK_CONFIG", DEFAULT_TOOL_CONFIG)
        p = Path(cfg_path)
        if p.exists():
            with p.open("r", encoding="utf-8") as f:
                try:
                    file_cfg = json.load(f)
                except ValueError as e:
                    raise RuntimeError(f"Invalid JSON in WG_QUICK_CONFIG='{cfg_path}': {e}") from e
            if not isinstance(file_cfg, dict):
                raise RuntimeError(f"WG_QUICK_CONFIG='{cfg_path}' must contain a JSON object")
            for key in ("config_dir", "policy_driver", "network_users"):
                if isinstance(file_cfg.get(key), str) and file_cfg[key].strip():
                    cfg[key] = file_cfg[key].strip()
            if "fwmark" in file_cfg:
                cfg["fwmark"] = self._parse_int(file_cfg["fwmark"], "fwmark")
            if isinstance(file_cfg.get("logging"), dict):
                cfg["logging"].update(file_cfg["logging"])
        env_dir = os.environ.get("WG_QUICK_CONFIG_DIR")
        if env_dir:
            cfg["config_dir"] = env_dir
        return cfg

    def _parse_int(self, value: Any, key: str) -> int:
        """Accept ints and decimal/hex strings ("0x20000")."""
        try:
            return value if isinstance(value, int) else int(str(value), 0)
        except ValueError as e:
            raise RuntimeError(f"Invalid {key} value '{value}'") from e
