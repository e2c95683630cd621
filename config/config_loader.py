"""
config_loader.py
-----------------
Singleton config loader. Reads config.yaml once and caches it.
Ingestion defaults, export formatting and dashboard settings all come
from here instead of being hardcoded in the modules that use them.
"""

import os
import yaml
from typing import Any, Dict


_CONFIG_CACHE: Dict[str, Any] = {}


def load_config(config_path: str | None = None) -> Dict[str, Any]:
    """
    Load and cache the YAML configuration file.

    Args:
        config_path: Path to config.yaml. Defaults to config/ relative to this file.

    Returns:
        Full config dictionary.
    """
    global _CONFIG_CACHE

    if _CONFIG_CACHE:
        return _CONFIG_CACHE

    if config_path is None:
        config_path = os.path.join(os.path.dirname(__file__), "config.yaml")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        _CONFIG_CACHE = yaml.safe_load(f)

    return _CONFIG_CACHE


def _get_block(name: str) -> Dict[str, Any]:
    config = load_config()
    if name not in config:
        raise KeyError(
            f"No '{name}' block in config. "
            f"Available: {list(config.keys())}"
        )
    return config[name]


def get_ingestion_config() -> Dict[str, Any]:
    """Returns the ingestion block (columns, date format, field defaults)."""
    return _get_block("ingestion")


def get_export_config() -> Dict[str, Any]:
    """Returns the export block (currency symbol, date format)."""
    return _get_block("export")


def get_dashboard_config() -> Dict[str, Any]:
    """Returns the dashboard block (data file, page size, palette)."""
    return _get_block("dashboard")


def get_logging_config() -> Dict[str, Any]:
    """Returns logging settings for basicConfig."""
    return _get_block("logging")


def reset_config() -> None:
    """Clears cached config. Useful for testing."""
    global _CONFIG_CACHE
    _CONFIG_CACHE = {}
