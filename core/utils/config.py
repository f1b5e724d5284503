"""
Configuration utility functions
"""

from pathlib import Path
from typing import Any

import yaml

# config/providers/*.yaml live next to config/settings.py
PROVIDERS_DIR = Path(__file__).resolve().parent.parent.parent / "config" / "providers"


def load_yaml(filepath: str | Path) -> dict[str, Any]:
    """
    Load YAML file and return as dictionary

    Args:
        filepath: Path to YAML file (relative or absolute)

    Returns:
        Dictionary with YAML data (empty dict for an empty file)

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If YAML is invalid

    Example:
        >>> config = load_yaml("config/providers/streaming.yaml")
        >>> print(config['kafka']['topics']['trade_data'])
        trade-data
    """
    path = Path(filepath)

    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {filepath}")

    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_yaml_safe(filepath: str | Path) -> dict[str, Any]:
    """
    Load YAML file with fallback to empty dict if missing or invalid
    """
    try:
        return load_yaml(filepath)
    except (FileNotFoundError, yaml.YAMLError):
        return {}


def load_provider_config(name: str) -> dict[str, Any]:
    """Load config/providers/<name>.yaml (empty dict if absent)"""
    return load_yaml_safe(PROVIDERS_DIR / f"{name}.yaml")


def get_nested(config: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Walk nested YAML sections, returning default when any level is missing

    Example:
        >>> get_nested({"kafka": {"topics": {}}}, "kafka", "topics", "rsi_data", default="rsi-data")
        'rsi-data'
    """
    node: Any = config
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return node
