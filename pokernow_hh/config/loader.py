"""
Configuration loader for conversion options
"""
import os
import logging
from typing import Any, Dict, Optional

import yaml

from .options import ConvertOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "POKERNOW_HH_CONFIG"


def _read_yaml(path: str) -> Dict[str, Any]:
    """
    Read a YAML options file

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of option names to values
    """
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f)

    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{path}: expected a mapping at the top level, got {type(cfg).__name__}")

    # Options may live under a "convert" section
    section = cfg.get("convert", cfg)
    if not isinstance(section, dict):
        raise ValueError(f"{path}: 'convert' section must be a mapping")
    return dict(section)


def load_options(path: Optional[str] = None, **overrides: Any) -> ConvertOptions:
    """
    Build ConvertOptions from a YAML file plus explicit overrides

    The file defaults to $POKERNOW_HH_CONFIG when no path is given. Overrides
    that are None are ignored so unset CLI flags keep the file's values.

    Returns:
        Validated ConvertOptions
    """
    path = path or os.getenv(CONFIG_ENV_VAR)

    values: Dict[str, Any] = {}
    if path:
        values = _read_yaml(path)
        logger.info(f"Loaded conversion options from {path}")

    for key, value in overrides.items():
        if value is not None:
            values[key] = value

    return ConvertOptions(**values)
