"""
Configuration for the chord reference engine.

The configuration is a plain dict. Start from DEFAULT_CONFIG (always copy it)
and optionally overlay a YAML file:

    # chordref.yaml
    database_path: data/guitar.json
    suggestion_limit: 5
    left_handed: false
    default_key: Bb
"""

from pathlib import Path
from typing import Dict, Optional, Union

import yaml


# =============================================================================
# DEFAULTS
# =============================================================================

DEFAULT_CONFIG = {
    # Data
    "database_path": None,  # None = bundled sample database

    # Chord name search
    "suggestion_limit": 10,

    # Diagrams
    "left_handed": True,  # orientation flag passed through to the renderer

    # Progressions
    "default_key": "C",

    # Logging
    "verbose": False,
}


def load_config(path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load configuration, merging a YAML file over the defaults.

    Args:
        path: YAML file to read (None returns a copy of the defaults)

    Returns:
        New config dict

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping or has unknown keys
    """
    config = DEFAULT_CONFIG.copy()
    if path is None:
        return config

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return config
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    unknown = sorted(set(data) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config keys: {unknown}")

    config.update(data)
    return config
