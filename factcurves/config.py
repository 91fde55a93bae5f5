"""Data configuration for the practice-log pipeline.

Defaults mirror configs/data_config.json; a JSON file only needs the keys it
overrides.
"""

from __future__ import annotations
import copy
import json
import os
from typing import Any, Dict, Optional

DEFAULT_CONFIG_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'configs', 'data_config.json'
)

DEFAULT_DATA_CONFIG: Dict[str, Any] = {
    'column_map': {
        'userId': 'user_id',
        'sessionId': 'session_id',
        'level': 'level',
        'cue': 'item_key',
        'presentationStartTime': 'presentation_time',
        'givenResponse': 'given_response',
        'correct': 'correct',
    },
    'levels': [1, 2, 3],
    'response_range': [0, 100],
    'export_sep': ',',
    'export_filename': 'level{level}_{group}.csv',
}


def load_data_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load the data config, overlaying a JSON file on the built-in defaults.

    Args:
        path: JSON file to read. When None, configs/data_config.json is used if
            it exists, otherwise the defaults are returned as-is.

    Returns:
        dict with at least the keys of DEFAULT_DATA_CONFIG

    Raises:
        FileNotFoundError: If an explicit path does not exist
    """
    config = copy.deepcopy(DEFAULT_DATA_CONFIG)
    if path is None:
        if not os.path.exists(DEFAULT_CONFIG_PATH):
            return config
        path = DEFAULT_CONFIG_PATH
    elif not os.path.exists(path):
        raise FileNotFoundError(f"Data config not found: {path}")

    with open(path, 'r') as f:
        overrides = json.load(f)

    for key, value in overrides.items():
        if key == 'column_map':
            config['column_map'].update(value)
        else:
            config[key] = value
    return config


__all__ = ['DEFAULT_DATA_CONFIG', 'DEFAULT_CONFIG_PATH', 'load_data_config']
