"""
Raw trial loading for the multiplication practice logs.

Reads the exported trial table, renames the application's column names to the
canonical Trial fields and splits the result into the three level populations.
Everything is read as text so that response validation sees the raw values.
"""

import logging
import numbers
import re

import pandas as pd

logger = logging.getLogger(__name__)

TRIAL_FIELDS = [
    'user_id', 'session_id', 'level', 'item_key',
    'presentation_time', 'given_response', 'correct',
]
VALID_LEVELS = (1, 2, 3)


def _check_fields(df):
    missing = [c for c in TRIAL_FIELDS if c not in df.columns]
    if missing:
        raise KeyError(f"Trial data is missing required columns: {missing}")


def load_trials(path, column_map=None, sep=','):
    """
    Load raw trials from a delimited file.

    Args:
        path: Path to the trial table
        column_map: {raw column name: canonical field}; canonical names pass through
        sep: Field delimiter

    Returns:
        df: DataFrame with the canonical Trial columns (plus any extra raw columns)

    Raises:
        KeyError: If a required field is absent after renaming
    """
    df = pd.read_csv(path, sep=sep, dtype=str, keep_default_na=False)
    if column_map:
        df = df.rename(columns=column_map)
    _check_fields(df)
    logger.info("Loaded %d raw trials from %s", len(df), path)
    return df


def trials_from_records(records, column_map=None):
    """Build a raw trial frame from an iterable of mappings."""
    df = pd.DataFrame(list(records))
    if column_map:
        df = df.rename(columns=column_map)
    if df.empty and len(df.columns) == 0:
        df = pd.DataFrame(columns=TRIAL_FIELDS)
    _check_fields(df)
    return df


def check_level(level):
    """Return level as int, raising ValueError for anything outside 1-3."""
    value = None
    if isinstance(level, str) and re.fullmatch(r'\s*[0-9]+\s*', level):
        value = int(level)
    elif isinstance(level, numbers.Integral) and not isinstance(level, bool):
        value = int(level)
    elif isinstance(level, numbers.Real) and not isinstance(level, bool) and float(level).is_integer():
        value = int(level)
    if value not in VALID_LEVELS:
        raise ValueError(f"Invalid level: {level!r}. Valid levels: {list(VALID_LEVELS)}")
    return value


def split_by_level(trials, levels=VALID_LEVELS):
    """
    Split normalized trials into one independent frame per level.

    Args:
        trials: Normalized trial frame (integer 'level' column)
        levels: Levels to return

    Returns:
        dict {level: DataFrame}; a level without rows maps to an empty frame
    """
    by_level = {}
    for level in levels:
        level = check_level(level)
        subset = trials[trials['level'] == level].copy()
        if subset.empty:
            logger.warning("Level %d has no trials", level)
        by_level[level] = subset
    return by_level


__all__ = ['TRIAL_FIELDS', 'VALID_LEVELS', 'load_trials', 'trials_from_records',
           'check_level', 'split_by_level']
