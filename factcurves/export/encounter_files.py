"""
Encounter-group export files for learning-curve modeling tools.

One header-less delimited file per (level, encounter group) with rows
(user_id, item_key, correct): correct written as a real number in [0, 1],
items keyed by their normalized cue text, the same key used for grouping.
"""

import logging
import os

import pandas as pd

from factcurves.config import DEFAULT_DATA_CONFIG
from factcurves.preprocess.encounter_groups import EncounterGroup

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['user_id', 'item_key', 'correct']


def encounter_export_rows(subset):
    """(user_id, item_key, correct) rows of an encounter subset, in input order."""
    if subset.empty:
        return pd.DataFrame(columns=EXPORT_COLUMNS)
    return pd.DataFrame({
        'user_id': subset['user_id'].astype(str).to_numpy(),
        'item_key': subset['item_key'].astype(str).to_numpy(),
        'correct': subset['correct'].astype(float).to_numpy(),
    }, columns=EXPORT_COLUMNS)


def write_encounter_file(subset, path, sep=','):
    rows = encounter_export_rows(subset)
    rows.to_csv(path, sep=sep, header=False, index=False, float_format='%.1f')
    return path


def write_all_encounter_files(results, output_dir, config=None):
    """
    Write the encounter file of every level and group.

    Args:
        results: {level: LevelResult}
        output_dir: Destination directory (created if needed)
        config: Data config providing 'export_sep' and 'export_filename'

    Returns:
        list of written paths, ordered by level then group
    """
    config = config or DEFAULT_DATA_CONFIG
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    for level in sorted(results):
        result = results[level]
        for group in EncounterGroup:
            name = config['export_filename'].format(level=level, group=group.value)
            path = os.path.join(output_dir, name)
            write_encounter_file(result.subsets[group], path, sep=config['export_sep'])
            logger.info("Wrote %d rows to %s", len(result.subsets[group]), path)
            paths.append(path)
    return paths


def write_descriptives(results, output_dir):
    """Write every item descriptive table as level{L}_{subset}_items.csv (with header)."""
    os.makedirs(output_dir, exist_ok=True)
    paths = []
    for level in sorted(results):
        for name, table in results[level].descriptives.items():
            path = os.path.join(output_dir, f"level{level}_{name}_items.csv")
            table.to_csv(path, index=False)
            paths.append(path)
    return paths


__all__ = ['EXPORT_COLUMNS', 'encounter_export_rows', 'write_encounter_file',
           'write_all_encounter_files', 'write_descriptives']
