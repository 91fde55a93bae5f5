"""
Per-Item Encounter Index

Numbers the trials of every (user, item) history in chronological order:
the first time a user meets an item is encounter 1, the next one encounter 2,
and so on. The indexed frame also carries the length of each history
(group_size), so encounter groups can be selected row by row without
grouping again.

Histories are level-scoped: the same cue at two levels is two populations.
"""

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

ENCOUNTER_KEYS = ['level', 'user_id', 'item_key']


def index_encounters(trials):
    """
    Assign encounter_num and group_size to every trial.

    Within a (level, user_id, item_key) history, trials are ordered by
    presentation_time and then by record_order (position in the raw input), so
    the order is total and re-running on a shuffled copy gives the same numbers.

    Args:
        trials: Normalized trials (see preprocess.normalize)

    Returns:
        indexed: Copy of trials, in input row order, with 'encounter_num'
            (1..n within each history) and 'group_size' (n)

    Example:
        user  item  time   encounter_num  group_size
        U1    3x4   10     1              3
        U1    5x6   15     1              1
        U1    3x4   20     2              3
        U1    3x4   30     3              3
    """
    required = ENCOUNTER_KEYS + ['presentation_time']
    missing = [c for c in required if c not in trials.columns]
    if missing:
        raise KeyError(f"Cannot index encounters, missing columns: {missing}")

    indexed = trials.reset_index(drop=True)
    if 'record_order' not in indexed.columns:
        indexed['record_order'] = np.arange(len(indexed))

    if indexed.empty:
        indexed['encounter_num'] = pd.Series(dtype='int64')
        indexed['group_size'] = pd.Series(dtype='int64')
        return indexed

    ordered = indexed.sort_values(ENCOUNTER_KEYS + ['presentation_time', 'record_order'], kind='mergesort')
    histories = ordered.groupby(ENCOUNTER_KEYS, sort=False, dropna=False)
    ordered['encounter_num'] = (histories.cumcount() + 1).astype('int64')
    ordered['group_size'] = histories['record_order'].transform('size').astype('int64')

    logger.debug("Indexed %d trials into %d (user, item) histories", len(ordered), histories.ngroups)
    return ordered.sort_index()


__all__ = ['ENCOUNTER_KEYS', 'index_encounters']
