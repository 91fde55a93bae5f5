"""
Item-Level Descriptive Statistics

Per practice item: number of contributing trials, mean accuracy and the
standard error of that mean. Works on any slice of the normalized trials
(the full level or one encounter group); the caller decides which rows count.

Items with a single trial have no sample standard deviation, so their
standard_error is NaN (pandas `sem`, ddof=1).
"""

import logging

import pandas as pd

from factcurves.preprocess.normalize import parse_operands

logger = logging.getLogger(__name__)

DESCRIPTIVE_COLUMNS = ['level', 'item_key', 'operand_a', 'operand_b', 'n', 'mean_accuracy', 'standard_error']
ITEM_KEYS = ['level', 'item_key']


def item_descriptives(trials):
    """
    Group trials by (level, item_key) and summarise correctness.

    Args:
        trials: Frame with 'level', 'item_key' and 'correct' (0/1) columns

    Returns:
        DataFrame with DESCRIPTIVE_COLUMNS, sorted by level and operands
    """
    missing = [c for c in ITEM_KEYS + ['correct'] if c not in trials.columns]
    if missing:
        raise KeyError(f"Cannot aggregate items, missing columns: {missing}")

    if trials.empty:
        return pd.DataFrame(columns=DESCRIPTIVE_COLUMNS)

    stats = (
        trials.groupby(ITEM_KEYS, sort=False)['correct']
        .agg(n='size', mean_accuracy='mean', standard_error='sem')
        .reset_index()
    )
    operands = [parse_operands(k) for k in stats['item_key']]
    stats['operand_a'] = [a for a, _ in operands]
    stats['operand_b'] = [b for _, b in operands]
    stats['n'] = stats['n'].astype(int)

    stats = stats.sort_values(['level', 'operand_a', 'operand_b', 'item_key'], kind='mergesort')
    logger.debug("Summarised %d trials into %d items", len(trials), len(stats))
    return stats[DESCRIPTIVE_COLUMNS].reset_index(drop=True)


def accuracy_matrix(descriptives, level=None):
    """
    Pivot item descriptives into an operand_a x operand_b grid of mean accuracy.

    Args:
        descriptives: Output of item_descriptives
        level: Level to keep; required when the table holds several levels

    Returns:
        DataFrame indexed by operand_a with one column per operand_b (NaN where
        an operand pair was never practised)
    """
    table = descriptives
    if level is not None:
        table = table[table['level'] == level]
    if table['level'].nunique() > 1:
        raise ValueError(f"Accuracy matrix needs a single level, got {sorted(table['level'].unique())}")
    if table.empty:
        return pd.DataFrame(dtype=float)
    return table.pivot_table(index='operand_a', columns='operand_b', values='mean_accuracy', aggfunc='mean')


__all__ = ['DESCRIPTIVE_COLUMNS', 'item_descriptives', 'accuracy_matrix']
