"""
Item accuracy plots.

Mean accuracy per item with standard-error bars, operand heatmaps for the
two-operand levels, and a per-level comparison of the first, middle and last
encounter curves.
"""

import logging

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from factcurves.preprocess.encounter_groups import EncounterGroup
from factcurves.preprocess.item_descriptives import accuracy_matrix

logger = logging.getLogger(__name__)

GROUP_COLORS = {
    EncounterGroup.FIRST: '#e74c3c',
    EncounterGroup.MIDDLE: '#f39c12',
    EncounterGroup.LAST: '#27ae60',
}


def _item_labels(descriptives):
    return [str(k) for k in descriptives['item_key']]


def plot_item_accuracy(descriptives, ax=None, title=None, label=None, color='#3498db', order=None, offset=0.0):
    """
    Plot mean accuracy per item with +/-1 SE bars, items in operand order.

    Items whose standard error is NaN (single trial) are drawn without a bar.
    Passing order (a list of item keys) puts items at fixed x positions, so
    several tables can share one axis.

    Returns:
        ax: The matplotlib Axes drawn on
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(14, 5))
    table = descriptives.sort_values(['operand_a', 'operand_b', 'item_key'], kind='mergesort')
    if order is None:
        order = _item_labels(table)
    position = {key: i for i, key in enumerate(order)}
    table = table[table['item_key'].astype(str).isin(position)]
    x = np.array([position[str(k)] for k in table['item_key']], dtype=float) + offset
    y = table['mean_accuracy'].astype(float).to_numpy()
    se = table['standard_error'].astype(float).to_numpy()

    ax.errorbar(x, y, yerr=np.nan_to_num(se, nan=0.0), fmt='o', markersize=4,
                capsize=2, color=color, label=label, alpha=0.85)
    ax.set_xticks(np.arange(len(order)))
    ax.set_xticklabels(order, rotation=90, fontsize=7)
    ax.set_ylim(-0.05, 1.05)
    ax.set_ylabel('Mean accuracy')
    ax.grid(True, alpha=0.3)
    if title:
        ax.set_title(title)
    return ax


def plot_accuracy_heatmap(descriptives, ax=None, title=None, level=None):
    """Heatmap of mean accuracy over the operand_a x operand_b grid."""
    if ax is None:
        _, ax = plt.subplots(figsize=(8, 7))
    grid = accuracy_matrix(descriptives, level=level)
    if grid.empty:
        logger.warning("No items to draw for heatmap %s", title or '')
        return ax
    sns.heatmap(grid, vmin=0.0, vmax=1.0, cmap='RdYlGn', annot=grid.shape[0] <= 12,
                fmt='.2f', ax=ax, cbar_kws={'label': 'Mean accuracy'})
    ax.set_xlabel('Operand b')
    ax.set_ylabel('Operand a')
    if title:
        ax.set_title(title)
    return ax


def plot_level_groups(result, output_path):
    """
    Compare first/middle/last encounter accuracy per item for one level.

    Args:
        result: LevelResult
        output_path: PNG path

    Returns:
        output_path
    """
    fig, ax = plt.subplots(figsize=(14, 6))
    order = _item_labels(result.descriptives['all'])
    offsets = {EncounterGroup.FIRST: -0.2, EncounterGroup.MIDDLE: 0.0, EncounterGroup.LAST: 0.2}
    for group in EncounterGroup:
        table = result.descriptives[group.value]
        if table.empty:
            continue
        plot_item_accuracy(table, ax=ax, label=group.value.capitalize(), color=GROUP_COLORS[group],
                           order=order, offset=offsets[group])
    ax.set_title(f"Level {result.level}: accuracy by encounter group")
    if ax.get_legend_handles_labels()[0]:
        ax.legend()
    fig.tight_layout()
    fig.savefig(output_path, dpi=300, bbox_inches='tight')
    plt.close(fig)
    logger.info("Saved encounter group plot to %s", output_path)
    return output_path


__all__ = ['plot_item_accuracy', 'plot_accuracy_heatmap', 'plot_level_groups']
