#!/usr/bin/env python3
"""
Plot per-item accuracy for every level.

For each level writes:
  - level{L}_encounter_groups.png   first/middle/last accuracy per item (±1 SE)
  - level{L}_heatmap.png            operand grid of mean accuracy (levels 2-3)

Usage:
    python examples/plot_item_accuracy.py --data_path data/practice_trials.csv --output_dir plots
"""

import os
import sys
import argparse

import matplotlib.pyplot as plt
from tqdm import tqdm

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from factcurves.config import load_data_config
from factcurves.datasets.trial_loader import load_trials
from factcurves.pipeline import run_pipeline
from factcurves.visualization.item_plots import plot_accuracy_heatmap, plot_level_groups


def main():
    parser = argparse.ArgumentParser(description='Plot per-item accuracy by level and encounter group')
    parser.add_argument('--data_path', type=str, required=True)
    parser.add_argument('--output_dir', type=str, default='plots')
    parser.add_argument('--config', type=str, default=None)
    parser.add_argument('--sep', type=str, default=',')
    args = parser.parse_args()

    os.makedirs(args.output_dir, exist_ok=True)
    config = load_data_config(args.config)
    raw = load_trials(args.data_path, column_map=config['column_map'], sep=args.sep)
    result = run_pipeline(raw, config=config)

    for lv, res in tqdm(result.levels.items(), desc='Plotting levels'):
        if res.trials.empty:
            print(f"Warning: level {lv} has no trials, skipping")
            continue
        plot_level_groups(res, os.path.join(args.output_dir, f'level{lv}_encounter_groups.png'))

        if lv >= 2:
            fig, ax = plt.subplots(figsize=(8, 7))
            plot_accuracy_heatmap(res.descriptives['all'], ax=ax, title=f'Level {lv}: mean accuracy')
            path = os.path.join(args.output_dir, f'level{lv}_heatmap.png')
            fig.savefig(path, dpi=300, bbox_inches='tight')
            plt.close(fig)
            print(f"Saved heatmap to {path}")


if __name__ == '__main__':
    main()
