#!/usr/bin/env python3
"""
Export encounter-group files for learning-curve modeling.

Reads the practice-log trial table, indexes every (user, item) history per
level and writes:
  - encounters/level{L}_{first,middle,last}.csv  header-less (user, item, correct)
  - items/level{L}_{all,first,middle,last}_items.csv  per-item n / mean / SE
  - manifest.json  config hash, row accounting, subset sizes
  - export.log

Usage:
    python examples/export_encounters.py \
        --data_path data/practice_trials.csv \
        --output_dir examples/runs \
        --max_workers 3
"""

import os
import sys
import argparse

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from examples.exp_utils import make_run_dir, atomic_write_json, compute_config_hash, timestamped_logger
from factcurves.config import load_data_config
from factcurves.datasets.trial_loader import load_trials
from factcurves.export.encounter_files import write_all_encounter_files, write_descriptives
from factcurves.pipeline import run_pipeline


def main():
    parser = argparse.ArgumentParser(description='Export encounter-group files per level')
    parser.add_argument('--data_path', type=str, required=True,
                        help='Raw trial table (delimited text)')
    parser.add_argument('--output_dir', type=str, default='examples/runs',
                        help='Base directory for the timestamped run directory')
    parser.add_argument('--config', type=str, default=None,
                        help='Data config JSON (default: configs/data_config.json)')
    parser.add_argument('--sep', type=str, default=',',
                        help='Delimiter of the raw trial table')
    parser.add_argument('--max_workers', type=int, default=1,
                        help='Levels processed concurrently')
    parser.add_argument('--title', type=str, default='encounters',
                        help='Short title appended to the run directory name')
    args = parser.parse_args()

    config = load_data_config(args.config)
    run_dir = make_run_dir(args.title, args.output_dir)
    logger = timestamped_logger('factcurves', os.path.join(run_dir, 'export.log'))
    logger.info(f"Run directory: {run_dir}")

    raw = load_trials(args.data_path, column_map=config['column_map'], sep=args.sep)
    result = run_pipeline(raw, max_workers=args.max_workers, config=config, progress=True)

    report = result.report
    logger.info(f"Kept {report.n_kept}/{report.n_input} trials, dropped: {report.dropped}")

    encounter_paths = write_all_encounter_files(result.levels, os.path.join(run_dir, 'encounters'), config)
    item_paths = write_descriptives(result.levels, os.path.join(run_dir, 'items'))

    manifest = {
        'data_path': os.path.abspath(args.data_path),
        'config': config,
        'config_hash': compute_config_hash(config),
        'normalization': report.to_dict(),
        'levels': {str(lv): res.summary() for lv, res in result.levels.items()},
        'encounter_files': [os.path.relpath(p, run_dir) for p in encounter_paths],
        'item_files': [os.path.relpath(p, run_dir) for p in item_paths],
    }
    atomic_write_json(manifest, os.path.join(run_dir, 'manifest.json'))

    print(f"\n{'='*60}")
    print("ENCOUNTER EXPORT SUMMARY")
    print(f"{'='*60}")
    for lv, res in result.levels.items():
        sizes = res.summary()['subset_sizes']
        print(f"Level {lv}: {len(res.trials)} trials | "
              f"first={sizes['first']} middle={sizes['middle']} last={sizes['last']}")
    print(f"✓ Wrote {len(encounter_paths)} encounter files to {os.path.join(run_dir, 'encounters')}")


if __name__ == '__main__':
    main()
