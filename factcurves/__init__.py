"""
factcurves: encounter-indexed learning-curve data from multiplication practice logs.

Usage:
    from factcurves.pipeline import run_pipeline
    from factcurves.export import write_all_encounter_files

    result = run_pipeline(raw_trials)
    write_all_encounter_files(result.levels, 'out/')
"""

__version__ = '0.1.0'
