from .trial_loader import TRIAL_FIELDS, VALID_LEVELS, load_trials, trials_from_records, check_level, split_by_level

__all__ = ['TRIAL_FIELDS', 'VALID_LEVELS', 'load_trials', 'trials_from_records', 'check_level', 'split_by_level']
