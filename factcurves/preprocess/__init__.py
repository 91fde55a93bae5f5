"""
Preprocessing stages for practice logs.

normalize -> encounter_counts -> encounter_groups -> item_descriptives
"""

from .normalize import (
    NORMALIZED_COLUMNS, NormalizationReport, parse_operands, has_two_operands,
    normalize_trials, normalize_trials_with_report,
)
from .encounter_counts import ENCOUNTER_KEYS, index_encounters
from .encounter_groups import EncounterGroup, middle_encounter, select_encounters, encounter_subsets
from .item_descriptives import DESCRIPTIVE_COLUMNS, item_descriptives, accuracy_matrix

__all__ = [
    'NORMALIZED_COLUMNS', 'NormalizationReport', 'parse_operands', 'has_two_operands',
    'normalize_trials', 'normalize_trials_with_report',
    'ENCOUNTER_KEYS', 'index_encounters',
    'EncounterGroup', 'middle_encounter', 'select_encounters', 'encounter_subsets',
    'DESCRIPTIVE_COLUMNS', 'item_descriptives', 'accuracy_matrix',
]
