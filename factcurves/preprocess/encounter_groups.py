"""
Encounter Group Selection

Selects the first, middle or last encounter of every (user, item) history
from an indexed frame (see encounter_counts.index_encounters).

For a history of n encounters:
- first:  encounter 1
- last:   encounter n
- middle: encounter ceil(n / 2), except that histories of length 2 use
          encounter 2 so that middle never falls back onto first when there is
          a later encounter to pick. A history of length 1 is its own first,
          middle and last encounter.

    n       1  2  3  4  5  6  7
    middle  1  2  2  2  3  3  4
"""

import logging
from enum import Enum

import numpy as np

logger = logging.getLogger(__name__)


class EncounterGroup(Enum):
    FIRST = 'first'
    MIDDLE = 'middle'
    LAST = 'last'

    @classmethod
    def from_label(cls, label):
        """
        Resolve a group from its label ('first', 'middle', 'last'; any case).

        Raises:
            ValueError: If the label is not a known group
        """
        if isinstance(label, cls):
            return label
        try:
            return cls(str(label).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown encounter group: '{label}'. "
                f"Available groups: {[g.value for g in cls]}"
            ) from None


def middle_encounter(n: int) -> int:
    """Encounter number selected as 'middle' for a history of length n (n >= 1)."""
    if n < 1:
        raise ValueError(f"History length must be positive, got {n}")
    return int(_target_encounters([n], EncounterGroup.MIDDLE)[0])


def _target_encounters(group_size, group):
    n = np.asarray(group_size, dtype=np.int64)
    if group is EncounterGroup.FIRST:
        return np.ones_like(n)
    if group is EncounterGroup.LAST:
        return n
    m = -(-n // 2)
    return np.where((m == 1) & (n > 1), 2, m)


def select_encounters(indexed, group):
    """
    Rows of an indexed frame belonging to one encounter group.

    Args:
        indexed: Frame with 'encounter_num' and 'group_size' columns
        group: EncounterGroup or its label

    Returns:
        subset: Copy of the matching rows, in input order

    Raises:
        ValueError: Unknown group label
        KeyError: Frame was not indexed
    """
    group = EncounterGroup.from_label(group)
    missing = [c for c in ('encounter_num', 'group_size') if c not in indexed.columns]
    if missing:
        raise KeyError(f"Frame is not encounter-indexed, missing columns: {missing}")

    if indexed.empty:
        return indexed.copy()

    target = _target_encounters(indexed['group_size'].to_numpy(), group)
    subset = indexed[indexed['encounter_num'].to_numpy() == target].copy()
    logger.debug("Selected %d %s encounters out of %d trials", len(subset), group.value, len(indexed))
    return subset


def encounter_subsets(indexed):
    """All three encounter groups of an indexed frame: {EncounterGroup: subset}."""
    return {group: select_encounters(indexed, group) for group in EncounterGroup}


__all__ = ['EncounterGroup', 'middle_encounter', 'select_encounters', 'encounter_subsets']
