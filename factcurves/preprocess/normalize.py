"""
Trial Normalization

Turns raw practice-log rows into clean Trials:
1. correct coerced to 0/1
2. cue text parsed into its operands (first and last digit run)
3. given_response restricted to base-10 integers inside the valid range
4. presentation_time made sortable

Malformed rows are dropped and counted, never raised. A level outside 1-3 is
not a data problem and raises ValueError.
"""

import logging
import math
import numbers
import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from factcurves.datasets.trial_loader import check_level, trials_from_records, TRIAL_FIELDS

logger = logging.getLogger(__name__)

DIGIT_RUN = re.compile(r'[0-9]+')
INTEGER_TEXT = re.compile(r'[+-]?[0-9]+')
TRUE_TEXT = {'true', 't', 'yes', 'y'}
FALSE_TEXT = {'false', 'f', 'no', 'n'}

NORMALIZED_COLUMNS = [
    'user_id', 'session_id', 'level', 'item_key', 'presentation_time',
    'given_response', 'correct', 'operand_a', 'operand_b', 'record_order',
]


def _digit_runs(item_key):
    if item_key is None or (isinstance(item_key, float) and math.isnan(item_key)):
        return []
    return DIGIT_RUN.findall(str(item_key))


def parse_operands(item_key) -> Tuple[int, int]:
    """
    Extract the operands of a practice item from its cue text.

    operand_a is the first maximal digit run, operand_b the last one. A cue with
    a single number (level 1) returns that number twice.

    Example:
        parse_operands("3 x 4") -> (3, 4)
        parse_operands("12")    -> (12, 12)

    Raises:
        ValueError: If the cue contains no digits
    """
    runs = _digit_runs(item_key)
    if not runs:
        raise ValueError(f"No operand found in cue: {item_key!r}")
    return int(runs[0]), int(runs[-1])


def has_two_operands(item_key) -> bool:
    return len(_digit_runs(item_key)) >= 2


def coerce_correct(value) -> Optional[int]:
    """Map a raw correctness value to 0/1, or None when it cannot be read."""
    if isinstance(value, (bool, np.bool_)):
        return int(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in TRUE_TEXT:
            return 1
        if text in FALSE_TEXT:
            return 0
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    if number == 0.0 or number == 1.0:
        return int(number)
    return None


def coerce_response(value, low=0, high=100) -> Optional[int]:
    """Parse a given response as a base-10 integer inside [low, high]."""
    if isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, str):
        text = value.strip()
        if not INTEGER_TEXT.fullmatch(text):
            return None
        number = int(text)
    elif isinstance(value, numbers.Integral):
        number = int(value)
    elif isinstance(value, numbers.Real):
        if not math.isfinite(value) or not float(value).is_integer():
            return None
        number = int(value)
    else:
        return None
    if number < low or number > high:
        return None
    return number


def coerce_times(times: pd.Series) -> pd.Series:
    """
    Make presentation times sortable.

    Values are parsed one by one as numbers (session-relative offsets). If any
    of them is numeric the column stays numeric and the rest become NaN, so one
    bad cell never switches the whole column to datetime parsing. Only a column
    without a single numeric value is parsed as datetimes (unparseable -> NaT).
    """
    if pd.api.types.is_datetime64_any_dtype(times):
        return times
    present = times.notna() & (times.astype(str).str.strip() != '')
    numeric = pd.to_numeric(times.where(present), errors='coerce')
    if numeric[present].notna().any():
        return numeric
    return pd.to_datetime(times.where(present), errors='coerce', utc=True, format='mixed')


@dataclass
class NormalizationReport:
    """Row accounting for one normalization pass."""
    n_input: int = 0
    n_kept: int = 0
    dropped: Dict[str, int] = field(default_factory=dict)

    @property
    def n_dropped(self) -> int:
        return self.n_input - self.n_kept

    def to_dict(self):
        return {'n_input': self.n_input, 'n_kept': self.n_kept, 'dropped': dict(self.dropped)}


def normalize_trials_with_report(raw, response_range=(0, 100)):
    """
    Normalize raw trials and report why rows were dropped.

    Args:
        raw: DataFrame (or iterable of mappings) with the canonical Trial fields
        response_range: Inclusive (low, high) range of valid responses

    Returns:
        trials: New DataFrame with NORMALIZED_COLUMNS; the input is not modified
        report: NormalizationReport

    Raises:
        KeyError: If required fields are missing
        ValueError: If any row carries a level outside 1-3
    """
    if not isinstance(raw, pd.DataFrame):
        raw = trials_from_records(raw)
    missing = [c for c in TRIAL_FIELDS if c not in raw.columns]
    if missing:
        raise KeyError(f"Trial data is missing required columns: {missing}")

    low, high = response_range
    df = raw.reset_index(drop=True)
    record_order = pd.Series(np.arange(len(df)), index=df.index)

    levels = df['level'].map(check_level)
    correct = df['correct'].map(coerce_correct)
    response = df['given_response'].map(lambda v: coerce_response(v, low, high))
    times = coerce_times(df['presentation_time'])
    has_operand = df['item_key'].map(lambda k: bool(_digit_runs(k))).astype(bool)
    two_operands = df['item_key'].map(has_two_operands).astype(bool)

    checks = [
        ('correct', correct.isna()),
        ('response', response.isna()),
        ('presentation_time', times.isna()),
        ('cue', ~has_operand | ((levels >= 2) & ~two_operands)),
    ]

    # Each dropped row is charged to the first check it fails
    report = NormalizationReport(n_input=len(df))
    keep = pd.Series(True, index=df.index)
    for reason, bad in checks:
        hit = bad & keep
        count = int(hit.sum())
        if count:
            report.dropped[reason] = count
            logger.info("Dropped %d trials with invalid %s", count, reason)
        keep &= ~bad

    item_keys = df.loc[keep, 'item_key'].astype(str).str.strip()
    operands = [parse_operands(k) for k in item_keys]
    trials = pd.DataFrame({
        'user_id': df.loc[keep, 'user_id'],
        'session_id': df.loc[keep, 'session_id'],
        'level': levels[keep].astype(int),
        'item_key': item_keys,
        'presentation_time': times[keep],
        'given_response': response[keep].astype(int),
        'correct': correct[keep].astype(int),
        'operand_a': [a for a, _ in operands],
        'operand_b': [b for _, b in operands],
        'record_order': record_order[keep].astype(int),
    }, columns=NORMALIZED_COLUMNS).reset_index(drop=True)
    trials['operand_a'] = trials['operand_a'].astype(int)
    trials['operand_b'] = trials['operand_b'].astype(int)

    report.n_kept = len(trials)
    logger.info("Normalized %d/%d trials", report.n_kept, report.n_input)
    return trials, report


def normalize_trials(raw, response_range=(0, 100)):
    """Normalize raw trials, dropping malformed rows. See normalize_trials_with_report."""
    trials, _ = normalize_trials_with_report(raw, response_range)
    return trials


__all__ = [
    'NORMALIZED_COLUMNS', 'NormalizationReport', 'parse_operands', 'has_two_operands',
    'coerce_correct', 'coerce_response', 'coerce_times',
    'normalize_trials', 'normalize_trials_with_report',
]
