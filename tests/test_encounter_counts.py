import numpy as np
import pandas as pd

from factcurves.preprocess.encounter_counts import index_encounters
from factcurves.preprocess.normalize import normalize_trials


def _trials(rows):
    """rows: (user, level, item, time, correct)"""
    raw = pd.DataFrame(
        [(u, 'S1', lv, item, t, '1', c) for u, lv, item, t, c in rows],
        columns=['user_id', 'session_id', 'level', 'item_key', 'presentation_time', 'given_response', 'correct'],
    )
    return normalize_trials(raw)


def _random_trials(n_rows=300, seed=7):
    rng = np.random.RandomState(seed)
    rows = []
    for i in range(n_rows):
        rows.append((
            f"U{rng.randint(5)}",
            2,
            f"{rng.randint(1, 4)}x{rng.randint(1, 4)}",
            float(i),
            int(rng.randint(2)),
        ))
    return _trials(rows)


def test_chronological_numbering():
    trials = _trials([
        ('U1', 2, '3x4', 30, 1),
        ('U1', 2, '3x4', 10, 0),
        ('U1', 2, '5x6', 15, 1),
        ('U1', 2, '3x4', 20, 1),
    ])
    indexed = index_encounters(trials)
    assert list(indexed['encounter_num']) == [3, 1, 1, 2]
    assert list(indexed['group_size']) == [3, 3, 1, 3]


def test_encounter_numbers_are_one_to_n():
    indexed = index_encounters(_random_trials())
    for _, history in indexed.groupby(['level', 'user_id', 'item_key']):
        n = len(history)
        assert sorted(history['encounter_num']) == list(range(1, n + 1))
        assert set(history['group_size']) == {n}


def test_timestamp_ties_fall_back_to_input_order():
    trials = _trials([
        ('U1', 2, '3x4', 5, 0),
        ('U1', 2, '3x4', 5, 1),
        ('U1', 2, '3x4', 1, 1),
    ])
    indexed = index_encounters(trials)
    assert list(indexed['encounter_num']) == [2, 3, 1]


def test_levels_are_separate_histories():
    trials = _trials([
        ('U1', 2, '3x4', 1, 1),
        ('U1', 3, '3x4', 2, 1),
        ('U1', 1, '3x4', 3, 0),
    ])
    indexed = index_encounters(trials)
    assert list(indexed['encounter_num']) == [1, 1, 1]
    assert list(indexed['group_size']) == [1, 1, 1]


def test_shuffled_input_gives_same_numbers():
    trials = _random_trials(seed=11)
    first = index_encounters(trials)
    shuffled = index_encounters(trials.sample(frac=1.0, random_state=3))

    key = ['record_order']
    a = first.sort_values(key).reset_index(drop=True)
    b = shuffled.sort_values(key).reset_index(drop=True)
    pd.testing.assert_frame_equal(a, b)


def test_indexing_is_idempotent_and_leaves_input_untouched():
    trials = _random_trials(n_rows=50)
    before = trials.copy()
    once = index_encounters(trials)
    twice = index_encounters(once)
    pd.testing.assert_frame_equal(trials, before)
    pd.testing.assert_frame_equal(once, twice)


def test_empty_input():
    indexed = index_encounters(_trials([]))
    assert indexed.empty
    assert 'encounter_num' in indexed.columns and 'group_size' in indexed.columns
