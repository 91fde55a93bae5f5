import pandas as pd

from factcurves.preprocess.encounter_counts import index_encounters
from factcurves.preprocess.encounter_groups import (
    EncounterGroup, encounter_subsets, middle_encounter, select_encounters,
)
from factcurves.preprocess.normalize import normalize_trials


def _indexed_histories(sizes):
    """One user, one item per history; history i has sizes[i] trials."""
    rows = []
    t = 0
    for i, n in enumerate(sizes):
        for _ in range(n):
            rows.append(('U1', 'S1', 2, f"{i + 1}x2", t, '2', 1))
            t += 1
    raw = pd.DataFrame(rows, columns=['user_id', 'session_id', 'level', 'item_key',
                                      'presentation_time', 'given_response', 'correct'])
    return index_encounters(normalize_trials(raw))


def _selected(indexed, group):
    subset = select_encounters(indexed, group)
    return dict(zip(subset['group_size'], subset['encounter_num']))


def test_middle_encounter_rule():
    expected = {1: 1, 2: 2, 3: 2, 4: 2, 5: 3, 6: 3, 7: 4}
    for n, m in expected.items():
        assert middle_encounter(n) == m, f"n={n}: expected {m}, got {middle_encounter(n)}"


def test_middle_encounter_rejects_empty_history():
    try:
        middle_encounter(0)
    except ValueError:
        return
    assert False, "History of length 0 has no middle encounter"


def test_middle_encounter_matches_selected_rows():
    sizes = list(range(1, 13))
    selected = _selected(_indexed_histories(sizes), EncounterGroup.MIDDLE)
    assert selected == {n: middle_encounter(n) for n in sizes}


def test_groups_per_history_length():
    indexed = _indexed_histories([1, 2, 3, 4, 5])
    assert _selected(indexed, EncounterGroup.FIRST) == {1: 1, 2: 1, 3: 1, 4: 1, 5: 1}
    assert _selected(indexed, EncounterGroup.MIDDLE) == {1: 1, 2: 2, 3: 2, 4: 2, 5: 3}
    assert _selected(indexed, EncounterGroup.LAST) == {1: 1, 2: 2, 3: 3, 4: 4, 5: 5}


def test_one_row_per_history_and_group():
    indexed = _indexed_histories([1, 2, 3, 4, 5, 6])
    for group in EncounterGroup:
        subset = select_encounters(indexed, group)
        assert len(subset) == 6
        assert subset.groupby('item_key').size().eq(1).all()


def test_singleton_history_in_all_three_groups():
    indexed = _indexed_histories([1])
    subsets = encounter_subsets(indexed)
    rows = [subsets[g]['record_order'].tolist() for g in EncounterGroup]
    assert rows == [[0], [0], [0]]


def test_labels_resolve_case_insensitively():
    indexed = _indexed_histories([3])
    by_label = select_encounters(indexed, 'Middle')
    by_enum = select_encounters(indexed, EncounterGroup.MIDDLE)
    pd.testing.assert_frame_equal(by_label, by_enum)
    assert EncounterGroup.from_label(' LAST ') is EncounterGroup.LAST


def test_unknown_label_raises():
    indexed = _indexed_histories([3])
    try:
        select_encounters(indexed, 'median')
    except ValueError as e:
        assert 'median' in str(e)
        return
    assert False, "Unknown group label should raise ValueError"


def test_unindexed_frame_raises():
    indexed = _indexed_histories([2]).drop(columns=['group_size'])
    try:
        select_encounters(indexed, 'first')
    except KeyError:
        return
    assert False, "Frame without group_size should raise KeyError"


def test_empty_frame_gives_empty_subsets():
    indexed = _indexed_histories([])
    for subset in encounter_subsets(indexed).values():
        assert subset.empty


def test_selection_keeps_input_untouched():
    indexed = _indexed_histories([2, 3])
    before = indexed.copy()
    encounter_subsets(indexed)
    pd.testing.assert_frame_equal(indexed, before)
