"""
Tests for operator selection parsing.
"""

import pytest

from reelcut.selection import (
    is_affirmative,
    is_skip,
    parse_order_selection,
    parse_set_selection,
)


@pytest.mark.parametrize("max_id", [1, 2, 7, 30])
def test_set_selection_all(max_id):
    """``all`` selects every id in ascending order."""
    assert parse_set_selection("all", max_id) == list(range(1, max_id + 1))
    assert parse_set_selection(" ALL ", max_id) == list(range(1, max_id + 1))


def test_set_selection_dedups_and_sorts():
    assert parse_set_selection("3,1,3,5-7", 10) == [1, 3, 5, 6, 7]


def test_set_selection_drops_out_of_range_numbers():
    """An out-of-range number is dropped, not clamped to the maximum."""
    assert parse_set_selection("50", 5) == []
    assert parse_set_selection("0,2,6", 5) == [2]


def test_set_selection_clamps_ranges():
    assert parse_set_selection("3-50", 5) == [3, 4, 5]
    assert parse_set_selection("0-2", 5) == [1, 2]
    assert parse_set_selection("4-2", 5) == []
    assert parse_set_selection("7-9", 5) == []


@pytest.mark.parametrize("answer", ["", "   ", "abc", "1-x", ",,,", "-3", None])
def test_set_selection_invalid_answers_are_empty(answer):
    assert parse_set_selection(answer, 10) == []


def test_set_selection_mixed_tokens():
    assert parse_set_selection(" 1 - 3 , 7, foo, 10-12 ", 11) == [1, 2, 3, 7, 10, 11]


def test_order_selection_preserves_order_and_duplicates():
    assert parse_order_selection("2,1,2", 3) == [2, 1, 2]


def test_order_selection_drops_invalid_tokens():
    assert parse_order_selection("9,1", 3) == [1]
    assert parse_order_selection("1-3,2,x,0", 3) == [2]


def test_order_selection_all():
    assert parse_order_selection("all", 4) == [1, 2, 3, 4]


@pytest.mark.parametrize("answer", ["", " ", "skip", "7,8"])
def test_order_selection_empty_results(answer):
    assert parse_order_selection(answer, 3) == []


def test_skip_sentinel():
    assert is_skip("skip")
    assert is_skip(" SKIP ")
    assert not is_skip("skipped")
    assert not is_skip("")
    assert not is_skip(None)


def test_affirmative_tokens():
    """Only literal yes-tokens count as consent."""
    for answer in ("t", "TAK", "y", "yes"):
        assert is_affirmative(answer)
    for answer in ("", "n", "no", "yes please", "1", None):
        assert not is_affirmative(answer)
    assert is_affirmative("ja", tokens={"ja"})


def test_set_selection_ignores_text_after_second_hyphen():
    assert parse_set_selection("1-3-5", 10) == [1, 2, 3]
    assert parse_set_selection("2-4-x,7", 10) == [2, 3, 4, 7]
