"""Tests for input judgment (correct / wrong / pending spans)."""

from typing_arena.session.judgment import find_mismatch, judge, unjudged


def test_clean_prefix():
    j = judge("abcde", "ab")
    assert (j.correct, j.wrong, j.pending) == ("ab", "", "cde")
    assert j.mismatch_index is None


def test_mismatch_in_the_middle():
    j = judge("abcdef", "abX")
    assert (j.correct, j.wrong, j.pending) == ("ab", "c", "def")
    assert j.mismatch_index == 2


def test_mismatch_span_covers_rest_of_typed_value():
    j = judge("abcdef", "aXcd")
    assert (j.correct, j.wrong, j.pending) == ("a", "bcd", "ef")


def test_wrong_from_first_character():
    j = judge("abc", "xbc")
    assert (j.correct, j.wrong, j.pending) == ("", "abc", "")


def test_overtyped_value_diverges_at_target_length():
    assert find_mismatch("abc", "abcd") == 3
    j = judge("abc", "abcd")
    assert (j.correct, j.wrong, j.pending) == ("abc", "", "")


def test_exact_match_has_no_mismatch():
    j = judge("abc", "abc")
    assert j.mismatch_index is None
    assert j.correct == "abc"
    assert j.pending == ""


def test_empty_value_is_unjudged():
    assert judge("abc", "") == unjudged("abc")
    assert not unjudged("abc").judged
