import pytest

from typing_arena.leaderboard.sanitize import MAX_KEY_LENGTH, sanitize_key


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("生き物", "生き物"),
        ("ＡＢＣ１２３", "ABC123"),
        ("ｶﾀｶﾅ", "カタカナ"),
        ("海 と  空", "海_と_空"),
        ("a/b\\c", "a_b_c"),
        ("what?*", "what__"),
        ("寿司🍣", "寿司_"),
        ("", "empty"),
        (None, "empty"),
    ],
)
def test_sanitize_examples(raw, expected):
    assert sanitize_key(raw) == expected


def test_truncates_long_names():
    assert len(sanitize_key("あ" * 300)) == MAX_KEY_LENGTH


@pytest.mark.parametrize("raw", ["ＡＢＣ　海", "a/b:c", "🍣🍣", "", "ｶﾀｶﾅ・ー", "x" * 500])
def test_idempotent(raw):
    once = sanitize_key(raw)
    assert sanitize_key(once) == once
