"""Free-text names to partition-safe keys.

Steps: NFKC normalization, whitespace runs to "_", path-hostile and
wildcard characters to "_", anything outside the allow-list to "_",
truncation to 120 characters. An empty result becomes "empty".

The function is idempotent: sanitize_key(sanitize_key(x)) == sanitize_key(x).
Keys are collision-resistant in practice, not unique.
"""

import re
import unicodedata

MAX_KEY_LENGTH = 120
EMPTY_KEY = "empty"

_WHITESPACE_RE = re.compile(r"\s+")
_PATH_HOSTILE_RE = re.compile(r'[/\\?%*:|"<>]')
# ASCII alphanumerics, hiragana, katakana (with prolonged sound mark),
# CJK ideographs and a small punctuation set
_DISALLOWED_RE = re.compile(r"[^0-9A-Za-zぁ-んァ-ヶー一-鿿々_()・、。\-]")


def sanitize_key(value: object) -> str:
    text = unicodedata.normalize("NFKC", "" if value is None else str(value))
    text = _WHITESPACE_RE.sub("_", text)
    text = _PATH_HOSTILE_RE.sub("_", text)
    text = _DISALLOWED_RE.sub("_", text)
    return text[:MAX_KEY_LENGTH] or EMPTY_KEY
