from __future__ import annotations
import re
from typing import Optional

_WORD_PUNCT = "'-"

# "en", "id", "pt-br", "zh_hant"; also used as a file name by the stores
_LANG_CODE = re.compile(r"[a-z]{2,8}(?:[_-][a-z0-9]{1,8})*")


def is_valid_language_code(code: str) -> bool:
    return bool(code) and _LANG_CODE.fullmatch(code) is not None


def _is_word_char(ch: str) -> bool:
    """Letters plus the apostrophe and hyphen allowed inside a word."""
    return ch.isalpha() or ch in _WORD_PUNCT


def normalize_word(word: str) -> str:
    """Trim and lowercase; the form used for storage and comparison."""
    return word.strip().lower()


def validate_word(word: str) -> Optional[str]:
    """
    Return the normalized word if it is a valid dictionary entry, else None.
    Rules:
      * at least 2 characters after trimming
      * only letters, apostrophes and hyphens
      * at least one letter (no "--" or "''")
    """
    w = normalize_word(word)
    if len(w) < 2:
        return None
    if not all(_is_word_char(ch) for ch in w):
        return None
    if not any(ch.isalpha() for ch in w):
        return None
    return w


def is_valid_word(word: str) -> bool:
    return validate_word(word) is not None


def apply_case(original: str, replacement: str) -> str:
    """
    Carry the case pattern of `original` over to `replacement`:
      "TEH" -> "THE", "Teh" -> "The", "tEh" -> "tHe".
    Positions past the end of `original` come out lowercase.
    """
    if not original or not replacement:
        return replacement

    if original.isupper():
        return replacement.upper()

    rest = original[1:]
    if original[0].isupper() and (not rest or rest == rest.lower()):
        return replacement[0].upper() + replacement[1:]

    out = []
    for i, ch in enumerate(replacement):
        if i < len(original) and original[i].isupper():
            out.append(ch.upper())
        else:
            out.append(ch.lower())
    return "".join(out)


def should_ignore(word: str) -> bool:
    """Skip acronyms, numbers, emails, URLs and paths."""
    if len(word) <= 1:
        return True
    if word.isupper():
        return True
    if any(ch.isdigit() for ch in word):
        return True
    if "@" in word or "." in word or "/" in word:
        return True
    return False


def prefix_key(word: str, k: int) -> Optional[str]:
    """The index bucket for `word`, or None if it is shorter than k."""
    if k <= 0 or len(word) < k:
        return None
    return word[:k]


def levenshtein(a: str, b: str) -> int:
    """Classic DP edit distance; insert, delete and substitute each cost 1."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            cur[j] = min(prev[j] + 1,          # deletion
                         cur[j - 1] + 1,       # insertion
                         prev[j - 1] + cost)   # substitution
        prev = cur
    return prev[-1]
