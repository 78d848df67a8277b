from __future__ import annotations
import logging
from typing import Dict, Optional, Protocol, Sequence

from . import config as CFG

log = logging.getLogger(__name__)


class _LanguageLookup(Protocol):
    def detect_language(self, word: str) -> Optional[str]: ...


class LanguageDetector:
    """
    Guess the language of the text around a token from the last few words.

    Only the newest CONTEXT_WINDOW tokens count. Each is resolved through the
    word store and tallied; the most frequent language wins. On a tie the
    language that entered the tally first (scanning oldest to newest) wins.
    """

    def __init__(self, store: _LanguageLookup, window: int = CFG.CONTEXT_WINDOW) -> None:
        self.store = store
        self.window = window

    def detect_context_language(self, recent_tokens: Sequence[str],
                                lookup: Optional[_LanguageLookup] = None) -> Optional[str]:
        if not recent_tokens or self.window <= 0:
            return None
        lookup = lookup or self.store

        tally: Dict[str, int] = {}
        for tok in list(recent_tokens)[-self.window:]:
            if not tok or not tok.strip():
                continue
            lang = lookup.detect_language(tok.lower())
            if lang is not None:
                tally[lang] = tally.get(lang, 0) + 1

        if not tally:
            return None
        # max() keeps the first maximal key; dicts iterate in insertion order
        best = max(tally, key=tally.__getitem__)
        log.debug("Context language %s from tally %s", best, tally)
        return best
