from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Optional

from . import config as CFG
from .models import AutocorrectSuggestion

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class AutocorrectInfo:
    original: str
    corrected: str
    was_auto_applied: bool


class TypingSession:
    """
    Per-input-field state between key events: the word being typed, recent
    words used as language context, and the last auto-applied correction
    (so a backspace right after it can offer undo).

    Does nothing unless enabled and the engine has dictionaries loaded.
    """

    def __init__(self, engine, max_context: int = CFG.MAX_CONTEXT_WORDS, enabled: bool = True) -> None:
        self.engine = engine
        self.max_context = max_context
        self.enabled = enabled
        self._current: List[str] = []
        self._context: List[str] = []
        self._last: Optional[AutocorrectInfo] = None

    def is_ready(self) -> bool:
        return self.enabled and self.engine.is_ready

    @property
    def current_word(self) -> str:
        return "".join(self._current)

    @property
    def context(self) -> List[str]:
        return list(self._context)

    def add_character(self, ch: str) -> None:
        if not self.is_ready():
            return
        if ch.isalpha() or ch == "'":
            self._current.append(ch)

    def handle_space(self) -> Optional[str]:
        """Finish the current word; return the replacement only if it is auto-applied."""
        if not self.is_ready() or not self._current:
            return None

        word = self.current_word
        self._current.clear()
        self._push_context(word)

        if self.engine.should_ignore(word):
            log.debug("Ignoring word: %s", word)
            return None

        suggestions = self.engine.suggest(word, max_results=1, context=self._context)
        if not suggestions:
            return None

        if not self.engine.should_auto_apply(suggestions):
            log.debug("Confidence too low for auto-apply: %s (%.2f)", word, suggestions[0].confidence)
            return None

        corrected = suggestions[0].suggestion
        self._last = AutocorrectInfo(original=word, corrected=corrected, was_auto_applied=True)
        if self._context and self._context[-1] == word.lower():
            self._context[-1] = corrected.lower()
        log.debug("Auto-applied %s -> %s", word, corrected)
        return corrected

    def handle_backspace(self) -> bool:
        """Delete from the current word, or report that the last correction can be undone."""
        if not self.is_ready():
            return False
        if self._current:
            self._current.pop()
            return False
        return self._last is not None and self._last.was_auto_applied

    def undo_word(self) -> Optional[str]:
        return self._last.original if self._last else None

    def clear_undo(self) -> None:
        self._last = None

    def handle_word_boundary(self) -> None:
        if self._current:
            self._push_context(self.current_word)
            self._current.clear()

    def suggestions(self, word: str, max_results: int = CFG.MAX_SUGGESTIONS) -> List[AutocorrectSuggestion]:
        if not self.is_ready() or self.engine.should_ignore(word):
            return []
        return self.engine.suggest(word, max_results=max_results, context=self._context)

    def reset(self) -> None:
        self._current.clear()
        self._context.clear()
        self._last = None

    def _push_context(self, word: str) -> None:
        if not word.strip():
            return
        self._context.append(word.lower())
        if len(self._context) > self.max_context:
            del self._context[0]
