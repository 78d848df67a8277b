from __future__ import annotations
import logging
import sqlite3
import threading
from typing import Dict, Iterable, List, Optional

from .DB.api import CustomWordStore
from .models import AddWordResult, AddWordStatus
from .normalize import is_valid_language_code, normalize_word, validate_word
from .wordstore import WordStore

log = logging.getLogger(__name__)

# failures of the durable backing store; surfaced as result values
STORAGE_ERRORS = (OSError, sqlite3.Error)


class PersonalDictionaryManager:
    """
    Add, remove, list and clear user words per language.

    Every mutation runs under one lock, writes the backing store first and
    only then touches the in-memory WordStore, so a failed write leaves
    memory unchanged. The prefix index is rebuilt right after each change.
    """

    def __init__(self, store: WordStore, backend: CustomWordStore) -> None:
        self.store = store
        self.backend = backend
        self._mutex = threading.RLock()

    def mutation(self) -> threading.RLock:
        """`with manager.mutation():` serializes a multi-step change (e.g. an import)."""
        return self._mutex

    # ------------- lifecycle -------------

    def restore(self) -> bool:
        """Load persisted custom words into the word store."""
        with self._mutex:
            try:
                persisted = self.backend.load_all()
            except STORAGE_ERRORS:
                log.exception("Failed to read custom words from backing store")
                return False

            self.store.clear_custom()
            total = 0
            for lang, words in persisted.items():
                valid = [w for w in (validate_word(x) for x in words) if w]
                if len(valid) != len(words):
                    log.warning("Dropped %d invalid persisted words for %s", len(words) - len(valid), lang)
                self.store.replace_custom(lang, valid)
                total += len(valid)
            self.store.rebuild_prefix_index()
        log.info("Restored %d custom words across %d languages", total, len(persisted))
        return True

    # ------------- mutations -------------

    def add_word(self, word: str, language: str) -> AddWordResult:
        lang = normalize_word(language or "")
        w = validate_word(word or "")
        if w is None or not is_valid_language_code(lang):
            log.debug("Rejected custom word %r (%r)", word, language)
            return AddWordResult(AddWordStatus.INVALID_FORMAT, word, lang,
                                 "Words need 2+ characters: letters, apostrophes or hyphens")

        with self._mutex:
            if self.store.contains_in_language(w, lang):
                return AddWordResult(AddWordStatus.ALREADY_EXISTS, w, lang,
                                     f"'{w}' is already in the {lang} dictionary")

            err = self._persist({lang: self.store.custom_words(lang) + [w]})
            if err is not None:
                return AddWordResult(AddWordStatus.ERROR, w, lang, err)

            self.store.add_custom(lang, w)
            self.store.rebuild_prefix_index()

        log.info("Added '%s' to %s custom dictionary", w, lang)
        return AddWordResult(AddWordStatus.ADDED, w, lang)

    def remove_word(self, word: str, language: str) -> bool:
        """Built-in words are never removable; returns whether a custom word went away."""
        lang = normalize_word(language or "")
        w = normalize_word(word or "")
        if not is_valid_language_code(lang):
            log.warning("Rejected remove for invalid language code %r", language)
            return False
        with self._mutex:
            if not self.store.is_custom(w, lang):
                return False
            remaining = [x for x in self.store.custom_words(lang) if x != w]
            if self._persist({lang: remaining}) is not None:
                return False
            self.store.remove_custom(lang, w)
            self.store.rebuild_prefix_index()
        log.info("Removed '%s' from %s custom dictionary", w, lang)
        return True

    def clear_custom_words(self, language: Optional[str] = None) -> bool:
        if language and not is_valid_language_code(normalize_word(language)):
            log.warning("Rejected clear for invalid language code %r", language)
            return False
        with self._mutex:
            langs = [normalize_word(language)] if language else self.store.custom_languages()
            if self._persist({lang: [] for lang in langs}) is not None:
                return False
            if language:
                self.store.clear_custom(langs[0])
            else:
                self.store.clear_custom()
            self.store.rebuild_prefix_index()
        log.info("Cleared custom words (%s)", language or "all languages")
        return True

    def apply_languages(self, changes: Dict[str, List[str]]) -> Optional[str]:
        """
        Replace whole custom lists for several languages at once.
        Returns None on success or the storage error message; on error
        nothing in memory changes.
        """
        with self._mutex:
            err = self._persist(changes)
            if err is not None:
                return err
            for lang, words in changes.items():
                self.store.replace_custom(lang, words)
            self.store.rebuild_prefix_index()
        return None

    # ------------- reads -------------

    def list_custom_words(self, language: str) -> List[str]:
        lang = normalize_word(language or "")
        if not is_valid_language_code(lang):
            return []
        return sorted(self.store.custom_words(lang))

    def list_all_custom_words_by_language(self) -> Dict[str, List[str]]:
        return {lang: sorted(self.store.custom_words(lang))
                for lang in sorted(self.store.custom_languages())}

    def is_custom_word(self, word: str, language: Optional[str] = None) -> bool:
        return self.store.is_custom(word, normalize_word(language) if language else None)

    def custom_word_count(self, language: Optional[str] = None) -> int:
        if language is not None:
            return len(self.store.custom_words(normalize_word(language)))
        return sum(len(self.store.custom_words(l)) for l in self.store.custom_languages())

    # ------------- internals -------------

    def _persist(self, changes: Dict[str, Iterable[str]]) -> Optional[str]:
        """
        Write each language's new list. If one write fails, languages already
        written in this call are put back (best effort) and the error
        message is returned.
        """
        previous = {lang: self.store.custom_words(lang) for lang in changes}
        done: List[str] = []
        for lang, words in changes.items():
            try:
                self.backend.save(lang, list(words))
            except STORAGE_ERRORS as e:
                log.exception("Failed to persist custom words for %s", lang)
                for prev_lang in done:
                    try:
                        self.backend.save(prev_lang, previous[prev_lang])
                    except STORAGE_ERRORS:
                        log.error("Rollback of %s custom words failed", prev_lang)
                return f"Failed to save custom words for {lang}: {e}"
            done.append(lang)
        return None
