# src/autocorrect/engine.py
from __future__ import annotations

import logging
import os
from dataclasses import replace
from concurrent.futures import Future
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from . import config as CFG
from .backup import BackupCodec, BackupSource
from .DB.api import CustomWordStore, make_store
from .language import LanguageDetector
from .models import (
    AddWordResult, AutocorrectSuggestion, ExportResult, ImportMode, ImportResult, LoadResult,
)
from .personal import PersonalDictionaryManager
from .search import SuggestionEngine
from .wordstore import WordStore

log = logging.getLogger(__name__)


class Engine:
    """
    Thin orchestration layer that glues together:
      - WordStore (built-in + custom word sets, prefix index),
      - LanguageDetector + SuggestionEngine (ranking),
      - PersonalDictionaryManager over a CustomWordStore (SQLite, files or memory),
      - BackupCodec (zip export/import).

    Public API (used by CLI/Flask):
      * load(languages):  restore custom words -> load packaged dictionaries
      * suggest(token, max_results, context)
      * add_word / remove_word / list_custom_words / clear_custom_words
      * export_backup(dest) / import_backup(source, mode)
      * shutdown():        close underlying resources

    Storage DSNs (via autocorrect.DB.api.make_store):
      - "sqlite:///path/to/custom_words.sqlite"
      - "file:///path/to/dir"
      - "memory://"
    """

    # ------------- lifecycle -------------

    def __init__(
        self,
        *,
        data_dir: Optional[Union[str, Path]] = None,
        db_dsn: Optional[str] = None,
        backup_dir: Optional[Union[str, Path]] = None,
        active_languages: Optional[Iterable[str]] = None,
        backend: Optional[CustomWordStore] = None,
    ) -> None:
        self.store = WordStore(data_dir=data_dir, active_languages=active_languages)
        self.detector = LanguageDetector(self.store)
        self.suggester = SuggestionEngine(self.store, self.detector)

        dsn = db_dsn or CFG.STORE_DSN
        log.info("Initializing custom word store: %s", dsn if backend is None else type(backend).__name__)
        self._backend: Optional[CustomWordStore] = backend or make_store(dsn)
        self.manager = PersonalDictionaryManager(self.store, self._backend)
        self.codec = BackupCodec(self.manager, backup_dir=backup_dir)
        self._ready = False

    # /* ~~~ Load dictionaries and restore persisted custom words ~~~ */
    def load(self, languages: Optional[Iterable[str]] = None, *, verbose: bool = False) -> LoadResult:
        if verbose:
            logging.basicConfig(level=logging.INFO)
            os.environ["AUTOCORRECT_VERBOSE"] = "1"

        langs = list(languages or CFG.DEFAULT_LANGUAGES)
        restored = self.manager.restore()
        result = self.store.load(langs)
        if not restored:
            log.warning("Custom words could not be restored from the backing store")
            result = replace(result, custom_restored=False)
        # a failed reload applies nothing, so earlier dictionaries stay usable
        self._ready = self._ready or result.ok
        if result.ok:
            log.info("Engine load() complete: languages=%s custom=%d",
                     result.loaded, self.manager.custom_word_count())
        else:
            log.error("Engine load() failed, missing dictionaries: %s", result.missing)
        return result

    def load_async(self, languages: Optional[Iterable[str]] = None) -> "Future[LoadResult]":
        """Run load() on the store's loader thread; ready is set before the future resolves."""
        return self.store.submit(self.load, list(languages or CFG.DEFAULT_LANGUAGES))

    @property
    def is_ready(self) -> bool:
        return self._ready

    def set_active_languages(self, languages: Iterable[str]) -> None:
        self.store.set_active_languages(languages)

    # ------------- suggestions -------------

    # /* ~~~ Ranked corrections for a finished token ~~~ */
    def suggest(self, token: str, max_results: int = CFG.MAX_SUGGESTIONS,
                context: Sequence[str] = ()) -> List[AutocorrectSuggestion]:
        if not self._ready:
            raise RuntimeError("Engine not initialized. Call load() first.")
        return self.suggester.suggest(token, max_results=max_results, context_tokens=context)

    def should_auto_apply(self, suggestions: Sequence[AutocorrectSuggestion]) -> bool:
        return self.suggester.should_auto_apply(suggestions)

    def should_ignore(self, word: str) -> bool:
        return self.suggester.should_ignore(word)

    def contains(self, word: str) -> bool:
        return self.store.contains(word)

    # ------------- personal dictionary -------------

    def default_language(self) -> str:
        active = self.store.active_languages
        return active[0] if active else CFG.DEFAULT_LANGUAGES[0]

    def add_word(self, word: str, language: Optional[str] = None) -> AddWordResult:
        return self.manager.add_word(word, language or self.default_language())

    def remove_word(self, word: str, language: Optional[str] = None) -> bool:
        return self.manager.remove_word(word, language or self.default_language())

    def list_custom_words(self, language: str) -> List[str]:
        return self.manager.list_custom_words(language)

    def list_all_custom_words(self) -> Dict[str, List[str]]:
        return self.manager.list_all_custom_words_by_language()

    def clear_custom_words(self, language: Optional[str] = None) -> bool:
        return self.manager.clear_custom_words(language)

    # ------------- backup -------------

    def export_backup(self, dest: Optional[Union[str, Path]] = None) -> ExportResult:
        return self.codec.export(dest)

    def import_backup(self, source: BackupSource, mode: Union[ImportMode, str] = ImportMode.MERGE) -> ImportResult:
        return self.codec.import_(source, mode)

    def read_manifest(self, source: BackupSource):
        return self.codec.read_manifest(source)

    # ------------- teardown -------------

    # /* ~~~ Close underlying resources (DB handles, loader thread) ~~~ */
    def shutdown(self) -> None:
        try:
            self.store.close()
            if self._backend:
                self._backend.close()
        finally:
            self._backend = None
            self._ready = False
            log.info("Engine shutdown complete")
