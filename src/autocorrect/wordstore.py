from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple, TypeVar

from . import config as CFG
from . import loader
from .DB.index import PrefixIndex
from .models import LoadResult
from .normalize import normalize_word
from .rwlock import ReadWriteLock

log = logging.getLogger(__name__)

T = TypeVar("T")


class WordStore:
    """
    Built-in and custom word sets per language, the contraction table and
    the prefix index derived from them.

    Concurrency: readers share a ReadWriteLock; load, custom-word mutations
    and index rebuilds take it exclusively. Every mutation bumps `version`;
    the index remembers the version it was built from, and readers that need
    the index rebuild it first when the two differ.
    """

    def __init__(self, data_dir: Path | str | None = None,
                 active_languages: Optional[Iterable[str]] = None) -> None:
        self.data_dir = Path(data_dir) if data_dir else CFG.DATA_DIR
        self._lock = ReadWriteLock()

        # language -> words in file order / frozen membership set
        self._builtin: Dict[str, Tuple[str, ...]] = {}
        self._builtin_sets: Dict[str, FrozenSet[str]] = {}
        # language -> insertion-ordered custom words
        self._custom: Dict[str, Dict[str, None]] = {}
        self._contractions: Dict[str, str] = {}
        self._active: List[str] = list(active_languages or [])

        self._version = 0
        self._index = PrefixIndex()
        self._index_version = 0
        self._executor: Optional[ThreadPoolExecutor] = None

    # ------------- loading -------------

    def load(self, languages: Iterable[str]) -> LoadResult:
        """
        Load packaged dictionaries. Every file is read before anything is
        applied; one missing language fails the whole call.
        Reloading a language replaces its built-in set only.
        """
        languages = list(dict.fromkeys(languages))
        if not languages:
            return LoadResult(ok=False)

        log.info("Loading dictionaries for languages: %s", languages)
        staged: Dict[str, List[str]] = {}
        missing: List[str] = []
        for lang in languages:
            words = loader.load_dictionary(lang, self.data_dir)
            if words:
                staged[lang] = words
            else:
                missing.append(lang)

        if missing:
            log.error("Dictionary load aborted, no data for: %s", missing)
            return LoadResult(ok=False, loaded=[], missing=missing)

        contractions: Optional[Dict[str, str]] = None
        if CFG.CONTRACTION_LANGUAGE in staged:
            contractions = loader.load_contractions(self.data_dir)

        with self._lock.write():
            for lang, words in staged.items():
                self._builtin[lang] = tuple(words)
                self._builtin_sets[lang] = frozenset(words)
            if contractions is not None:
                self._contractions = contractions
            if not self._active:
                self._active = list(staged)
            self._version += 1
            self._rebuild_locked()

        log.info("Dictionary loading complete: %s", {l: len(w) for l, w in staged.items()})
        return LoadResult(ok=True, loaded=list(staged), missing=[])

    def load_async(self, languages: Iterable[str]) -> "Future[LoadResult]":
        """Run load() on a background thread; use the Future for timeout/cancel."""
        return self.submit(self.load, list(languages))

    def submit(self, fn: Callable[..., T], *args) -> "Future[T]":
        """Queue work on the single loader thread (loads never overlap)."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="wordstore-load")
        return self._executor.submit(fn, *args)

    def clear(self) -> None:
        """Forget built-in dictionaries and contractions; custom words stay."""
        with self._lock.write():
            self._builtin.clear()
            self._builtin_sets.clear()
            self._contractions = {}
            self._version += 1
            self._rebuild_locked()
        log.info("Cleared built-in dictionaries")

    def close(self) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=True, cancel_futures=True)
            self._executor = None

    # ------------- configuration -------------

    def set_active_languages(self, languages: Iterable[str]) -> None:
        with self._lock.write():
            self._active = list(dict.fromkeys(languages))

    @property
    def active_languages(self) -> List[str]:
        with self._lock.read():
            return list(self._active)

    @property
    def loaded_languages(self) -> List[str]:
        with self._lock.read():
            return list(self._builtin)

    # ------------- queries -------------

    def contains(self, word: str) -> bool:
        with self._lock.read():
            return self._contains_unlocked(normalize_word(word))

    def contains_in_language(self, word: str, language: str) -> bool:
        with self._lock.read():
            return self._contains_in_unlocked(normalize_word(word), language)

    def is_builtin(self, word: str, language: str) -> bool:
        with self._lock.read():
            return normalize_word(word) in self._builtin_sets.get(language, frozenset())

    def contraction(self, word: str) -> Optional[str]:
        with self._lock.read():
            return self._contractions.get(word.lower())

    def detect_language(self, word: str) -> Optional[str]:
        with self._lock.read():
            return self._detect_unlocked(normalize_word(word))

    def words_by_prefix(self, prefix: str) -> List[str]:
        prefix = prefix.lower()
        if len(prefix) < CFG.PREFIX_LEN:
            raise ValueError(f"prefix must be at least {CFG.PREFIX_LEN} characters: {prefix!r}")
        with self.snapshot() as view:
            return view.index.words_by_prefix(prefix)

    def all_words(self) -> List[str]:
        with self.snapshot() as view:
            return list(view.index.lexicon)

    def words_for_language(self, language: str) -> List[str]:
        with self._lock.read():
            words = list(self._builtin.get(language, ()))
            words.extend(w for w in self._custom.get(language, {}) if w not in self._builtin_sets.get(language, ()))
            return words

    def custom_words(self, language: str) -> List[str]:
        with self._lock.read():
            return list(self._custom.get(language, {}))

    def custom_languages(self) -> List[str]:
        with self._lock.read():
            return [lang for lang, ws in self._custom.items() if ws]

    def is_custom(self, word: str, language: Optional[str] = None) -> bool:
        w = normalize_word(word)
        with self._lock.read():
            if language is not None:
                return w in self._custom.get(language, {})
            return any(w in ws for ws in self._custom.values())

    @property
    def version(self) -> int:
        return self._version

    @property
    def index_stale(self) -> bool:
        return self._index_version != self._version

    # ------------- custom-word primitives (callers rebuild afterwards) -------------

    def add_custom(self, language: str, word: str) -> bool:
        with self._lock.write():
            ws = self._custom.setdefault(language, {})
            if word in ws:
                return False
            ws[word] = None
            self._version += 1
            return True

    def remove_custom(self, language: str, word: str) -> bool:
        with self._lock.write():
            ws = self._custom.get(language)
            if not ws or word not in ws:
                return False
            del ws[word]
            self._version += 1
            return True

    def replace_custom(self, language: str, words: Iterable[str]) -> None:
        with self._lock.write():
            self._custom[language] = dict.fromkeys(words)
            self._version += 1

    def clear_custom(self, language: Optional[str] = None) -> int:
        with self._lock.write():
            if language is None:
                removed = sum(len(ws) for ws in self._custom.values())
                self._custom.clear()
            else:
                removed = len(self._custom.pop(language, {}))
            self._version += 1
            return removed

    # ------------- index -------------

    def rebuild_prefix_index(self) -> None:
        with self._lock.write():
            self._rebuild_locked()

    def _rebuild_locked(self) -> None:
        lists: List[Iterable[str]] = list(self._builtin.values())
        lists.extend(self._custom.values())
        self._index = PrefixIndex.build(lists, k=CFG.PREFIX_LEN)
        self._index_version = self._version
        log.debug("Prefix index rebuilt: version=%d words=%d", self._version, len(self._index))

    @contextmanager
    def snapshot(self) -> Iterator["StoreView"]:
        """
        Hold the read lock with a fresh index for the duration of the block.
        Suggestion generation runs entirely inside one snapshot so it never
        sees a half-applied mutation.
        """
        while True:
            self._lock.acquire_read()
            if not self.index_stale:
                break
            self._lock.release_read()
            self.rebuild_prefix_index()
        try:
            yield StoreView(self)
        finally:
            self._lock.release_read()

    # ------------- internals (caller holds a lock) -------------

    def _languages_in_order(self) -> List[str]:
        langs = list(self._builtin)
        langs.extend(l for l in self._custom if l not in self._builtin)
        return langs

    def _contains_in_unlocked(self, w: str, language: str) -> bool:
        return w in self._builtin_sets.get(language, ()) or w in self._custom.get(language, {})

    def _contains_unlocked(self, w: str) -> bool:
        return any(self._contains_in_unlocked(w, lang) for lang in self._languages_in_order())

    def _detect_unlocked(self, w: str) -> Optional[str]:
        ordered = list(self._active)
        ordered.extend(l for l in self._languages_in_order() if l not in ordered)
        for lang in ordered:
            if self._contains_in_unlocked(w, lang):
                return lang
        return None


class StoreView:
    """Lock-free read accessors, valid only inside WordStore.snapshot()."""

    def __init__(self, store: WordStore) -> None:
        self._store = store
        self.index: PrefixIndex = store._index

    def contains(self, word: str) -> bool:
        return self._store._contains_unlocked(word.lower())

    def contraction(self, word: str) -> Optional[str]:
        return self._store._contractions.get(word.lower())

    def detect_language(self, word: str) -> Optional[str]:
        return self._store._detect_unlocked(word.lower())

    def __len__(self) -> int:
        return len(self.index)
