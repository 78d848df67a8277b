# src/autocorrect/DB/memory_store.py
from __future__ import annotations
from typing import Dict, Iterable, List, Optional
from .api import CustomWordStore


class MemoryStore(CustomWordStore):
    """Simple in-memory store (useful for tests or ephemeral runs)."""
    def __init__(self, seed: Optional[Dict[str, Iterable[str]]] = None) -> None:
        self._rows: Dict[str, List[str]] = {}
        if seed:
            for lang, words in seed.items():
                self._rows[lang] = list(words)

    # R
    def load_all(self) -> Dict[str, List[str]]:
        return {lang: list(ws) for lang, ws in self._rows.items() if ws}

    def load(self, language: str) -> List[str]:
        return list(self._rows.get(language, []))

    # W
    def save(self, language: str, words: List[str]) -> None:
        if words:
            self._rows[language] = list(words)
        else:
            self._rows.pop(language, None)

    # D
    def delete(self, language: str) -> None:
        self._rows.pop(language, None)

    def close(self) -> None:
        self._rows.clear()
