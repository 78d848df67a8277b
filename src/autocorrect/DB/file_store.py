# src/autocorrect/DB/file_store.py
from __future__ import annotations
import os
from pathlib import Path
from typing import Dict, List
from .api import CustomWordStore
from ..loader import read_word_list
from ..normalize import is_valid_language_code

_SUFFIX = ".txt"


class FileStore(CustomWordStore):
    """One flat <language>.txt per language under a directory, one word per line."""
    def __init__(self, root: str) -> None:
        self.root = Path(root).resolve()
        os.makedirs(self.root, exist_ok=True)

    def _path(self, language: str) -> Path:
        if not is_valid_language_code(language):
            raise ValueError(f"Invalid language code for file store: {language!r}")
        path = (self.root / f"{language}{_SUFFIX}").resolve()
        if path.parent != self.root:
            raise ValueError(f"Language file escapes store directory: {path}")
        return path

    # ---- Read ----
    def load_all(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        with os.scandir(self.root) as it:
            for entry in sorted(it, key=lambda e: e.name):
                if not entry.is_file() or not entry.name.endswith(_SUFFIX):
                    continue
                language = entry.name[:-len(_SUFFIX)]
                if not is_valid_language_code(language):
                    continue  # stray files, e.g. notes.bak.txt
                words = read_word_list(entry.path)
                if words:
                    out[language] = words
        return out

    def load(self, language: str) -> List[str]:
        path = self._path(language)
        if not path.exists():
            return []
        return read_word_list(path)

    # ---- Write ----
    def save(self, language: str, words: List[str]) -> None:
        if not words:
            self.delete(language)
            return
        path = self._path(language)
        tmp = f"{path}.tmp"
        with open(tmp, "w", encoding="utf-8", newline="\n") as f:
            f.write("\n".join(words))
            f.write("\n")
        os.replace(tmp, path)

    # ---- Delete ----
    def delete(self, language: str) -> None:
        try:
            os.remove(self._path(language))
        except FileNotFoundError:
            pass

    def close(self) -> None:
        pass
