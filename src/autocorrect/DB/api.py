# src/autocorrect/DB/api.py
from __future__ import annotations
from typing import Dict, List, Protocol


class CustomWordStore(Protocol):
    """
    Durable per-language custom word lists (language -> ordered words).
    Implementations raise OSError / sqlite3.Error on storage failure;
    the personal dictionary manager turns those into result values.
    """
    # Read
    def load_all(self) -> Dict[str, List[str]]: ...
    def load(self, language: str) -> List[str]: ...
    # Write (whole list per language)
    def save(self, language: str, words: List[str]) -> None: ...
    # Delete
    def delete(self, language: str) -> None: ...
    # lifecycle
    def close(self) -> None: ...


def make_store(dsn: str) -> CustomWordStore:
    """
    Factory:
      - memory://          -> MemoryStore (ephemeral, tests)
      - file:///path/dir   -> FileStore (one <lang>.txt per language)
      - sqlite:///path.db  -> SQLiteStore
    """
    if dsn.startswith("sqlite:///"):
        from .sqlite_store import SQLiteStore
        return SQLiteStore(dsn.removeprefix("sqlite:///"))

    if dsn.startswith("file:///"):
        from .file_store import FileStore
        return FileStore(dsn.removeprefix("file://"))

    if dsn.startswith("memory://"):
        from .memory_store import MemoryStore
        return MemoryStore()

    raise ValueError(f"Unsupported store DSN: {dsn}")
