# src/autocorrect/DB/sqlite_store.py
from __future__ import annotations
import os
import sqlite3
from typing import Dict, List
from .api import CustomWordStore

_SCHEMA = """
CREATE TABLE IF NOT EXISTS custom_words (
  language TEXT NOT NULL,
  position INTEGER NOT NULL,
  word TEXT NOT NULL,
  PRIMARY KEY (language, word)
);
CREATE INDEX IF NOT EXISTS idx_custom_words_lang ON custom_words(language, position);
"""


class SQLiteStore(CustomWordStore):
    """Custom words in a single SQLite table, ordered by insertion position."""
    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(os.path.abspath(db_path)), exist_ok=True)
        self.path = db_path
        self.conn: sqlite3.Connection = sqlite3.connect(db_path, check_same_thread=False)
        self.conn.executescript(_SCHEMA)

    # ---- Read ----
    def load_all(self) -> Dict[str, List[str]]:
        out: Dict[str, List[str]] = {}
        cur = self.conn.execute(
            "SELECT language, word FROM custom_words ORDER BY language, position"
        )
        for lang, word in cur:
            out.setdefault(lang, []).append(word)
        return out

    def load(self, language: str) -> List[str]:
        cur = self.conn.execute(
            "SELECT word FROM custom_words WHERE language=? ORDER BY position", (language,)
        )
        return [row[0] for row in cur]

    # ---- Write ----
    def save(self, language: str, words: List[str]) -> None:
        rows = [(language, i, w) for i, w in enumerate(dict.fromkeys(words))]
        with self.conn:  # one transaction: delete + insert
            self.conn.execute("DELETE FROM custom_words WHERE language=?", (language,))
            self.conn.executemany(
                "INSERT INTO custom_words(language, position, word) VALUES (?,?,?)", rows
            )

    # ---- Delete ----
    def delete(self, language: str) -> None:
        with self.conn:
            self.conn.execute("DELETE FROM custom_words WHERE language=?", (language,))

    # ---- lifecycle ----
    def close(self) -> None:
        self.conn.close()
