from __future__ import annotations
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from . import config as CFG
from .normalize import is_valid_language_code

log = logging.getLogger(__name__)


def _verbose() -> bool:
    # per-file progress (set AUTOCORRECT_VERBOSE=1 or pass --verbose)
    return os.environ.get("AUTOCORRECT_VERBOSE") == "1"


def dictionary_path(data_dir: Path | str, language: str) -> Path:
    return Path(data_dir) / f"{language}.txt"


def read_word_list(path: Path | str) -> List[str]:
    """
    Read a flat word list: one word per line, trimmed and lowercased,
    blank lines and repeats dropped (first occurrence keeps its position).
    Returns [] when the file is missing or unreadable.
    """
    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            raw_lines = [ln.strip().lower() for ln in f]
    except OSError as e:
        log.error("Failed to read word list %s: %s", path, e)
        return []
    return list(dict.fromkeys(w for w in raw_lines if w))


def load_dictionary(language: str, data_dir: Path | str | None = None) -> List[str]:
    if not is_valid_language_code(language):
        log.error("Invalid language code %r", language)
        return []
    path = dictionary_path(data_dir or CFG.DATA_DIR, language)
    if not os.path.exists(path):
        log.error("No packaged dictionary for %r at %s", language, path)
        return []
    words = read_word_list(path)
    log.log(logging.INFO if _verbose() else logging.DEBUG, "Loaded %s dictionary: %d words", language, len(words))
    return words


def load_contractions(data_dir: Path | str | None = None, filename: Optional[str] = None) -> Dict[str, str]:
    """
    Parse "key:value" lines ("dont:don't"). Keys are lowercased; lines
    without exactly one ':' are skipped.
    """
    path = Path(data_dir or CFG.DATA_DIR) / (filename or CFG.CONTRACTION_FILE)
    table: Dict[str, str] = {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line or ":" not in line:
                    continue
                parts = line.split(":")
                if len(parts) != 2:
                    continue
                key, value = parts[0].strip().lower(), parts[1].strip()
                if key and value:
                    table[key] = value
    except OSError as e:
        log.error("Failed to load contractions from %s: %s", path, e)
        return {}
    log.info("Loaded %d contractions", len(table))
    return table
