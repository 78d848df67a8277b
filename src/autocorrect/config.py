from __future__ import annotations
import os
from pathlib import Path

# package root: src/autocorrect/
PACKAGE_ROOT = Path(__file__).resolve().parent

# packaged word lists (<lang>.txt) and the contraction table
DATA_DIR = Path(os.environ.get("AUTOCORRECT_DATA_DIR") or PACKAGE_ROOT / "data" / "dictionaries")
CONTRACTION_FILE = "en_contractions.txt"
CONTRACTION_LANGUAGE = "en"

DEFAULT_LANGUAGES = ["en", "id"]

# custom-word persistence: "memory://", "file:///dir" or "sqlite:///path.db"
STORE_DSN = os.environ.get("AUTOCORRECT_DB", "memory://")

# where export() drops archives when no destination is given
BACKUP_DIR = Path(os.environ.get("AUTOCORRECT_BACKUP_DIR") or Path.cwd())

# /* ~~~ suggestion thresholds ~~~ */
MAX_SUGGESTIONS: int = 5
MAX_EDIT_DISTANCE: int = 2
MIN_CONFIDENCE: float = 0.5
HIGH_CONFIDENCE: float = 0.8
CONTRACTION_CONFIDENCE: float = 0.95
AUTO_APPLY_CONFIDENCE: float = 0.9

# confidence boosts
PROXIMITY_THRESHOLD: float = 0.5
PROXIMITY_WEIGHT: float = 0.15
LONG_WORD_LEN: int = 5
LONG_WORD_BONUS: float = 0.05
CONTEXT_BONUS: float = 0.1

# language detection looks at the last N context tokens
CONTEXT_WINDOW: int = 5
# typing session keeps this many recent words
MAX_CONTEXT_WORDS: int = 10

# /* ~~~ index ~~~ */
PREFIX_LEN: int = 2
# above this many words, candidate generation goes through prefix buckets
FULL_SCAN_LIMIT: int = 50_000

# /* ~~~ backup archive ~~~ */
BACKUP_FORMAT_VERSION: int = 1
MANIFEST_NAME = "manifest.json"
APP_VERSION = "1.0.0"

# seconds to wait on load_async() from the CLI/web entry points
LOAD_TIMEOUT: float = 30.0
