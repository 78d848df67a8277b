# src/autocorrect/models.py
"""
Data models for the autocorrect core.

- AutocorrectSuggestion: one ranked correction returned by the suggestion engine.
- BackupManifest / LanguageBackup: the portable custom-word archive contents.
- Result types: every fallible dictionary/backup operation returns one of the
  small frozen dataclasses below instead of raising, so callers can branch on
  the outcome with isinstance().

These classes hold no business logic beyond trivial helpers.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Dict, List, Optional, Union

from . import config as CFG


class SuggestionSource(str, Enum):
    DICTIONARY = "dictionary"
    CONTRACTION = "contraction"
    KEYBOARD_PROXIMITY = "keyboard-proximity"
    FREQUENCY = "frequency"
    PERSONAL = "personal"
    CONTEXT = "context"


@dataclass(frozen=True)
class SuggestionMetadata:
    edit_distance: int = 0
    language: Optional[str] = None
    is_contraction: bool = False
    proximity_score: float = 0.0
    frequency_rank: Optional[int] = None


@dataclass(frozen=True)
class AutocorrectSuggestion:
    """
    A single correction candidate.

    Attributes
    ----------
    original : str
        The token exactly as the user typed it.
    suggestion : str
        The replacement, already case-restored to match `original`.
    confidence : float
        Score in [0, 1]; higher ranks first.
    source : SuggestionSource
        Which rule produced the candidate.
    metadata : SuggestionMetadata
        Edit distance, detected language, proximity score, contraction flag.
    """
    original: str
    suggestion: str
    confidence: float
    source: SuggestionSource
    metadata: SuggestionMetadata = field(default_factory=SuggestionMetadata)

    def is_high_confidence(self) -> bool:
        return self.confidence >= CFG.HIGH_CONFIDENCE

    def is_medium_confidence(self) -> bool:
        return CFG.MIN_CONFIDENCE <= self.confidence < CFG.HIGH_CONFIDENCE

    def is_low_confidence(self) -> bool:
        return self.confidence < CFG.MIN_CONFIDENCE

    def to_dict(self) -> dict:
        d = asdict(self)
        d["source"] = self.source.value
        return d


# ---------------- personal dictionary ----------------

class AddWordStatus(str, Enum):
    ADDED = "added"
    ALREADY_EXISTS = "already_exists"
    INVALID_FORMAT = "invalid_format"
    ERROR = "error"


@dataclass(frozen=True)
class AddWordResult:
    status: AddWordStatus
    word: str
    language: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status is AddWordStatus.ADDED


@dataclass(frozen=True)
class LoadResult:
    ok: bool
    loaded: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    # False when persisted custom words could not be read back
    custom_restored: bool = True


# ---------------- backup ----------------

class ImportMode(str, Enum):
    MERGE = "merge"
    REPLACE = "replace"


@dataclass(frozen=True)
class LanguageBackup:
    language_code: str
    word_count: int
    words: List[str]

    def to_json(self) -> dict:
        return {"languageCode": self.language_code, "wordCount": self.word_count, "words": list(self.words)}


@dataclass(frozen=True)
class BackupManifest:
    """
    Authoritative description of a backup archive.

    `timestamp` is epoch milliseconds; `version` is the archive format
    version and must be checked before any imported data is applied.
    """
    version: int
    timestamp: int
    app_version: str
    languages: List[LanguageBackup]

    @property
    def total_words(self) -> int:
        return sum(lb.word_count for lb in self.languages)

    def to_json(self) -> dict:
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "appVersion": self.app_version,
            "languages": [lb.to_json() for lb in self.languages],
        }


@dataclass(frozen=True)
class ExportSuccess:
    path: str
    word_count: int
    manifest: BackupManifest


@dataclass(frozen=True)
class NoWordsToExport:
    message: str = "No custom words to export"


@dataclass(frozen=True)
class ExportFailed:
    message: str


ExportResult = Union[ExportSuccess, NoWordsToExport, ExportFailed]


@dataclass
class LanguageImportStats:
    added: int = 0
    skipped: int = 0
    errors: int = 0

    @property
    def total(self) -> int:
        return self.added + self.skipped + self.errors


@dataclass(frozen=True)
class ImportSuccess:
    """
    Import summary. `total_words` is every word listed in the manifest.
    `skipped_words` counts duplicates in MERGE mode only; REPLACE collapses
    repeated words silently, so there added + errors can be below the total.
    """
    total_words: int
    added_words: int
    skipped_words: int
    error_words: int
    language_breakdown: Dict[str, LanguageImportStats]


@dataclass(frozen=True)
class InvalidFormat:
    message: str = "Invalid backup file format"


@dataclass(frozen=True)
class IncompatibleVersion:
    backup_version: int
    current_version: int

    @property
    def message(self) -> str:
        return (f"Incompatible backup version ({self.backup_version}). "
                f"Current version: {self.current_version}")


@dataclass(frozen=True)
class ImportFailed:
    message: str


ImportResult = Union[ImportSuccess, InvalidFormat, IncompatibleVersion, ImportFailed]
