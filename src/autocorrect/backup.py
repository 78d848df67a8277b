from __future__ import annotations

import json
import logging
import os
import time
import zipfile
import zlib
from datetime import datetime
from pathlib import Path
from typing import IO, Callable, Dict, List, Optional, Union

from . import config as CFG
from .models import (
    BackupManifest, ExportFailed, ExportResult, ExportSuccess, ImportFailed, ImportMode,
    ImportResult, ImportSuccess, IncompatibleVersion, InvalidFormat, LanguageBackup,
    LanguageImportStats, NoWordsToExport,
)
from .normalize import is_valid_language_code, validate_word
from .personal import PersonalDictionaryManager

log = logging.getLogger(__name__)

BackupSource = Union[str, os.PathLike, IO[bytes]]
ManifestResult = Union[BackupManifest, InvalidFormat, IncompatibleVersion, ImportFailed]


class BackupCodec:
    """
    Custom-word backups as a single zip:

        manifest.json   {version, timestamp, appVersion,
                         languages: [{languageCode, wordCount, words}]}
        <lang>.txt      one word per line, for humans; never read back

    The manifest is authoritative. Import validates the whole manifest
    (version first) before touching any stored word.
    """

    def __init__(self, manager: PersonalDictionaryManager, *,
                 backup_dir: Optional[Union[str, os.PathLike]] = None,
                 app_version: str = CFG.APP_VERSION,
                 clock: Callable[[], float] = time.time) -> None:
        self.manager = manager
        self.backup_dir = Path(backup_dir) if backup_dir else CFG.BACKUP_DIR
        self.app_version = app_version
        self.clock = clock

    # ------------- export -------------

    def export(self, dest: Optional[Union[str, os.PathLike]] = None) -> ExportResult:
        with self.manager.mutation():
            by_lang = self.manager.list_all_custom_words_by_language()
        if not by_lang:
            log.info("Export skipped: no custom words")
            return NoWordsToExport()

        now = self.clock()
        manifest = BackupManifest(
            version=CFG.BACKUP_FORMAT_VERSION,
            timestamp=int(now * 1000),
            app_version=self.app_version,
            languages=[LanguageBackup(lang, len(ws), ws) for lang, ws in by_lang.items()],
        )
        path = self._resolve_dest(dest, now)
        tmp = f"{path}.tmp"
        try:
            os.makedirs(path.parent, exist_ok=True)
            with zipfile.ZipFile(tmp, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                zf.writestr(CFG.MANIFEST_NAME, json.dumps(manifest.to_json(), ensure_ascii=False, indent=2))
                for lb in manifest.languages:
                    zf.writestr(f"{lb.language_code}.txt", "\n".join(lb.words) + "\n")
            os.replace(tmp, path)
        except OSError as e:
            log.exception("Export to %s failed", path)
            try:
                os.remove(tmp)
            except OSError:
                pass
            return ExportFailed(f"Failed to write backup: {e}")

        log.info("Exported %d custom words (%d languages) to %s",
                 manifest.total_words, len(manifest.languages), path)
        return ExportSuccess(path=str(path), word_count=manifest.total_words, manifest=manifest)

    def _resolve_dest(self, dest: Optional[Union[str, os.PathLike]], now: float) -> Path:
        name = f"custom_dictionary_backup_{datetime.fromtimestamp(now).strftime('%Y%m%d_%H%M%S')}.zip"
        if dest is None:
            return self.backup_dir / name
        p = Path(dest)
        if p.is_dir() or str(dest).endswith(os.sep):
            return p / name
        return p

    # ------------- manifest -------------

    def read_manifest(self, source: BackupSource) -> ManifestResult:
        try:
            with zipfile.ZipFile(source) as zf:
                raw = zf.read(CFG.MANIFEST_NAME)
        except (zipfile.BadZipFile, zlib.error):
            return InvalidFormat("Backup is not a valid zip archive")
        except KeyError:
            return InvalidFormat(f"Backup has no {CFG.MANIFEST_NAME}")
        except OSError as e:
            log.error("Cannot read backup %s: %s", source, e)
            return ImportFailed(f"Cannot read backup: {e}")

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            return InvalidFormat("Manifest is not valid JSON")
        return parse_manifest(data)

    # ------------- import -------------

    def import_(self, source: BackupSource, mode: Union[ImportMode, str] = ImportMode.MERGE) -> ImportResult:
        try:
            mode = ImportMode(mode)
        except ValueError:
            return ImportFailed(f"Unknown import mode: {mode!r}")

        parsed = self.read_manifest(source)
        if not isinstance(parsed, BackupManifest):
            log.warning("Import rejected: %s", getattr(parsed, "message", parsed))
            return parsed

        with self.manager.mutation():
            changes: Dict[str, List[str]] = {}
            breakdown: Dict[str, LanguageImportStats] = {}
            for lb in parsed.languages:
                lang = lb.language_code
                stats = breakdown.setdefault(lang, LanguageImportStats())
                current = [] if mode is ImportMode.REPLACE else self.manager.store.custom_words(lang)
                merged = dict.fromkeys(current)
                for raw in lb.words:
                    w = validate_word(raw)
                    if w is None:
                        stats.errors += 1
                        log.debug("Import: invalid word %r for %s", raw, lang)
                    elif w in merged:
                        # only MERGE reports duplicates; REPLACE just collapses repeats
                        if mode is ImportMode.MERGE:
                            stats.skipped += 1
                    else:
                        merged[w] = None
                        stats.added += 1
                changes[lang] = list(merged)

            err = self.manager.apply_languages(changes)
            if err is not None:
                return ImportFailed(err)

        added = sum(s.added for s in breakdown.values())
        skipped = sum(s.skipped for s in breakdown.values())
        errors = sum(s.errors for s in breakdown.values())
        log.info("Import (%s) complete: %d added, %d skipped, %d errors",
                 mode.value, added, skipped, errors)
        return ImportSuccess(
            total_words=parsed.total_words,
            added_words=added,
            skipped_words=skipped,
            error_words=errors,
            language_breakdown=breakdown,
        )


def _is_int(v: object) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


def parse_manifest(data: object) -> Union[BackupManifest, InvalidFormat, IncompatibleVersion]:
    """
    Validate decoded manifest JSON. The version check comes before any other
    structural check so a newer archive reports IncompatibleVersion.
    """
    if not isinstance(data, dict):
        return InvalidFormat("Manifest must be a JSON object")

    version = data.get("version")
    if not _is_int(version) or version < 1:
        return InvalidFormat("Manifest version is missing or invalid")
    if version > CFG.BACKUP_FORMAT_VERSION:
        return IncompatibleVersion(backup_version=version, current_version=CFG.BACKUP_FORMAT_VERSION)

    timestamp = data.get("timestamp", 0)
    app_version = data.get("appVersion", "")
    if not _is_int(timestamp) or not isinstance(app_version, str):
        return InvalidFormat("Manifest timestamp/appVersion are invalid")

    languages = data.get("languages")
    if not isinstance(languages, list):
        return InvalidFormat("Manifest languages must be a list")

    out: List[LanguageBackup] = []
    seen = set()
    for entry in languages:
        if not isinstance(entry, dict):
            return InvalidFormat("Language entry must be an object")
        code = entry.get("languageCode")
        count = entry.get("wordCount")
        words = entry.get("words")
        if not isinstance(code, str) or not is_valid_language_code(code.lower()):
            return InvalidFormat(f"Invalid languageCode: {code!r}")
        code = code.lower()
        if code in seen:
            return InvalidFormat(f"Duplicate languageCode: {code}")
        if not isinstance(words, list) or not all(isinstance(w, str) for w in words):
            return InvalidFormat(f"Words for {code} must be a list of strings")
        if not _is_int(count) or count != len(words):
            return InvalidFormat(f"wordCount for {code} does not match its word list")
        seen.add(code)
        out.append(LanguageBackup(language_code=code, word_count=count, words=list(words)))

    return BackupManifest(version=version, timestamp=timestamp, app_version=app_version, languages=out)
