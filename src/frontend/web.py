from __future__ import annotations
import argparse
import io
import logging
import os
from flask import Flask, request, jsonify, send_file
from autocorrect import Engine
from autocorrect import config as CFG
from autocorrect.models import (
    AddWordStatus, ExportSuccess, ImportMode, ImportSuccess, IncompatibleVersion, InvalidFormat,
    NoWordsToExport,
)
from autocorrect.normalize import is_valid_language_code

app = Flask(__name__)
_engine: Engine | None = None

_ADD_STATUS_CODES = {
    AddWordStatus.ADDED: 201,
    AddWordStatus.ALREADY_EXISTS: 409,
    AddWordStatus.INVALID_FORMAT: 422,
    AddWordStatus.ERROR: 500,
}


def _eng() -> Engine:
    if _engine is None:
        raise RuntimeError("Engine not initialized")
    return _engine


# ---------- health ----------
@app.get("/api/health")
def api_health():
    eng = _engine
    return jsonify({
        "ok": eng is not None and eng.is_ready,
        "languages": eng.store.loaded_languages if eng else [],
        "custom_words": eng.manager.custom_word_count() if eng else 0,
    })


# ---------- suggestions ----------
@app.get("/api/suggest")
def api_suggest():
    q = request.args.get("q", "", type=str)
    k = request.args.get("k", CFG.MAX_SUGGESTIONS, type=int)
    context = [t for t in request.args.get("context", "", type=str).replace(",", " ").split() if t]
    if not q:
        return jsonify({"suggestions": [], "auto_apply": False})
    rows = _eng().suggest(q, max_results=k, context=context)
    return jsonify({
        "suggestions": [r.to_dict() for r in rows],
        "auto_apply": _eng().should_auto_apply(rows),
    })


@app.get("/api/ignore")
def api_ignore():
    q = request.args.get("q", "", type=str)
    return jsonify({"word": q, "ignore": _eng().should_ignore(q)})


# ---------- personal dictionary ----------
@app.get("/api/words")
def api_words():
    lang = request.args.get("language")
    if lang:
        return jsonify({lang: _eng().list_custom_words(lang)})
    return jsonify(_eng().list_all_custom_words())


@app.post("/api/words")
def api_add_word():
    body = request.get_json(silent=True) or {}
    word = body.get("word")
    if not isinstance(word, str):
        return jsonify({"status": AddWordStatus.INVALID_FORMAT.value, "message": "word is required"}), 400
    res = _eng().add_word(word, body.get("language"))
    payload = {"status": res.status.value, "word": res.word, "language": res.language, "message": res.message}
    return jsonify(payload), _ADD_STATUS_CODES[res.status]


@app.delete("/api/words/<language>/<word>")
def api_remove_word(language: str, word: str):
    removed = _eng().remove_word(word, language)
    return jsonify({"removed": removed}), (200 if removed else 404)


@app.delete("/api/words")
def api_clear_words():
    lang = request.args.get("language") or None
    if lang is not None and not is_valid_language_code(lang.strip().lower()):
        return jsonify({"ok": False, "error": f"invalid language code: {lang!r}"}), 422
    ok = _eng().clear_custom_words(lang)
    return jsonify({"ok": ok}), (200 if ok else 500)


# ---------- backup ----------
@app.get("/api/export")
def api_export():
    res = _eng().export_backup()
    if isinstance(res, ExportSuccess):
        with open(res.path, "rb") as f:
            data = io.BytesIO(f.read())
        return send_file(data, mimetype="application/zip", as_attachment=True,
                         download_name=os.path.basename(res.path))
    if isinstance(res, NoWordsToExport):
        return jsonify({"error": res.message}), 404
    return jsonify({"error": res.message}), 500


@app.post("/api/import")
def api_import():
    mode = request.args.get("mode", ImportMode.MERGE.value, type=str)
    upload = request.files.get("file")
    if upload is None:
        return jsonify({"error": "multipart field 'file' is required"}), 400
    res = _eng().import_backup(io.BytesIO(upload.read()), mode)
    if isinstance(res, ImportSuccess):
        return jsonify({
            "total_words": res.total_words,
            "added_words": res.added_words,
            "skipped_words": res.skipped_words,
            "error_words": res.error_words,
            "language_breakdown": {
                lang: {"added": s.added, "skipped": s.skipped, "errors": s.errors}
                for lang, s in res.language_breakdown.items()
            },
        })
    if isinstance(res, IncompatibleVersion):
        return jsonify({"error": res.message, "backup_version": res.backup_version,
                        "current_version": res.current_version}), 409
    status = 400 if isinstance(res, InvalidFormat) else 500
    return jsonify({"error": res.message}), status


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Run Flask API on top of Engine")
    ap.add_argument("--languages", nargs="+", default=CFG.DEFAULT_LANGUAGES)
    ap.add_argument("--data-dir", default=None)
    ap.add_argument("--db", dest="db", default=None)  # DSN: "sqlite:///path", "file:///dir" or "memory://"
    ap.add_argument("--backup-dir", default=None)
    ap.add_argument("--host", default="127.0.0.1")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--verbose", action="store_true")
    args = ap.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO)
        os.environ["AUTOCORRECT_VERBOSE"] = "1"

    global _engine
    _engine = Engine(data_dir=args.data_dir, db_dsn=args.db, backup_dir=args.backup_dir)
    fut = _engine.load_async(args.languages)
    res = fut.result(timeout=CFG.LOAD_TIMEOUT)
    if not res.ok:
        _engine.shutdown()
        ap.error(f"no dictionary data for: {', '.join(res.missing)}")

    try:
        app.run(host=args.host, port=args.port, debug=args.verbose, use_reloader=False)
    finally:
        _engine.shutdown()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
