from __future__ import annotations
import argparse, json, sys
from autocorrect import Engine
from autocorrect import config as CFG
from autocorrect.models import (
    BackupManifest, ExportSuccess, ImportMode, ImportSuccess, NoWordsToExport,
)


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Autocorrect CLI (Engine-backed)")
    p.add_argument("--languages", nargs="+", default=CFG.DEFAULT_LANGUAGES, help="Dictionaries to load")
    p.add_argument("--data-dir", default=None, help="Folder with <lang>.txt and en_contractions.txt")
    p.add_argument("--db", default=None, help='Custom word store DSN ("sqlite:///x.db", "file:///dir", "memory://")')
    p.add_argument("-k", type=int, default=CFG.MAX_SUGGESTIONS, help="Max suggestions")
    p.add_argument("--q", default=None, help="Single token to correct")
    p.add_argument("--context", nargs="*", default=[], help="Recent words before the token")
    p.add_argument("--repl", action="store_true", help="Interactive loop after init")
    p.add_argument("--json", action="store_true", help="Emit JSON rows")

    g = p.add_mutually_exclusive_group()
    g.add_argument("--add", metavar="WORD", help="Add a custom word")
    g.add_argument("--remove", metavar="WORD", help="Remove a custom word")
    g.add_argument("--list", action="store_true", help="List custom words")
    g.add_argument("--clear", action="store_true", help="Clear custom words (--language to scope)")
    g.add_argument("--export", metavar="PATH", help="Export custom words to a zip backup")
    g.add_argument("--import", dest="import_path", metavar="PATH", help="Import a zip backup")
    g.add_argument("--inspect", metavar="PATH", help="Print a backup's manifest")
    p.add_argument("--language", default=None, help="Language for --add/--remove/--list/--clear")
    p.add_argument("--mode", choices=[m.value for m in ImportMode], default=ImportMode.MERGE.value)
    p.add_argument("--verbose", action="store_true")

    args = p.parse_args(argv)

    eng = Engine(data_dir=args.data_dir, db_dsn=args.db)
    try:
        res = eng.load(args.languages, verbose=args.verbose)
        if not res.ok:
            print(f"error: no dictionary data for {', '.join(res.missing)}", file=sys.stderr)
            return 2
        if not res.custom_restored:
            print("warning: custom words could not be restored", file=sys.stderr)

        if args.add:
            r = eng.add_word(args.add, args.language)
            print(f"{r.status.value}: {r.word} [{r.language}] {r.message}".rstrip())
            return 0 if r.ok else 1
        if args.remove:
            ok = eng.remove_word(args.remove, args.language)
            print("removed" if ok else "not a custom word")
            return 0 if ok else 1
        if args.list:
            rows = {args.language: eng.list_custom_words(args.language)} if args.language \
                else eng.list_all_custom_words()
            if args.json:
                print(json.dumps(rows, ensure_ascii=False, indent=2))
            else:
                for lang, words in rows.items():
                    print(f"[{lang}] {len(words)} words")
                    for w in words:
                        print(f"  {w}")
            return 0
        if args.clear:
            return 0 if eng.clear_custom_words(args.language) else 1
        if args.export:
            r = eng.export_backup(args.export)
            if isinstance(r, ExportSuccess):
                print(f"exported {r.word_count} words to {r.path}")
                return 0
            print(r.message, file=sys.stderr)
            return 0 if isinstance(r, NoWordsToExport) else 1
        if args.import_path:
            r = eng.import_backup(args.import_path, args.mode)
            if isinstance(r, ImportSuccess):
                print(f"imported: {r.added_words} added, {r.skipped_words} skipped, {r.error_words} errors")
                for lang, st in r.language_breakdown.items():
                    print(f"  {lang}: +{st.added} ={st.skipped} !{st.errors}")
                return 0
            print(f"import failed: {r.message}", file=sys.stderr)
            return 1
        if args.inspect:
            m = eng.read_manifest(args.inspect)
            if isinstance(m, BackupManifest):
                print(json.dumps(m.to_json(), ensure_ascii=False, indent=2))
                return 0
            print(f"invalid backup: {m.message}", file=sys.stderr)
            return 1

        def run_query(q: str, context: list[str]):
            rows = eng.suggest(q, max_results=args.k, context=context)
            if args.json:
                print(json.dumps({"suggestions": [r.to_dict() for r in rows],
                                  "auto_apply": eng.should_auto_apply(rows)},
                                 ensure_ascii=False, indent=2))
            else:
                if not rows:
                    print("(no suggestions)"); return
                print("#  Conf   Source              Dist  Lang  Suggestion")
                for i, r in enumerate(rows, 1):
                    md = r.metadata
                    print(f"{i:<2} {r.confidence:<6.3f} {r.source.value:<19} {md.edit_distance:<5} "
                          f"{md.language or '-':<5} {r.suggestion}")

        if args.q:
            run_query(args.q, args.context)

        if args.repl:
            print("Type words (empty line to exit); earlier words become context.")
            context: list[str] = []
            while True:
                try:
                    line = input("> ").strip()
                except (EOFError, KeyboardInterrupt):
                    break
                if not line:
                    break
                for tok in line.split():
                    if eng.should_ignore(tok):
                        print(f"{tok}: ignored")
                    else:
                        print(f"{tok}:")
                        run_query(tok, context)
                    context.append(tok.lower())

        return 0
    finally:
        eng.shutdown()


if __name__ == "__main__":
    raise SystemExit(main())
