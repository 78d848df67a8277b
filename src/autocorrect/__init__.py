"""
Autocorrect Engine Module

Dictionary-backed autocorrect for typed tokens: built-in and personal word
lists per language, a 2-character prefix index, and a suggestion engine that
ranks corrections by edit distance, keyboard proximity, contraction rules and
the language of the surrounding words. Custom words can be exported to and
imported from a portable zip backup.

Main entry points:
    Engine: load dictionaries, suggest corrections, manage custom words, backups
    TypingSession: per-field typing state (context words, auto-apply undo)

Example Usage:
    from autocorrect import Engine

    eng = Engine(db_dsn="sqlite:///./custom_words.sqlite")
    eng.load(["en", "id"])
    for s in eng.suggest("helo", context=["say"]):
        print(f"{s.confidence:.2f} {s.suggestion} ({s.source.value})")
    eng.shutdown()
"""

# src/autocorrect/__init__.py
from .engine import Engine  # re-export
from .models import AutocorrectSuggestion, ImportMode, SuggestionSource
from .session import TypingSession

__version__ = "1.0.0"
__all__ = ["Engine", "TypingSession", "AutocorrectSuggestion", "ImportMode", "SuggestionSource"]
