"""Flask JSON API over the autocorrect Engine."""
from __future__ import annotations
from .web import app, main

__all__ = ["app", "main"]
