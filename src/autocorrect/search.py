from __future__ import annotations
import logging
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from . import config as CFG
from .language import LanguageDetector
from .models import AutocorrectSuggestion, SuggestionMetadata, SuggestionSource
from .normalize import apply_case, levenshtein, should_ignore as _should_ignore
from .wordstore import StoreView, WordStore

log = logging.getLogger(__name__)

# /* ~~~ QWERTY grid: x = column within the row, y = row ~~~ */
_ROWS = ("qwertyuiop", "asdfghjkl", "zxcvbnm")
KEYBOARD_LAYOUT: Dict[str, Tuple[int, int]] = {
    ch: (x, y) for y, row in enumerate(_ROWS) for x, ch in enumerate(row)
}

# Euclidean key distance -> proximity weight (upper bounds, inclusive)
_PROXIMITY_STEPS = ((1.5, 0.9), (2.5, 0.6), (3.5, 0.3))
_FAR_WEIGHT = 0.1

# edit distance -> base confidence
_BASE_CONFIDENCE = {0: 1.0, 1: 0.8, 2: 0.5}
_FALLBACK_CONFIDENCE = 0.2


def _key_weight(c1: str, c2: str) -> float:
    p1 = KEYBOARD_LAYOUT.get(c1)
    p2 = KEYBOARD_LAYOUT.get(c2)
    if p1 is None or p2 is None:
        return 0.0
    dist = math.hypot(p1[0] - p2[0], p1[1] - p2[1])
    for bound, weight in _PROXIMITY_STEPS:
        if dist <= bound:
            return weight
    return _FAR_WEIGHT


def keyboard_proximity(a: str, b: str) -> float:
    """
    Mean proximity weight over the positions where equal-length strings
    differ. 0.0 when lengths differ or nothing differs. A differing
    position with a key off the grid counts with weight 0.
    """
    if len(a) != len(b):
        return 0.0
    total = 0.0
    diffs = 0
    for c1, c2 in zip(a, b):
        if c1 != c2:
            total += _key_weight(c1, c2)
            diffs += 1
    return total / diffs if diffs else 0.0


def confidence_for(edit_distance: int, proximity: float, token_len: int,
                   context_language: Optional[str], candidate_language: Optional[str]) -> float:
    conf = _BASE_CONFIDENCE.get(edit_distance, _FALLBACK_CONFIDENCE)
    if proximity > CFG.PROXIMITY_THRESHOLD:
        conf += CFG.PROXIMITY_WEIGHT * proximity
    if token_len >= CFG.LONG_WORD_LEN:
        conf += CFG.LONG_WORD_BONUS
    if context_language is not None and context_language == candidate_language:
        conf += CFG.CONTEXT_BONUS
    return min(1.0, max(0.0, conf))


def _rank_key(s: AutocorrectSuggestion) -> Tuple[int, float]:
    # contractions outrank everything; then confidence, highest first
    return (0 if s.source is SuggestionSource.CONTRACTION else 1, -s.confidence)


class SuggestionEngine:
    """
    Turns a finished token into ranked corrections.

    All lookups for one call happen inside a single WordStore snapshot, so
    the call is read-only, does no I/O and never observes a half-rebuilt
    index.
    """

    def __init__(self, store: WordStore, detector: Optional[LanguageDetector] = None) -> None:
        self.store = store
        self.detector = detector or LanguageDetector(store)

    def suggest(self, token: str, max_results: int = CFG.MAX_SUGGESTIONS,
                context_tokens: Sequence[str] = ()) -> List[AutocorrectSuggestion]:
        if not token or not token.strip() or max_results <= 0:
            return []

        word = token.lower()
        with self.store.snapshot() as view:
            if view.contains(word):
                log.debug("Word %r found in dictionary, no correction needed", token)
                return []

            suggestions: List[AutocorrectSuggestion] = []

            contraction = view.contraction(word)
            if contraction is not None:
                suggestions.append(AutocorrectSuggestion(
                    original=token,
                    suggestion=apply_case(token, contraction),
                    confidence=CFG.CONTRACTION_CONFIDENCE,
                    source=SuggestionSource.CONTRACTION,
                    metadata=SuggestionMetadata(
                        edit_distance=1,
                        language=CFG.CONTRACTION_LANGUAGE,
                        is_contraction=True,
                    ),
                ))
                log.debug("Contraction suggestion: %s -> %s", word, contraction)

            context_language = self.detector.detect_context_language(context_tokens, lookup=view)
            suggestions.extend(self._candidates(token, word, context_language, view,
                                                skip=contraction.lower() if contraction else None))

        suggestions.sort(key=_rank_key)
        return suggestions[:max_results]

    def _pool(self, word: str, view: StoreView) -> Iterable[str]:
        if len(view.index) > CFG.FULL_SCAN_LIMIT:
            return view.index.candidates_near(word, CFG.MAX_EDIT_DISTANCE)
        return view.index.lexicon

    def _candidates(self, token: str, word: str, context_language: Optional[str],
                    view: StoreView, skip: Optional[str] = None) -> List[AutocorrectSuggestion]:
        out: List[AutocorrectSuggestion] = []
        n = len(word)
        for cand in self._pool(word, view):
            if abs(len(cand) - n) > CFG.MAX_EDIT_DISTANCE:
                continue
            if cand == skip:
                continue  # already offered as a contraction
            dist = levenshtein(word, cand)
            if dist == 0 or dist > CFG.MAX_EDIT_DISTANCE:
                continue

            proximity = keyboard_proximity(word, cand)
            cand_language = view.detect_language(cand)
            conf = confidence_for(dist, proximity, n, context_language, cand_language)
            if conf < CFG.MIN_CONFIDENCE:
                continue

            out.append(AutocorrectSuggestion(
                original=token,
                suggestion=apply_case(token, cand),
                confidence=conf,
                source=(SuggestionSource.KEYBOARD_PROXIMITY
                        if proximity > CFG.PROXIMITY_THRESHOLD else SuggestionSource.DICTIONARY),
                metadata=SuggestionMetadata(
                    edit_distance=dist,
                    language=cand_language,
                    proximity_score=proximity,
                ),
            ))
        return out

    # ------------- auxiliary predicates -------------

    @staticmethod
    def should_auto_apply(suggestions: Sequence[AutocorrectSuggestion]) -> bool:
        """Only contractions are applied silently; everything else is shown."""
        if not suggestions:
            return False
        top = suggestions[0]
        return top.source is SuggestionSource.CONTRACTION and top.confidence >= CFG.AUTO_APPLY_CONFIDENCE

    @staticmethod
    def should_ignore(word: str) -> bool:
        return _should_ignore(word)
