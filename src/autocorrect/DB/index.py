from __future__ import annotations
from collections import defaultdict
from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

from ..config import MAX_EDIT_DISTANCE, PREFIX_LEN
from ..normalize import levenshtein, prefix_key


class PrefixIndex:
    """
    Fixed-length prefix buckets over every loaded word, plus the ordered,
    de-duplicated lexicon used for candidate discovery.

    The lexicon order is the order words were fed to build(): languages in
    load order, built-in words before custom ones. Ranking ties fall back on
    this order, so it must stay deterministic.
    An index is immutable once built; WordStore swaps in a fresh one.
    """
    def __init__(self, k: int = PREFIX_LEN) -> None:
        self.k = k
        self._buckets: Dict[str, FrozenSet[str]] = {}
        self._lexicon: Tuple[str, ...] = ()
        self._rank: Dict[str, int] = {}
        # word[k:] -> bucketed words with that tail
        self._tails: Dict[str, FrozenSet[str]] = {}

    # ---- Build ----
    @classmethod
    def build(cls, word_lists: Iterable[Iterable[str]], k: int = PREFIX_LEN) -> "PrefixIndex":
        idx = cls(k)
        seen: Dict[str, None] = {}
        buckets: Dict[str, Set[str]] = defaultdict(set)
        tails: Dict[str, Set[str]] = defaultdict(set)
        for words in word_lists:
            for w in words:
                if w in seen:
                    continue
                seen[w] = None
                key = prefix_key(w, k)
                if key is not None:
                    buckets[key].add(w)
                    tails[w[k:]].add(w)
        idx._buckets = {key: frozenset(ws) for key, ws in buckets.items()}
        idx._tails = {tail: frozenset(ws) for tail, ws in tails.items()}
        idx._lexicon = tuple(seen)
        idx._rank = {w: i for i, w in enumerate(idx._lexicon)}
        return idx

    # ---- Query ----
    def words_by_prefix(self, prefix: str) -> List[str]:
        if len(prefix) < self.k:
            raise ValueError(f"prefix must be at least {self.k} characters: {prefix!r}")
        bucket = self._buckets.get(prefix[:self.k], frozenset())
        if len(prefix) > self.k:
            bucket = frozenset(w for w in bucket if w.startswith(prefix))
        return sorted(bucket, key=self._rank.__getitem__)

    def bucket_keys(self) -> List[str]:
        return list(self._buckets)

    def bucket(self, key: str) -> FrozenSet[str]:
        return self._buckets.get(key, frozenset())

    def candidates_near(self, token: str, max_distance: int = MAX_EDIT_DISTANCE) -> List[str]:
        """
        Every word within `max_distance` edits of `token` (plus some that are
        not), in lexicon order, without scanning the whole lexicon.

        An alignment of `token` with a word w pairs w[:k] with some token[:j]
        at a cost of at least levenshtein(w[:k], token[:j]). Either that is
        below the budget for some j, and w's bucket is kept, or the whole
        budget goes on the prefix and w[k:] == token[j:] exactly, which the
        tail map answers directly.
        """
        if not token or max_distance < 0:
            return []
        lo, hi = max(0, self.k - max_distance), min(len(token), self.k + max_distance)
        heads = [token[:j] for j in range(lo, hi + 1)]

        pool: Set[str] = set()
        for key, ws in self._buckets.items():
            if any(levenshtein(key, head) < max_distance for head in heads):
                pool.update(ws)
        for j in range(lo, hi + 1):
            pool.update(self._tails.get(token[j:], ()))
        # words shorter than k are not bucketed; keep them reachable
        pool.update(w for w in self._lexicon if len(w) < self.k)
        return sorted(pool, key=self._rank.__getitem__)

    @property
    def lexicon(self) -> Tuple[str, ...]:
        return self._lexicon

    def __len__(self) -> int:
        return len(self._lexicon)

    def __contains__(self, word: object) -> bool:
        return word in self._rank
