"""Nearest-document retrieval over the TF-IDF index.

``Retriever`` owns the corpus index.  The index is built lazily on the
first call to ``ensure_index`` and cached for the lifetime of the
object; concurrent first callers wait on a lock and all observe the
same index.  After that the index is only read.

Queries are vectorized through the cached vocabulary, scored against
every document with cosine similarity, and the best document is
returned when it reaches the fallback threshold.  Otherwise one of the
canned ``FALLBACK_PHRASES`` is drawn at random, while the best score and
index are still reported.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

import numpy as np

from askapi.corpus import load_corpus
from askapi.vectorizer import Index, build_index, tokenize, vectorize

log = logging.getLogger("api.retriever")

FALLBACK_PHRASES = (
    "Maaf, gue belum nangkep maksudnya. Coba jelasin lagi.",
    "Kayaknya kurang jelas, coba detailin.",
    "Aku AI offline, tolong kasih konteks.",
    "Belum nemu jawabannya. Jelasin ulang?",
    "Sepertinya konteks kurang lengkap.",
)

# Reported when no document beats it, e.g. for an empty corpus
NO_MATCH_SCORE = -1.0
NO_MATCH_INDEX = -1

CorpusLoader = Callable[[str], Awaitable[List[str]]]


@dataclass(frozen=True)
class Answer:
    answer: Optional[str]
    score: Optional[float] = None
    index: Optional[int] = None


class Retriever:
    """Lazily indexed TF-IDF retriever for one corpus source."""

    def __init__(
        self,
        source: str,
        top_k_vocab: int = 4000,
        fallback_threshold: float = 0.12,
        rng: Optional[random.Random] = None,
        loader: Optional[CorpusLoader] = None,
    ) -> None:
        if top_k_vocab < 0:
            raise ValueError("top_k_vocab must be non-negative")
        self.source = source
        self.top_k_vocab = top_k_vocab
        self.fallback_threshold = fallback_threshold
        self.rng = rng or random.Random()
        self.loader = loader or load_corpus
        self._index: Optional[Index] = None
        self._lock = asyncio.Lock()

    @property
    def is_ready(self) -> bool:
        return self._index is not None

    async def ensure_index(self) -> Index:
        """Return the cached index, building it on first use."""
        if self._index is not None:
            return self._index
        async with self._lock:
            # another caller may have finished the build while we waited
            if self._index is None:
                documents = await self.loader(self.source)
                index = build_index(documents, self.top_k_vocab)
                log.info(f"TF-IDF index built. docs={len(index)} vocab={index.dim}")
                self._index = index
        return self._index

    def score(self, query: str, index: Index) -> np.ndarray:
        """Cosine similarity of ``query`` against every document of ``index``."""
        qvec = vectorize(tokenize(query), index)
        qnorm = float(np.linalg.norm(qvec))
        dots = index.doc_vectors @ qvec
        denom = qnorm * index.doc_norms
        sims = np.zeros(len(index), dtype=np.float64)
        np.divide(dots, denom, out=sims, where=denom > 0)
        return sims

    def pick_fallback(self) -> str:
        return FALLBACK_PHRASES[self.rng.randrange(len(FALLBACK_PHRASES))]

    async def answer(self, query: Optional[str]) -> Answer:
        """Return the best matching document for ``query`` or a fallback phrase."""
        if not query:
            return Answer(answer=None)

        index = await self.ensure_index()
        sims = self.score(query, index)

        best_score, best_idx = NO_MATCH_SCORE, NO_MATCH_INDEX
        if sims.size:
            # argmax keeps the first maximum, so ties go to the lower index
            candidate = int(np.argmax(sims))
            if sims[candidate] > best_score:
                best_score, best_idx = float(sims[candidate]), candidate

        if best_score >= self.fallback_threshold and best_idx >= 0:
            return Answer(answer=index.documents[best_idx], score=best_score, index=best_idx)

        log.debug(f"No document above threshold (best={best_score:.4f} at {best_idx}); using fallback.")
        return Answer(answer=self.pick_fallback(), score=best_score, index=best_idx)
