"""TF-IDF index over a small, static corpus.

This module turns raw document strings into an ``Index``: a bounded
vocabulary, one inverse-document-frequency weight per vocabulary term,
a dense matrix of document vectors and the Euclidean norm of each
vector.  The same ``vectorize`` routine is used for documents and for
queries so that both live in the same space.

The weighting scheme is deliberately plain:

``tf``
    Occurrences of a token divided by the number of tokens in the text.

``idf``
    ``ln(N / (1 + df))`` where ``N`` is the number of documents (at
    least 1) and ``df`` the number of documents containing the token.
    Terms that occur in almost every document get a negative weight;
    that is kept as is.

The vocabulary holds the ``top_k_vocab`` tokens with the highest
document frequency, ties broken by ascending lexicographic order.
"""

from __future__ import annotations

import math
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import numpy as np

# Anything outside this set is turned into a separator
_NON_TOKEN_CHARS = re.compile(r"[^a-z0-9\s\-\+\.#]")


def tokenize(text: Optional[str]) -> List[str]:
    """Lowercase ``text`` and split it into tokens longer than one character."""
    cleaned = _NON_TOKEN_CHARS.sub(" ", (text or "").lower())
    return [tok for tok in cleaned.split() if len(tok) > 1]


def term_frequency(tokens: Sequence[str]) -> Dict[str, float]:
    counts = Counter(tokens)
    n = len(tokens) or 1
    return {tok: c / n for tok, c in counts.items()}


@dataclass(frozen=True)
class Index:
    """Precomputed document vectors for one corpus."""

    documents: List[str]
    vocabulary: List[str]
    idf: np.ndarray
    doc_vectors: np.ndarray
    doc_norms: np.ndarray
    positions: Dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def dim(self) -> int:
        return len(self.vocabulary)

    def __len__(self) -> int:
        return len(self.documents)


def vectorize(tokens: Sequence[str], index: Index) -> np.ndarray:
    """Build the TF-IDF vector of ``tokens`` against the index vocabulary.

    Tokens that are not part of the vocabulary are ignored, so the
    result always has ``index.dim`` components.
    """
    return _weigh(tokens, index.positions, index.idf)


def _weigh(tokens: Sequence[str], positions: Dict[str, int], idf: np.ndarray) -> np.ndarray:
    vec = np.zeros(len(positions), dtype=np.float64)
    for tok, freq in term_frequency(tokens).items():
        pos = positions.get(tok)
        if pos is not None:
            vec[pos] = freq * idf[pos]
    return vec


def document_frequencies(doc_tokens: Iterable[Sequence[str]]) -> Counter:
    df: Counter = Counter()
    for tokens in doc_tokens:
        df.update(set(tokens))
    return df


def select_vocabulary(df: Dict[str, int], top_k: int) -> List[str]:
    """Return the ``top_k`` most frequent tokens, ties in lexicographic order."""
    ranked = sorted(df, key=lambda tok: (-df[tok], tok))
    return ranked[:top_k]


def build_index(documents: Sequence[str], top_k_vocab: int = 4000) -> Index:
    """Build the TF-IDF index for ``documents``.

    Degenerate input (no documents, or documents without any usable
    token) still yields a well formed index whose vectors are all zero.
    """
    docs = list(documents)
    doc_tokens = [tokenize(d) for d in docs]
    df = document_frequencies(doc_tokens)

    vocabulary = select_vocabulary(df, top_k_vocab)
    positions = {tok: i for i, tok in enumerate(vocabulary)}
    n_docs = max(1, len(docs))
    idf = np.array(
        [math.log(n_docs / (1 + df[tok])) for tok in vocabulary],
        dtype=np.float64,
    )

    doc_vectors = np.zeros((len(docs), len(vocabulary)), dtype=np.float64)
    for row, tokens in enumerate(doc_tokens):
        doc_vectors[row] = _weigh(tokens, positions, idf)
    doc_norms = np.linalg.norm(doc_vectors, axis=1) if docs else np.zeros(0, dtype=np.float64)

    # the index is shared read-only once built
    for arr in (idf, doc_vectors, doc_norms):
        arr.flags.writeable = False

    return Index(
        documents=docs,
        vocabulary=vocabulary,
        idf=idf,
        doc_vectors=doc_vectors,
        doc_norms=doc_norms,
        positions=positions,
    )
