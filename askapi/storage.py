"""Singleton instance of the corpus retriever.

This module instantiates the ``Retriever`` with configuration values
from ``askapi.config.settings``.  Importing from this module
guarantees that all request handlers share the same lazily built
index.  Handlers reach it through ``get_retriever`` so tests can swap
it out with ``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import partial

from askapi.config import settings
from askapi.corpus import load_corpus
from askapi.retriever import Retriever

# Created on first import; the index itself is only built on first use.
retriever = Retriever(
    settings.corpus_path,
    top_k_vocab=settings.top_k_vocab,
    fallback_threshold=settings.fallback_threshold,
    loader=partial(load_corpus, timeout=settings.corpus_timeout),
)


def get_retriever() -> Retriever:
    return retriever
