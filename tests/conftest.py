"""Pytest configuration and shared fixtures."""
import os
import sys

import pytest

# Ensure the project root is on path for imports
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from askapi.retriever import Retriever  # noqa: E402


FACTS = [
    "Paris is the capital of France",
    "The sun is a star",
    "Water boils at 100 degrees",
    "Cats are small mammals",
    "Python is a programming language",
]


def static_loader(documents):
    """Build a corpus loader that returns ``documents`` without any I/O."""
    calls = []

    async def load(source):
        calls.append(source)
        return list(documents)

    load.calls = calls
    return load


@pytest.fixture
def facts():
    return list(FACTS)


@pytest.fixture
def make_retriever():
    def factory(documents, **kwargs):
        return Retriever("memory://corpus", loader=static_loader(documents), **kwargs)

    return factory
