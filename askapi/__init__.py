"""TF-IDF question answering over a small static corpus."""

__version__ = "0.1.0"
