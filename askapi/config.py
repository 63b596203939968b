"""Application configuration using environment variables.

The settings defined here control the behaviour of the ask service.
Defaults are provided for all options so that the application can run
without a .env file, but any value can be overridden by setting
environment variables (``TOP_K_VOCAB``, ``FALLBACK_THRESHOLD`` and so
on).  See ``Settings`` for a description of each field.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Corpus source: a local JSON / text file or an http(s) URL
    corpus_path: str = "public/data.json"
    corpus_timeout: float = 10.0

    # Retrieval
    top_k_vocab: int = Field(4000, ge=0)  # limit vocab to save memory
    fallback_threshold: float = 0.12  # minimum cosine similarity for a real answer

    # Build the index at startup instead of on the first query
    warm_start: bool = False

    # Logging
    log_level: str = "INFO"


settings = Settings()
