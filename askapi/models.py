"""Pydantic models for the ask API request and response payloads.

``AskPayload`` accepts whatever the client sends as ``query`` and
coerces it to a string, so that numbers or booleans do not fail
validation.  ``AskResponse`` mirrors ``askapi.retriever.Answer``.
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, field_validator


class AskPayload(BaseModel):
    query: str = ""

    @classmethod
    def from_body(cls, body: Any) -> "AskPayload":
        """Read a request body; anything but a JSON object carries no query."""
        if isinstance(body, dict):
            return cls.model_validate(body)
        return cls()

    @field_validator("query", mode="before")
    @classmethod
    def _coerce_query(cls, value: Any) -> str:
        # empty, null, 0 and false all count as "no query"
        if not value:
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return json.dumps(value)
        return str(value)


class AskResponse(BaseModel):
    answer: Optional[str] = None
    score: Optional[float] = None
    index: Optional[int] = None


class HealthResponse(BaseModel):
    status: str
    index_ready: bool
