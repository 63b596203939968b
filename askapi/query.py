"""API endpoint for asking the corpus.

This router exposes ``POST /api/ask`` which accepts a JSON body with a
``query`` field, looks up the most similar corpus document through the
shared ``Retriever`` and returns it together with its cosine score and
position.  When nothing is similar enough a canned fallback phrase is
returned instead; an empty query short-circuits to ``{"answer": null}``.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from askapi.models import AskPayload, AskResponse
from askapi.retriever import Retriever
from askapi.storage import get_retriever

log = logging.getLogger("api.query")

query_router = APIRouter(prefix="/api", tags=["query"])


@query_router.post("/ask", response_model=AskResponse, response_model_exclude_unset=True)
async def ask(
    body: Any = Body(None),
    retriever: Retriever = Depends(get_retriever),
) -> AskResponse:
    """Answer the body's ``query`` with the closest corpus document."""
    query = AskPayload.from_body(body).query
    if not query:
        return AskResponse(answer=None)

    result = await retriever.answer(query)
    log.debug(f"query={query!r} -> index={result.index} score={result.score}")
    return AskResponse(answer=result.answer, score=result.score, index=result.index)
