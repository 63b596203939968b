"""Main application setup for the ask service.

This module constructs the FastAPI application, configures logging and
CORS, mounts the query router and exposes a health check.  All state
is concentrated in the ``Retriever`` instance exposed in
``askapi.storage``; with ``WARM_START`` enabled its index is built
while the application starts instead of on the first query.
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from askapi import __version__
from askapi.config import settings
from askapi.models import HealthResponse
from askapi.query import query_router
from askapi.retriever import Retriever
from askapi.storage import get_retriever


# Configure logging according to settings
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    stream=sys.stdout,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.warm_start:
        # resolve it the way request handlers do, overrides included
        provider = app.dependency_overrides.get(get_retriever, get_retriever)
        await provider().ensure_index()
    yield


app = FastAPI(title="Ask (TF-IDF)", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(query_router)


@app.get("/health", response_model=HealthResponse)
def health(retriever: Retriever = Depends(get_retriever)) -> HealthResponse:
    """Return a simple health status."""
    return HealthResponse(status="ok", index_ready=retriever.is_ready)
