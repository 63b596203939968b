"""Loading and normalisation of the answer corpus.

The corpus is a single file (or URL) holding either a JSON array or
plain newline-delimited text.  JSON elements are either strings, used
verbatim, or question/answer objects using the keys ``q``/``question``
and ``a``/``answer``.  Every element is normalised at load time into a
``CorpusEntry`` so that the rest of the application only deals with
document strings.

Loading never fails: a missing file or an unreachable URL is logged and
treated as an empty corpus.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional, Union

import httpx

log = logging.getLogger("api.corpus")

QA_SEPARATOR = "\n---\n"


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class QAPair:
    question: str
    answer: str

    @property
    def text(self) -> str:
        if self.question and self.answer:
            return self.question + QA_SEPARATOR + self.answer
        return self.answer or self.question or ""


CorpusEntry = Union[PlainText, QAPair]


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    # same spelling as the JSON source for booleans
    if isinstance(value, bool):
        return json.dumps(value)
    return str(value)


def _first_value(obj: dict, *keys: str) -> str:
    for key in keys:
        value = obj.get(key)
        if value:
            return _as_text(value)
    return ""


def normalize_entry(value: Any) -> CorpusEntry:
    """Turn one raw JSON element into a ``CorpusEntry``."""
    if isinstance(value, str):
        return PlainText(value)
    if isinstance(value, dict):
        return QAPair(
            question=_first_value(value, "q", "question"),
            answer=_first_value(value, "a", "answer"),
        )
    if isinstance(value, list):
        # arrays carry none of the recognised keys
        return QAPair(question="", answer="")
    if value is None or isinstance(value, bool):
        return PlainText(json.dumps(value))
    return PlainText(str(value))


def parse_lines(raw: str) -> List[CorpusEntry]:
    lines = (ln.strip() for ln in re.split(r"\r?\n", raw))
    return [PlainText(ln) for ln in lines if ln]


def parse_corpus(raw: str) -> List[CorpusEntry]:
    """Parse raw corpus contents as a JSON array, else as plain text lines."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        log.warning("Corpus is not valid JSON; reading it as newline-delimited text.")
        return parse_lines(raw)
    if not isinstance(data, list):
        log.warning(f"Corpus JSON is a {type(data).__name__}, not an array; reading it as text.")
        return parse_lines(raw)
    return [normalize_entry(item) for item in data]


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _read_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


async def read_source(
    source: str,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Return the raw contents of ``source``, or ``"[]"`` if it cannot be read."""
    if _is_url(source):
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
                r = await client.get(source)
                r.raise_for_status()
                return r.text
        except (httpx.HTTPError, httpx.InvalidURL) as ex:
            log.error(f"Corpus could not be fetched from {source}: {ex}")
            return "[]"
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, _read_file, source)
    except (OSError, UnicodeDecodeError) as ex:
        log.error(f"Corpus file {source} could not be read: {ex}")
        return "[]"


async def load_corpus(
    source: str,
    timeout: float = 10.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[str]:
    """Load ``source`` and return the document texts in corpus order."""
    raw = await read_source(source, timeout=timeout, transport=transport)
    entries = parse_corpus(raw)
    log.info(f"Loaded {len(entries)} corpus entries from {source}")
    return [entry.text for entry in entries]
