"""Normalisation of research API output.

* ``dedupe_sources``    — keep complete citations, first occurrence per URI
* ``strip_code_fence``  — unwrap a ```json … ``` block around a JSON payload
* ``parse_json_array``  — strict parse of a JSON array into typed items
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from typing import TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from lens.errors import ParseError
from lens.models import Source

T = TypeVar("T", bound=BaseModel)

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


def dedupe_sources(sources: Iterable[Source]) -> list[Source]:
    """Drop citations missing a title or URI and de-duplicate by URI.

    Examples:
        >>> dedupe_sources([Source(title="t1", uri="u1"),
        ...                 Source(title="t2", uri="u1"),
        ...                 Source(title="t3", uri="u2")])
        [Source(title='t1', uri='u1'), Source(title='t3', uri='u2')]
    """
    seen: set[str] = set()
    unique: list[Source] = []
    for src in sources:
        if not src.title or not src.uri or src.uri in seen:
            continue
        seen.add(src.uri)
        unique.append(src)
    return unique


def strip_code_fence(text: str) -> str:
    """Return *text* without a surrounding markdown code fence, if any."""
    stripped = text.strip()
    match = _FENCE_RE.match(stripped)
    return match.group(1) if match else stripped


def parse_json_array(text: str, item_model: type[T]) -> list[T]:
    """Parse a model response that should be a JSON array of *item_model*.

    Args:
        text: Raw response text, optionally wrapped in a ```json fence.
        item_model: Pydantic model every array element must satisfy.

    Returns:
        The validated items, in response order.

    Raises:
        ParseError: On malformed JSON, a non-array payload, or any element
            that does not match *item_model*. No partial result is returned.
    """
    payload = strip_code_fence(text)
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Response was not valid JSON: {exc}") from exc

    if not isinstance(data, list):
        raise ParseError(f"Expected a JSON array, got {type(data).__name__}.")

    try:
        return TypeAdapter(list[item_model]).validate_python(data)
    except ValidationError as exc:
        raise ParseError(
            f"Response did not match the {item_model.__name__} shape: {exc}"
        ) from exc
