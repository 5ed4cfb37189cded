"""Repair and decode the JSON payloads embedded in generated lessons."""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Callable, Optional
from urllib.parse import urlencode

from .content_models import (
    Cell,
    ChartData,
    DecodeOutcome,
    Decoded,
    Failed,
    FigureSearch,
    PayloadKind,
    PayloadValue,
    TableData,
)

logger = logging.getLogger(__name__)

FailureSink = Callable[[PayloadKind, str, str], None]

DEFAULT_IMAGE_SEARCH_URL = "https://www.google.com/search?tbm=isch"

INVALID_JSON = "invalid JSON"
MISSING_TABLE_FIELDS = "missing headers or rows"
MISSING_QUERY = "missing query"
UNSUPPORTED_KIND = "unsupported payload kind"

_LEADING_FENCE_RE = re.compile(r"^```[\w+-]*\s*")
_TRAILING_FENCE_RE = re.compile(r"\s*```$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


class PayloadDecodeFailure(ValueError):
    """Raised when a parsed payload does not have the shape its kind needs."""

    def __init__(self, kind: str, reason: str) -> None:
        super().__init__(f"{kind}: {reason}")
        self.kind = kind
        self.reason = reason


def log_failure(kind: PayloadKind, raw_inner: str, reason: str) -> None:
    """Default failure sink: log the failed payload with its original text."""

    logger.warning("Failed to parse %s payload (%s). Original string: %r", kind, reason, raw_inner)


def repair_payload_json(raw_inner: str) -> str:
    """Apply the low-risk fixes for common generation artifacts.

    Strips surrounding whitespace and code fences and drops trailing commas
    before ``}`` or ``]``. Nothing else is rewritten: escape sequences such
    as ``\\"`` must reach the JSON parser untouched.
    """

    text = raw_inner.strip()
    text = _LEADING_FENCE_RE.sub("", text)
    text = _TRAILING_FENCE_RE.sub("", text)
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def build_search_url(query: str, base_url: str = DEFAULT_IMAGE_SEARCH_URL) -> str:
    separator = "&" if "?" in base_url else "?"
    return f"{base_url}{separator}{urlencode({'q': query})}"


def _to_cell(value: Any) -> Cell:
    if value is None:
        return ""
    if isinstance(value, (bool, dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return value


def _to_header(value: Any) -> str:
    cell = _to_cell(value)
    return cell if isinstance(cell, str) else str(cell)


def _decode_table(data: Any) -> TableData:
    if not isinstance(data, dict):
        raise PayloadDecodeFailure("TABLE_DATA", MISSING_TABLE_FIELDS)
    headers = data.get("headers")
    rows = data.get("rows")
    if not isinstance(headers, list) or not isinstance(rows, list):
        raise PayloadDecodeFailure("TABLE_DATA", MISSING_TABLE_FIELDS)

    # Ragged rows are kept as they are; a scalar row becomes a one-cell row.
    normalized_rows = tuple(
        tuple(_to_cell(cell) for cell in row) if isinstance(row, list) else (_to_cell(row),)
        for row in rows
    )
    return TableData(headers=tuple(_to_header(header) for header in headers), rows=normalized_rows)


def _decode_search(data: Any, search_base_url: str) -> FigureSearch:
    query = data.get("query") if isinstance(data, dict) else None
    if not isinstance(query, str) or not query.strip():
        raise PayloadDecodeFailure("SEARCH_PROMPT", MISSING_QUERY)
    query = query.strip()
    return FigureSearch(query=query, search_url=build_search_url(query, search_base_url))


def _build_value(kind: str, data: Any, search_base_url: str) -> PayloadValue:
    if kind == "TABLE_DATA":
        return _decode_table(data)
    if kind == "CHART_DATA":
        return ChartData(spec=data)
    if kind == "SEARCH_PROMPT":
        return _decode_search(data, search_base_url)
    raise PayloadDecodeFailure(kind, UNSUPPORTED_KIND)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"{literal} overflows a float")
    return value


def _notify(sink: FailureSink, kind: PayloadKind, raw_inner: str, reason: str) -> None:
    try:
        sink(kind, raw_inner, reason)
    except Exception:
        logger.exception("Failure sink raised while reporting a %s payload", kind)


def decode_payload(
    kind: PayloadKind,
    raw_inner: str,
    *,
    failure_sink: Optional[FailureSink] = None,
    search_base_url: Optional[str] = None,
) -> DecodeOutcome:
    """Turn the inner text of one payload tag into its structured shape.

    Every call returns a :class:`Decoded` or :class:`Failed` value; failures
    are reported to ``failure_sink`` (logging by default) and never raised.
    """

    sink = failure_sink or log_failure
    repaired = repair_payload_json(raw_inner)
    try:
        data = json.loads(
            repaired,
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )
    except (ValueError, RecursionError) as exc:
        logger.debug("Payload %s is not valid JSON after repair: %s", kind, exc)
        _notify(sink, kind, raw_inner, INVALID_JSON)
        return Failed(kind=kind, reason=INVALID_JSON)

    try:
        value = _build_value(kind, data, search_base_url or DEFAULT_IMAGE_SEARCH_URL)
    except PayloadDecodeFailure as exc:
        _notify(sink, kind, raw_inner, exc.reason)
        return Failed(kind=kind, reason=exc.reason)
    return Decoded(kind=kind, value=value)


__all__ = [
    "DEFAULT_IMAGE_SEARCH_URL",
    "FailureSink",
    "PayloadDecodeFailure",
    "build_search_url",
    "decode_payload",
    "log_failure",
    "repair_payload_json",
]
