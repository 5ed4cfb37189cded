"""Helpers for converting parser results into API schemas."""
from __future__ import annotations

from typing import Sequence

from .content_models import (
    BulletList,
    ChartData,
    Decoded,
    DecodeOutcome,
    FigureSearch,
    Heading2,
    Heading3,
    MixedContent,
    PayloadToken,
    RenderItem,
    TableData,
    Token,
)
from .schemas.lesson import (
    BulletListSchema,
    ChartTokenSchema,
    FigureSearchTokenSchema,
    Heading2Schema,
    Heading3Schema,
    MixedContentSchema,
    ParagraphSchema,
    PayloadErrorSchema,
    RenderItemSchema,
    TableTokenSchema,
    TextTokenSchema,
    TokenSchema,
)


def build_outcome_response(outcome: DecodeOutcome) -> TokenSchema:
    """Convert a decode outcome to the schema handed to a payload renderer."""

    if not isinstance(outcome, Decoded):
        return PayloadErrorSchema(
            kind=outcome.kind,
            reason=outcome.reason,
            message=outcome.placeholder,
        )
    value = outcome.value
    if isinstance(value, TableData):
        return TableTokenSchema(headers=list(value.headers), rows=[list(row) for row in value.rows])
    if isinstance(value, FigureSearch):
        return FigureSearchTokenSchema(query=value.query, search_url=value.search_url)
    if isinstance(value, ChartData):
        return ChartTokenSchema(data=value.spec)
    raise TypeError(f"Unexpected payload value: {value!r}")


def _make_token(token: Token) -> TokenSchema:
    if isinstance(token, PayloadToken):
        if token.outcome is None:
            raise ValueError(f"{token.kind} payload was never decoded")
        return build_outcome_response(token.outcome)
    return TextTokenSchema(text=token.raw)


def _make_item(item: RenderItem) -> RenderItemSchema:
    if isinstance(item, MixedContent):
        return MixedContentSchema(index=item.index, tokens=[_make_token(token) for token in item.tokens])
    if isinstance(item, BulletList):
        return BulletListSchema(index=item.index, items=list(item.items))
    if isinstance(item, Heading2):
        return Heading2Schema(index=item.index, text=item.text)
    if isinstance(item, Heading3):
        return Heading3Schema(index=item.index, text=item.text)
    return ParagraphSchema(index=item.index, text=item.text)


def build_document_response(items: Sequence[RenderItem]) -> list[RenderItemSchema]:
    """Convert parsed render items to their API response schemas."""

    return [_make_item(item) for item in items]


def count_failures(items: Sequence[RenderItem]) -> int:
    """Return how many payloads across ``items`` failed to decode."""

    return sum(
        1
        for item in items
        if isinstance(item, MixedContent)
        for token in item.tokens
        if isinstance(token, PayloadToken) and token.outcome is not None and not token.outcome.ok
    )


__all__ = ["build_document_response", "build_outcome_response", "count_failures"]
