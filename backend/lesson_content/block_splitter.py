"""Turn a generated lesson into an ordered list of render-ready items."""
from __future__ import annotations

import dataclasses
import logging
import re
from typing import Optional

from .content_models import (
    Block,
    BulletList,
    Heading2,
    Heading3,
    MixedContent,
    Paragraph,
    PayloadToken,
    RenderItem,
)
from .payload_decoder import FailureSink, decode_payload
from .tag_tokenizer import has_payload_marker, tokenize_block

logger = logging.getLogger(__name__)

_BLANK_LINE_RE = re.compile(r"\n\s*\n")

_BOLD_MARKER = "**"
_HEADING3_PREFIX = "### "
_BULLET_PREFIX = "* "


def split_blocks(raw: str) -> list[Block]:
    """Split ``raw`` on blank lines into trimmed, non-empty blocks."""

    pieces = (piece.strip() for piece in _BLANK_LINE_RE.split(raw or ""))
    return [Block(text=text, index=index) for index, text in enumerate(piece for piece in pieces if piece)]


def _is_bullet_list(lines: list[str]) -> bool:
    filled = [line for line in lines if line]
    return bool(filled) and all(line.startswith(_BULLET_PREFIX) for line in filled)


def classify_block(block: Block) -> RenderItem:
    """Classify one block; blocks with payload markers are tokenized instead."""

    text = block.text
    if has_payload_marker(text):
        # A heading-shaped prefix may legitimately precede a payload.
        return MixedContent(tokens=tuple(tokenize_block(text)), index=block.index)

    if text.startswith(_BOLD_MARKER) and text.endswith(_BOLD_MARKER) and len(text) >= 4:
        return Heading2(text=text[2:-2], index=block.index)
    if text.startswith(_HEADING3_PREFIX):
        return Heading3(text=text[len(_HEADING3_PREFIX):], index=block.index)

    lines = [line.strip() for line in text.split("\n")]
    if _is_bullet_list(lines):
        items = tuple(line[len(_BULLET_PREFIX):] for line in lines if line)
        return BulletList(items=items, index=block.index)
    return Paragraph(text=text, index=block.index)


def _decode_tokens(
    item: MixedContent,
    failure_sink: Optional[FailureSink],
    search_base_url: Optional[str],
) -> MixedContent:
    tokens = []
    for token in item.tokens:
        if isinstance(token, PayloadToken):
            outcome = decode_payload(
                token.kind,
                token.raw_inner,
                failure_sink=failure_sink,
                search_base_url=search_base_url,
            )
            token = dataclasses.replace(token, outcome=outcome)
        tokens.append(token)
    return MixedContent(tokens=tuple(tokens), index=item.index)


def parse_document(
    raw: str,
    *,
    failure_sink: Optional[FailureSink] = None,
    search_base_url: Optional[str] = None,
) -> list[RenderItem]:
    """Parse a generated lesson into render items, decoding every payload.

    The parse is total: any string yields a list, and a malformed payload
    only turns into a failed outcome on its own token.
    """

    items: list[RenderItem] = []
    for block in split_blocks(raw):
        item = classify_block(block)
        if isinstance(item, MixedContent):
            item = _decode_tokens(item, failure_sink, search_base_url)
        items.append(item)

    logger.debug("Parsed lesson into %s items", len(items))
    return items


__all__ = ["classify_block", "parse_document", "split_blocks"]
