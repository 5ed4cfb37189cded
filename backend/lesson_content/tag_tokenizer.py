"""Split a mixed lesson block into plain text and tagged payload tokens."""
from __future__ import annotations

import re

from .content_models import PAYLOAD_KINDS, PayloadToken, TextToken, Token

_KIND_PATTERN = "|".join(PAYLOAD_KINDS)

# The backreference keeps pairing same-name: [TABLE_DATA] only closes on [/TABLE_DATA].
_TAG_RE = re.compile(rf"\[({_KIND_PATTERN})\](.*?)\[/\1\]", re.DOTALL)
_OPEN_TAG_RE = re.compile(rf"\[(?:{_KIND_PATTERN})\]")


def has_payload_marker(text: str) -> bool:
    """Return ``True`` when ``text`` contains an opening payload marker."""

    return _OPEN_TAG_RE.search(text) is not None


def tokenize_block(text: str) -> list[Token]:
    """Return the ordered text/payload tokens of ``text``.

    Concatenating the ``raw`` of every token gives back ``text`` exactly. A
    block whose markers never pair up comes back as a single text token.
    """

    tokens: list[Token] = []
    position = 0
    for match in _TAG_RE.finditer(text):
        if match.start() > position:
            tokens.append(TextToken(raw=text[position:match.start()]))
        tokens.append(PayloadToken(kind=match.group(1), raw_inner=match.group(2)))
        position = match.end()

    if position < len(text):
        tokens.append(TextToken(raw=text[position:]))
    if not tokens:
        tokens.append(TextToken(raw=text))
    return tokens


__all__ = ["has_payload_marker", "tokenize_block"]
