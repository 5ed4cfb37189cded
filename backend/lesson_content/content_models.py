"""Common content model definitions shared by the lesson parser stages."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Literal, Union

BlockKind = Literal["heading2", "heading3", "bullet_list", "paragraph", "mixed_content"]
PayloadKind = Literal["TABLE_DATA", "CHART_DATA", "SEARCH_PROMPT"]

PAYLOAD_KINDS: tuple[PayloadKind, ...] = ("TABLE_DATA", "CHART_DATA", "SEARCH_PROMPT")

Cell = Union[str, int, float]


@dataclass(frozen=True, slots=True)
class Block:
    """Blank-line delimited unit of a generated lesson.

    Parameters
    ----------
    text:
        Trimmed block text.
    index:
        Zero-based position of the block in the document.
    """

    text: str
    index: int


# ---------------------------------------------------------------------------
# Decoded payload shapes
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class TableData:
    headers: tuple[str, ...]
    rows: tuple[tuple[Cell, ...], ...]


@dataclass(frozen=True, slots=True)
class ChartData:
    """Chart definition forwarded untouched to the chart renderer."""

    spec: Any


@dataclass(frozen=True, slots=True)
class FigureSearch:
    query: str
    search_url: str


PayloadValue = Union[TableData, ChartData, FigureSearch]


_PLACEHOLDERS: dict[str, str] = {
    "TABLE_DATA": "Could not display the table.",
    "CHART_DATA": "Could not display the chart.",
    "SEARCH_PROMPT": "Could not process the figure search suggestion.",
}


@dataclass(frozen=True, slots=True)
class Decoded:
    kind: PayloadKind
    value: PayloadValue

    ok: ClassVar[bool] = True


@dataclass(frozen=True, slots=True)
class Failed:
    """Payload that could not be turned into its structured shape."""

    kind: PayloadKind
    reason: str

    ok: ClassVar[bool] = False

    @property
    def placeholder(self) -> str:
        """Message shown in place of the payload."""

        return _PLACEHOLDERS.get(self.kind, "Could not display this content.")


DecodeOutcome = Union[Decoded, Failed]


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class TextToken:
    raw: str


@dataclass(frozen=True, slots=True)
class PayloadToken:
    """Tagged payload span found inside a mixed block.

    ``outcome`` stays ``None`` until the payload has been decoded.
    """

    kind: PayloadKind
    raw_inner: str
    outcome: DecodeOutcome | None = None

    @property
    def raw(self) -> str:
        return f"[{self.kind}]{self.raw_inner}[/{self.kind}]"


Token = Union[TextToken, PayloadToken]


# ---------------------------------------------------------------------------
# Render items
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Heading2:
    text: str
    index: int

    kind: ClassVar[BlockKind] = "heading2"


@dataclass(frozen=True, slots=True)
class Heading3:
    text: str
    index: int

    kind: ClassVar[BlockKind] = "heading3"


@dataclass(frozen=True, slots=True)
class BulletList:
    items: tuple[str, ...]
    index: int

    kind: ClassVar[BlockKind] = "bullet_list"


@dataclass(frozen=True, slots=True)
class Paragraph:
    """Fallback block; single line breaks are kept as soft breaks."""

    text: str
    index: int

    kind: ClassVar[BlockKind] = "paragraph"


@dataclass(frozen=True, slots=True)
class MixedContent:
    tokens: tuple[Token, ...]
    index: int

    kind: ClassVar[BlockKind] = "mixed_content"

    @property
    def raw(self) -> str:
        return "".join(token.raw for token in self.tokens)


RenderItem = Union[Heading2, Heading3, BulletList, Paragraph, MixedContent]


__all__ = [
    "PAYLOAD_KINDS",
    "Block",
    "BlockKind",
    "BulletList",
    "Cell",
    "ChartData",
    "DecodeOutcome",
    "Decoded",
    "Failed",
    "FigureSearch",
    "Heading2",
    "Heading3",
    "MixedContent",
    "Paragraph",
    "PayloadKind",
    "PayloadToken",
    "PayloadValue",
    "RenderItem",
    "TableData",
    "TextToken",
    "Token",
]
