"""Schemas for the lesson parsing endpoints."""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Union

from pydantic import BaseModel, Field

from lesson_content.content_models import PayloadKind


class ParseLessonRequest(BaseModel):
    content: str = Field(..., description="Raw lesson text produced by the generator")


class DecodePayloadRequest(BaseModel):
    kind: PayloadKind = Field(..., description="Tag name the payload was wrapped in")
    content: str = Field(..., description="Inner text of the payload tag")


class TextTokenSchema(BaseModel):
    type: Literal["text"] = "text"
    text: str = Field(..., description="Plain text between payloads, passed to the inline renderer")


class TableTokenSchema(BaseModel):
    type: Literal["table"] = "table"
    headers: List[str] = Field(default_factory=list, description="Column headers")
    rows: List[List[Union[str, int, float]]] = Field(
        default_factory=list,
        description="Table rows; rows may be shorter or longer than the header list.",
    )


class ChartTokenSchema(BaseModel):
    type: Literal["chart"] = "chart"
    data: Any = Field(..., description="Chart definition forwarded to the chart renderer")


class FigureSearchTokenSchema(BaseModel):
    type: Literal["figure_search"] = "figure_search"
    query: str = Field(..., description="Search query suggested for an illustrative figure")
    search_url: str = Field(..., description="Ready to open image search link for the query")


class PayloadErrorSchema(BaseModel):
    type: Literal["error"] = "error"
    kind: PayloadKind = Field(..., description="Tag name of the payload that failed")
    reason: str = Field(..., description="Why the payload could not be decoded")
    message: str = Field(..., description="Placeholder text shown instead of the payload")


TokenSchema = Annotated[
    Union[
        TextTokenSchema,
        TableTokenSchema,
        ChartTokenSchema,
        FigureSearchTokenSchema,
        PayloadErrorSchema,
    ],
    Field(discriminator="type"),
]


class Heading2Schema(BaseModel):
    type: Literal["heading2"] = "heading2"
    index: int = Field(..., description="Position of the block in the lesson, starting at 0")
    text: str = Field(..., description="Section heading text")


class Heading3Schema(BaseModel):
    type: Literal["heading3"] = "heading3"
    index: int = Field(..., description="Position of the block in the lesson, starting at 0")
    text: str = Field(..., description="Subsection heading text")


class BulletListSchema(BaseModel):
    type: Literal["bullet_list"] = "bullet_list"
    index: int = Field(..., description="Position of the block in the lesson, starting at 0")
    items: List[str] = Field(default_factory=list, description="Entries of the list in order")


class ParagraphSchema(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    index: int = Field(..., description="Position of the block in the lesson, starting at 0")
    text: str = Field(..., description="Paragraph text; single line breaks are soft breaks")


class MixedContentSchema(BaseModel):
    type: Literal["mixed_content"] = "mixed_content"
    index: int = Field(..., description="Position of the block in the lesson, starting at 0")
    tokens: List[TokenSchema] = Field(
        default_factory=list,
        description="Ordered text and payload tokens of the block",
    )


RenderItemSchema = Annotated[
    Union[
        Heading2Schema,
        Heading3Schema,
        BulletListSchema,
        ParagraphSchema,
        MixedContentSchema,
    ],
    Field(discriminator="type"),
]


class ParseLessonResponse(BaseModel):
    items: List[RenderItemSchema] = Field(default_factory=list, description="Render-ready blocks in order")
    failures: int = Field(default=0, description="Number of payloads that could not be decoded")
