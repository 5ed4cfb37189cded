"""Endpoints that expose the lesson content parser."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from lesson_content.api.deps import get_app_settings, get_lesson_content, get_payload_request
from lesson_content.block_splitter import parse_document
from lesson_content.core.config import Settings
from lesson_content.payload_decoder import decode_payload
from lesson_content.render_builder import build_document_response, build_outcome_response, count_failures
from lesson_content.schemas.lesson import DecodePayloadRequest, ParseLessonResponse, TokenSchema

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/lesson", tags=["lesson"])


@router.post("/parse", response_model=ParseLessonResponse)
def parse_lesson(
    content: str = Depends(get_lesson_content),
    settings: Settings = Depends(get_app_settings),
) -> ParseLessonResponse:
    """Split a generated lesson into render-ready blocks."""

    items = parse_document(content, search_base_url=settings.image_search_url)
    failures = count_failures(items)
    if failures:
        logger.info("Lesson parsed with %s failed payload(s)", failures)
    return ParseLessonResponse(items=build_document_response(items), failures=failures)


@router.post("/payload", response_model=TokenSchema)
def decode_lesson_payload(
    payload: DecodePayloadRequest = Depends(get_payload_request),
    settings: Settings = Depends(get_app_settings),
) -> TokenSchema:
    """Decode a single payload outside of any lesson."""

    outcome = decode_payload(payload.kind, payload.content, search_base_url=settings.image_search_url)
    return build_outcome_response(outcome)
