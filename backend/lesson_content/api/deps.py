"""Common dependency functions for API routes."""

from typing import Generator

from fastapi import Depends, HTTPException

from lesson_content.core.config import Settings, get_settings
from lesson_content.schemas.lesson import DecodePayloadRequest, ParseLessonRequest


def get_app_settings() -> Generator:
    yield get_settings()


def _ensure_size(content: str, settings: Settings) -> str:
    if len(content) > settings.max_content_length:
        raise HTTPException(
            status_code=413,
            detail=f"Lesson content exceeds {settings.max_content_length} characters",
        )
    return content


def get_lesson_content(
    payload: ParseLessonRequest,
    settings: Settings = Depends(get_app_settings),
) -> str:
    return _ensure_size(payload.content, settings)


def get_payload_request(
    payload: DecodePayloadRequest,
    settings: Settings = Depends(get_app_settings),
) -> DecodePayloadRequest:
    _ensure_size(payload.content, settings)
    return payload
