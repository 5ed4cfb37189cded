from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import health, lesson
from .core.config import settings

logger = logging.getLogger("lesson_content.backend")
logging.basicConfig(level=settings.log_level.upper(), format="%(levelname)s %(name)s %(message)s")

app = FastAPI(title=settings.app_name)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, prefix="/api")
app.include_router(lesson.router, prefix="/api")

logger.info("Starting %s (%s)", settings.app_name, settings.environment)


__all__ = ["app"]
