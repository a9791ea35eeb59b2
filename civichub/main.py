"""CivicHub FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from civichub.api import admin, auth, comments, health, reports, ws
from civichub.core.config import settings
from civichub.core.errors import register_exception_handlers

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.web_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(reports.router)
app.include_router(comments.router)
app.include_router(admin.router)
app.include_router(ws.router)
