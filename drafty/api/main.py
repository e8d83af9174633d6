from __future__ import annotations

"""
HTTP API surface for the Drafty pipeline.

Design intent:
- Keep API orchestration thin and typed.
- Delegate validation, rendering and preview to the domain modules.
- Return stable error codes so clients can tell malformed documents apart.
"""

import logging
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from drafty.document.models import Document
from drafty.internal_core.config import DraftyConfig, configure_logging, load_config
from drafty.preview.generator import preview
from drafty.render.plain_text import render
from drafty.validation.errors import DraftyValidationError
from drafty.validation.validator import validate


class DraftyContentRequest(BaseModel):
    content: Any = None


class DraftyPreviewRequest(DraftyContentRequest):
    max_length: int | None = Field(default=None, ge=0)


class DraftyValidateResponse(BaseModel):
    valid: bool
    content: dict[str, Any] = Field(default_factory=dict)


class DraftyPlainTextResponse(BaseModel):
    text: str


class DraftyPreviewResponse(BaseModel):
    content: dict[str, Any] = Field(default_factory=dict)
    max_length: int


app = FastAPI(title="drafty rendering service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_config() -> DraftyConfig:
    existing = getattr(app.state, "drafty_config", None)
    if isinstance(existing, DraftyConfig):
        return existing
    created = load_config()
    configure_logging(created)
    setattr(app.state, "drafty_config", created)
    return created


def _enforce_limits(content: Any, config: DraftyConfig) -> None:
    if not isinstance(content, dict):
        return
    spans = content.get("fmt")
    entities = content.get("ent")
    if isinstance(spans, list) and len(spans) > config.DRAFTY_MAX_SPANS:
        raise HTTPException(
            status_code=413,
            detail=f"Document has {len(spans)} spans; limit is {config.DRAFTY_MAX_SPANS}.",
        )
    if isinstance(entities, list) and len(entities) > config.DRAFTY_MAX_ENTITIES:
        raise HTTPException(
            status_code=413,
            detail=f"Document has {len(entities)} entities; limit is {config.DRAFTY_MAX_ENTITIES}.",
        )


def _validate_or_400(content: Any, *, endpoint: str) -> Document:
    _enforce_limits(content, _get_config())
    try:
        return validate(content)
    except DraftyValidationError as exc:
        logger.warning(
            "drafty_request_rejected endpoint=%s code=%s index=%s",
            endpoint,
            exc.code,
            exc.index,
        )
        raise HTTPException(status_code=400, detail=exc.as_detail()) from exc


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/drafty/validate", response_model=DraftyValidateResponse)
def drafty_validate(payload: DraftyContentRequest) -> DraftyValidateResponse:
    doc = _validate_or_400(payload.content, endpoint="validate")
    return DraftyValidateResponse(valid=True, content=doc.to_wire())


@app.post("/drafty/plain-text", response_model=DraftyPlainTextResponse)
def drafty_plain_text(payload: DraftyContentRequest) -> DraftyPlainTextResponse:
    doc = _validate_or_400(payload.content, endpoint="plain-text")
    return DraftyPlainTextResponse(text=render(doc))


@app.post("/drafty/preview", response_model=DraftyPreviewResponse)
def drafty_preview(payload: DraftyPreviewRequest) -> DraftyPreviewResponse:
    doc = _validate_or_400(payload.content, endpoint="preview")
    max_length = payload.max_length
    if max_length is None:
        max_length = _get_config().DRAFTY_PREVIEW_MAX_LENGTH
    result = preview(doc, max_length)
    return DraftyPreviewResponse(content=result.to_wire(), max_length=max_length)
