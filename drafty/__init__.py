"""
Drafty rich-text rendering package.

Design intent:
- Validate decoded Drafty payloads before any text indexing happens.
- Render documents to a compact plain-text form with inline markers.
- Produce size-bounded previews that stay valid, re-encodable documents.
"""
from __future__ import annotations

from typing import Any

from drafty.document.models import Document, Entity, Span
from drafty.preview.generator import preview
from drafty.render.plain_text import render
from drafty.validation.errors import DraftyValidationError
from drafty.validation.validator import validate


def to_plain_text(raw: Any) -> str:
    return render(validate(raw))


def make_preview(raw: Any, max_length: int) -> dict[str, Any]:
    return preview(validate(raw), max_length).to_wire()


__all__ = [
    "Document",
    "DraftyValidationError",
    "Entity",
    "Span",
    "make_preview",
    "preview",
    "render",
    "to_plain_text",
    "validate",
]
