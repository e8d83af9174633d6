from __future__ import annotations

"""
Validate decoded Drafty payloads and build typed documents.

Checks run in a fixed order and the first violation is raised:
- payload/field JSON types (TypeMismatch)
- spans in list order: negative length, text bounds, entity reference
- entities in list order: `data` must be a mapping

Design intent:
- Compute the text's codepoint length once so every span check is O(1).
- Never index into the text before offsets are proven in range.
"""

import logging
from typing import Any, Mapping, Sequence

from drafty.document.models import SENTINEL_START, Document, Entity, Span
from drafty.validation.errors import (
    DanglingEntityReferenceError,
    DraftyValidationError,
    InvalidEntityDataError,
    NegativeLengthError,
    OutOfBoundsError,
    TypeMismatchError,
)

logger = logging.getLogger(__name__)


def _as_int(value: Any, *, field: str, index: int) -> int:
    # JSON decoders may hand integral numbers over as floats.
    if isinstance(value, bool):
        raise TypeMismatchError(f"Span field '{field}' must be an integer", index=index)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise TypeMismatchError(f"Span field '{field}' must be an integer", index=index)


def _as_list(value: Any, *, field: str) -> Sequence[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise TypeMismatchError(f"Document field '{field}' must be a list")
    return value


def _check_span(raw: Any, *, index: int, text_length: int, entity_count: int) -> Span:
    if not isinstance(raw, Mapping):
        raise TypeMismatchError("Span must be an object", index=index)

    start = _as_int(raw.get("at", 0), field="at", index=index)
    length = _as_int(raw.get("len", 0), field="len", index=index)

    style = raw.get("tp")
    if style is not None and not isinstance(style, str):
        raise TypeMismatchError("Span field 'tp' must be a string", index=index)
    style = style or None

    raw_key = raw.get("key")
    if raw_key is None:
        # A span without a style is an entity reference; its key defaults to the first entity.
        key = None if style else 0
    else:
        key = _as_int(raw_key, field="key", index=index)

    if length < 0:
        raise NegativeLengthError(f"Span length {length} is negative", index=index)
    if start != SENTINEL_START and (start < 0 or start + length > text_length):
        raise OutOfBoundsError(
            f"Span [{start}, {start + length}) is outside text of length {text_length}",
            index=index,
        )
    if key is not None and not 0 <= key < entity_count:
        raise DanglingEntityReferenceError(
            f"Span references entity {key} but document has {entity_count}",
            index=index,
        )
    return Span(start=start, length=length, style=style, key=key)


def _check_entity(raw: Any, *, index: int) -> Entity:
    if not isinstance(raw, Mapping):
        raise TypeMismatchError("Entity must be an object", index=index)

    entity_type = raw.get("tp", "")
    if not isinstance(entity_type, str):
        raise TypeMismatchError("Entity field 'tp' must be a string", index=index)

    data = raw.get("data")
    if data is not None and not isinstance(data, Mapping):
        raise InvalidEntityDataError("Entity field 'data' must be an object", index=index)
    return Entity(type=entity_type, data=dict(data) if data is not None else None)


def _validate(raw: Any) -> Document:
    if not isinstance(raw, Mapping):
        raise TypeMismatchError("Document must be an object")

    text = raw.get("txt")
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise TypeMismatchError("Document field 'txt' must be a string")

    raw_spans = _as_list(raw.get("fmt"), field="fmt")
    raw_entities = _as_list(raw.get("ent"), field="ent")

    text_length = len(text)
    spans = [
        _check_span(item, index=index, text_length=text_length, entity_count=len(raw_entities))
        for index, item in enumerate(raw_spans)
    ]
    entities = [_check_entity(item, index=index) for index, item in enumerate(raw_entities)]
    return Document(text=text, spans=tuple(spans), entities=tuple(entities))


def validate(raw: Any) -> Document:
    try:
        return _validate(raw)
    except DraftyValidationError as exc:
        logger.debug("drafty_rejected code=%s index=%s reason=%s", exc.code, exc.index, exc.message)
        raise
