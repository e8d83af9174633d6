from __future__ import annotations

"""
Build truncated, size-bounded previews of validated Drafty documents.

Steps:
1. Keep the first `max_length` codepoints of text.
2. Keep spans starting before the cut, clipped to it; keep whole-document attachments.
3. Keep only entities still referenced, in first-reference order.
4. Renumber entity keys densely from 0.
5. Reduce each entity's data to the lightweight fields listed in PREVIEW_FIELDS.
"""

from typing import Any, Mapping

from drafty.document.models import (
    ATTACHMENT,
    BUTTON,
    HASHTAG,
    IMAGE,
    LINK,
    MENTION,
    Document,
    Entity,
    Span,
)

# Data fields that survive into a preview, per entity type. Types not listed keep no data.
PREVIEW_FIELDS: dict[str, frozenset[str]] = {
    LINK: frozenset({"url"}),
    MENTION: frozenset({"val"}),
    HASHTAG: frozenset({"val"}),
    IMAGE: frozenset({"mime", "name", "width", "height", "size"}),
    ATTACHMENT: frozenset({"mime", "name", "size"}),
    BUTTON: frozenset({"name", "act", "val", "ref"}),
}


def strip_entity_data(entity: Entity) -> Entity:
    allowed = PREVIEW_FIELDS.get(entity.type, frozenset())
    data: Mapping[str, Any] = entity.data or {}
    kept = {name: value for name, value in data.items() if name in allowed}
    return Entity(type=entity.type, data=kept or None)


def _clip_span(span: Span, max_length: int, text_length: int) -> Span | None:
    if span.is_attachment:
        return span
    # A zero-length span at the very end survives when nothing was cut off.
    if span.start > max_length or (span.start == max_length and max_length < text_length):
        return None
    length = min(span.length, max_length - span.start)
    if length == span.length:
        return span
    return span.model_copy(update={"length": length})


def preview(doc: Document, max_length: int) -> Document:
    if max_length < 0:
        raise ValueError("max_length must be >= 0")

    clipped = [span for span in (_clip_span(item, max_length, len(doc.text)) for item in doc.spans) if span is not None]

    remap: dict[int, int] = {}
    entities: list[Entity] = []
    spans: list[Span] = []
    for span in clipped:
        if span.key is None:
            spans.append(span)
            continue
        if span.key not in remap:
            remap[span.key] = len(entities)
            entities.append(strip_entity_data(doc.entities[span.key]))
        new_key = remap[span.key]
        spans.append(span if new_key == span.key else span.model_copy(update={"key": new_key}))

    return Document(
        text=doc.text[:max_length],
        spans=tuple(spans),
        entities=tuple(entities),
    )
