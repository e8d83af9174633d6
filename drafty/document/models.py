from __future__ import annotations

"""
Typed Drafty document contracts shared by validation, rendering and preview.

Design intent:
- Keep documents immutable once validated; previews build new values.
- Use the compact wire names (`txt`/`fmt`/`ent`, `at`/`len`/`tp`/`key`) as aliases.
- Guard offset and reference invariants even for directly constructed documents.
"""

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Span start marking an entity attached to the whole document.
SENTINEL_START = -1

STRONG = "ST"
EMPHASIS = "EM"
DELETED = "DL"
CODE = "CO"
LINE_BREAK = "BR"
HIDDEN = "HD"

LINK = "LN"
MENTION = "MN"
HASHTAG = "HT"
IMAGE = "IM"
ATTACHMENT = "EX"
BUTTON = "BN"


class Span(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    start: int = Field(default=0, ge=SENTINEL_START, alias="at")
    length: int = Field(default=0, ge=0, alias="len")
    style: str | None = Field(default=None, alias="tp")
    key: int | None = Field(default=None, ge=0)

    @property
    def end(self) -> int:
        return self.start + self.length

    @property
    def is_attachment(self) -> bool:
        return self.start == SENTINEL_START

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_defaults=True)


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    type: str = Field(default="", alias="tp")
    data: Mapping[str, Any] | None = None

    @field_validator("data", mode="after")
    @classmethod
    def _freeze_data(cls, value: Mapping[str, Any] | None) -> Mapping[str, Any] | None:
        if value is None:
            return None
        return MappingProxyType(dict(value))

    def field(self, name: str) -> str:
        """Return a data field as text, or "" when data or the field is missing."""
        if not self.data:
            return ""
        value = self.data.get(name)
        if value is None:
            return ""
        return str(value)

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"tp": self.type}
        if self.data:
            payload["data"] = dict(self.data)
        return payload


class Document(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    text: str = Field(default="", alias="txt")
    spans: tuple[Span, ...] = Field(default=(), alias="fmt")
    entities: tuple[Entity, ...] = Field(default=(), alias="ent")

    @model_validator(mode="after")
    def _validate_references(self) -> "Document":
        text_length = len(self.text)
        for span in self.spans:
            if not span.is_attachment and span.end > text_length:
                raise ValueError("Document span must end within the text")
            if span.key is not None and span.key >= len(self.entities):
                raise ValueError("Document span must reference an existing entity")
        return self

    def inline_spans(self) -> list[Span]:
        return [span for span in self.spans if not span.is_attachment]

    def attachment_spans(self) -> list[Span]:
        return [span for span in self.spans if span.is_attachment]

    def entity_for(self, span: Span) -> Entity | None:
        if span.key is None:
            return None
        return self.entities[span.key]

    def to_wire(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.text:
            payload["txt"] = self.text
        if self.spans:
            payload["fmt"] = [span.to_wire() for span in self.spans]
        if self.entities:
            payload["ent"] = [entity.to_wire() for entity in self.entities]
        return payload
