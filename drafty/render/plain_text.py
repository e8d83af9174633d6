from __future__ import annotations

"""
Render a validated Drafty document as plain text with inline markers.

Design intent:
- Styled text is wrapped with `~`, `*`, `_` and backtick markers via resolved runs.
- Entity spans and void styles (line break, hidden) replace their covered text.
- Whole-document attachments are appended after the text.
"""

from dataclasses import dataclass
from typing import Callable

from drafty.document.models import (
    ATTACHMENT,
    BUTTON,
    HASHTAG,
    HIDDEN,
    IMAGE,
    LINE_BREAK,
    LINK,
    MENTION,
    Document,
    Entity,
    Span,
)
from drafty.render.spans import resolve_runs, shared_prefix, transition_markers

VOID_STYLES: dict[str, str] = {
    LINE_BREAK: "\n",
    HIDDEN: "",
}


def _render_link(text: str, entity: Entity) -> str:
    url = entity.field("url")
    if not text:
        return url
    if not url or url == text:
        return text
    return f"[{text}]({url})"


def _render_image(text: str, entity: Entity) -> str:
    _ = text
    return f"[IMAGE '{entity.field('name')}']"


def _render_attachment(text: str, entity: Entity) -> str:
    _ = text
    return f"[FILE '{entity.field('name')}']"


def _render_mention(text: str, entity: Entity) -> str:
    if text:
        return text
    name = entity.field("name") or entity.field("val")
    if not name or name.startswith("@"):
        return name
    return f"@{name}"


def _render_hashtag(text: str, entity: Entity) -> str:
    if text:
        return text
    tag = entity.field("val")
    if not tag or tag.startswith("#"):
        return tag
    return f"#{tag}"


def _render_button(text: str, entity: Entity) -> str:
    return f"[ {text or entity.field('name')} ]"


ENTITY_RENDERERS: dict[str, Callable[[str, Entity], str]] = {
    LINK: _render_link,
    IMAGE: _render_image,
    ATTACHMENT: _render_attachment,
    MENTION: _render_mention,
    HASHTAG: _render_hashtag,
    BUTTON: _render_button,
}


def render_entity(text: str, entity: Entity) -> str:
    renderer = ENTITY_RENDERERS.get(entity.type)
    if renderer is None:
        return text
    return renderer(text, entity)


@dataclass(frozen=True)
class _Substitution:
    start: int
    end: int
    output: str


def _substitution_for(doc: Document, span: Span) -> _Substitution | None:
    entity = doc.entity_for(span)
    covered = doc.text[span.start : span.end]
    if entity is not None:
        return _Substitution(span.start, span.end, render_entity(covered, entity))
    if span.style in VOID_STYLES:
        return _Substitution(span.start, span.end, VOID_STYLES[span.style])
    return None


def _collect_substitutions(doc: Document) -> list[_Substitution]:
    candidates: list[tuple[int, bool, int, int, _Substitution]] = []
    for order, span in enumerate(doc.inline_spans()):
        substitution = _substitution_for(doc, span)
        if substitution is not None:
            candidates.append((span.start, span.length > 0, -span.length, order, substitution))
    # Zero-length substitutions go before a longer one starting at the same offset.
    candidates.sort(key=lambda item: item[:4])

    chosen: list[_Substitution] = []
    covered_until = 0
    for *_, substitution in candidates:
        # Overlapping a previously chosen substitution: the earlier, longer one wins.
        if chosen and substitution.start < covered_until:
            continue
        chosen.append(substitution)
        covered_until = max(covered_until, substitution.end)
    return chosen


def render(doc: Document) -> str:
    substitutions = _collect_substitutions(doc)
    cuts = [point for item in substitutions for point in (item.start, item.end)]
    runs = resolve_runs(len(doc.text), doc.spans, cuts=cuts)

    pieces: list[str] = []
    open_styles: tuple[str, ...] = ()
    pending = 0

    def flush_empty_substitutions(offset: int) -> None:
        nonlocal pending
        while pending < len(substitutions) and substitutions[pending].start <= offset:
            item = substitutions[pending]
            if item.start < item.end:
                break
            pieces.append(item.output)
            pending += 1

    def substitution_end(offset: int) -> int | None:
        index = pending
        while index < len(substitutions) and substitutions[index].start == offset:
            if substitutions[index].end > offset:
                return substitutions[index].end
            index += 1
        return None

    for index, run in enumerate(runs):
        if pending < len(substitutions) and substitutions[pending].start == run.start:
            # Substitutions only sit inside styles that continue across them.
            end = substitution_end(run.start) or run.end
            kept = open_styles
            cursor = index
            while cursor < len(runs) and runs[cursor].start < end:
                kept = shared_prefix(kept, runs[cursor].styles)
                cursor += 1
            pieces.append(transition_markers(open_styles, kept))
            open_styles = kept
        flush_empty_substitutions(run.start)
        if pending < len(substitutions) and substitutions[pending].start <= run.start:
            current = substitutions[pending]
            if run.start == current.start:
                pieces.append(current.output)
            if run.end >= current.end:
                pending += 1
            continue
        pieces.append(transition_markers(open_styles, run.styles))
        open_styles = run.styles
        pieces.append(doc.text[run.start : run.end])

    pieces.append(transition_markers(open_styles, ()))
    flush_empty_substitutions(len(doc.text))

    for span in doc.attachment_spans():
        entity = doc.entity_for(span)
        if entity is not None:
            pieces.append(render_entity("", entity))
    return "".join(pieces)
