from __future__ import annotations

"""
Flatten overlapping style spans into disjoint runs.

Design intent:
- Handle crossing (non-nested) spans with an interval sweep instead of nested nodes.
- Label each run with its active styles in one canonical priority order.
- Let the renderer open/close markers from run to run without ever mis-nesting.
"""

from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Sequence

from drafty.document.models import CODE, DELETED, EMPHASIS, STRONG, Span

# Outermost first. Markers always nest in this order, whatever order spans arrive in.
STYLE_PRIORITY: tuple[str, ...] = (DELETED, STRONG, EMPHASIS, CODE)

STYLE_MARKERS: dict[str, str] = {
    DELETED: "~",
    STRONG: "*",
    EMPHASIS: "_",
    CODE: "`",
}


@dataclass(frozen=True)
class Run:
    start: int
    end: int
    styles: tuple[str, ...]


def _style_events(spans: Sequence[Span]) -> list[tuple[int, int, str]]:
    events: list[tuple[int, int, str]] = []
    for span in spans:
        if span.is_attachment or span.length <= 0 or span.style not in STYLE_MARKERS:
            continue
        events.append((span.start, 1, span.style))
        events.append((span.end, -1, span.style))
    # Ends sort before starts at the same offset.
    events.sort(key=lambda item: (item[0], item[1]))
    return events


def resolve_runs(
    text_length: int,
    spans: Sequence[Span],
    *,
    cuts: Iterable[int] = (),
) -> list[Run]:
    """Split `[0, text_length)` into runs with a stable set of active styles.

    `cuts` adds boundary points without changing styles; the renderer uses it to
    align runs with entity substitutions. Runs are never empty and their
    concatenation covers the whole text.
    """
    events = _style_events(spans)
    points = {0, text_length}
    points.update(offset for offset, _, _ in events)
    points.update(cut for cut in cuts if 0 <= cut <= text_length)
    ordered = sorted(points)

    active: Counter[str] = Counter()
    runs: list[Run] = []
    cursor = 0
    for start, end in zip(ordered, ordered[1:]):
        while cursor < len(events) and events[cursor][0] <= start:
            _, delta, style = events[cursor]
            active[style] += delta
            cursor += 1
        styles = tuple(style for style in STYLE_PRIORITY if active[style] > 0)
        runs.append(Run(start=start, end=end, styles=styles))
    return runs


def shared_prefix(open_styles: tuple[str, ...], wanted: tuple[str, ...]) -> tuple[str, ...]:
    keep = 0
    while keep < len(open_styles) and keep < len(wanted) and open_styles[keep] == wanted[keep]:
        keep += 1
    return open_styles[:keep]


def transition_markers(open_styles: tuple[str, ...], wanted: tuple[str, ...]) -> str:
    """Markup that turns the open marker stack into `wanted`.

    Both tuples are in canonical priority order. The shared prefix stays open;
    everything above it is closed innermost first and the rest of `wanted` is opened.
    """
    keep = len(shared_prefix(open_styles, wanted))
    closing = "".join(STYLE_MARKERS[style] for style in reversed(open_styles[keep:]))
    opening = "".join(STYLE_MARKERS[style] for style in wanted[keep:])
    return closing + opening
