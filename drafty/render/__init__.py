"""
Plain-text rendering of validated documents.

Design intent:
- Flatten arbitrarily overlapping style spans into disjoint runs.
- Keep marker nesting deterministic regardless of input span order.
"""
from __future__ import annotations
