"""
Document model boundary.

Design intent:
- Keep the decoded text/span/entity shape explicit and immutable.
- Own the wire encoding so previews can be re-sent as-is.
"""
from __future__ import annotations
