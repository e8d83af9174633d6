"""
HTTP surface for the Drafty pipeline.

Design intent:
- Keep request handling thin: decode, validate, render or preview, encode.
- Map validation failures to client errors with stable codes.
"""
from __future__ import annotations
