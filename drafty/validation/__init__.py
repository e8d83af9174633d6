"""
Structural validation of decoded Drafty payloads.

Design intent:
- Reject malformed input before rendering or preview touches the text.
- Report the first violation with a stable error code.
"""
from __future__ import annotations
