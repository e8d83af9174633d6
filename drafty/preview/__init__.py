"""
Size-bounded previews of validated documents.

Design intent:
- Truncate text and spans without leaving dangling entity references.
- Strip heavy entity payloads so previews fit in notifications.
"""
from __future__ import annotations
