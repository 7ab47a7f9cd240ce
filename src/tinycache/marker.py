from __future__ import annotations

import html
from datetime import UTC, datetime

_MARKER_TPL = "<!-- Cached content generated by tinycache on {} -->"


def generation_marker(now: datetime | None = None) -> str:
    """HTML comment appended to stored values. Never parsed back."""
    now = now or datetime.now(UTC)
    return _MARKER_TPL.format(html.escape(now.isoformat(timespec="seconds")))
