from __future__ import annotations

from typing import Sequence

from ..events.model import NormalizedEvent


def suppress_duplicates(events: Sequence[NormalizedEvent], window_seconds: int) -> list[NormalizedEvent]:
    """Drop punches that follow the previously kept punch within the window.

    `events` must already be ordered by time-of-day. A punch is kept only when
    it is strictly more than `window_seconds` after the last kept one.
    """
    kept: list[NormalizedEvent] = []
    for ev in events:
        if kept and ev.seconds - kept[-1].seconds <= window_seconds:
            continue
        kept.append(ev)
    return kept
