from __future__ import annotations

import math

from .models import DashboardMetrics
from .state import AppState


def format_time(seconds: float) -> str:
    """Format seconds as MM:SS, or HH:MM:SS once an hour has passed."""
    h = int(seconds // 3600)
    m = int((seconds % 3600) // 60)
    s = int(seconds % 60)
    if h > 0:
        return f"{h:02d}:{m:02d}:{s:02d}"
    return f"{m:02d}:{s:02d}"


def productivity_score(total_seconds: float, pages_read: int, notes_taken: int) -> int:
    if not total_seconds:
        return 0
    minutes = total_seconds / 60
    pages_per_hour = (pages_read / minutes) * 60 if minutes > 0 else 0
    # half-up rounding
    return math.floor(pages_per_hour + notes_taken * 2 + 0.5)


def build_dashboard(state: AppState) -> DashboardMetrics:
    stats = state.stats
    notes_taken = state.get_notes_taken_count()
    return DashboardMetrics(
        total_time_seconds=stats.total_time_seconds,
        time_spent=format_time(stats.total_time_seconds),
        pages_read=stats.pages_read,
        notes_taken=notes_taken,
        productivity_score=productivity_score(
            stats.total_time_seconds, stats.pages_read, notes_taken
        ),
        books_owned=len(state.library),
    )
