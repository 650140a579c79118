"""Display helpers for timers and history rows."""

from __future__ import annotations

from datetime import datetime

from .core.models import HistoryEntry


def format_clock(seconds: int) -> str:
    """Format seconds as ``MM:SS`` for the live recording timer."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins:02d}:{secs:02d}"


def format_duration(seconds: int) -> str:
    """Format seconds as ``M:SS`` for history rows."""
    mins, secs = divmod(max(0, int(seconds)), 60)
    return f"{mins}:{secs:02d}"


def format_entry_date(date: datetime) -> str:
    """Format a timestamp like ``Oct 18, 2026 14:05`` in local time."""
    if date.tzinfo is not None:
        date = date.astimezone()
    return date.strftime("%b %d, %Y %H:%M")


def format_history_row(entry: HistoryEntry) -> str:
    return (
        f"{entry.id}  {format_entry_date(entry.date)}  "
        f"Score: {entry.analysis.score_text}/10  "
        f"Duration: {format_duration(entry.duration)}  "
        f"Words: {entry.analysis.metrics.word_count}"
    )


def format_entry_details(entry: HistoryEntry) -> str:
    metrics = entry.analysis.metrics
    return "\n".join(
        [
            format_entry_date(entry.date),
            "",
            "Transcription",
            entry.transcript,
            "",
            f"Score: {entry.analysis.score_text}/10",
            "",
            "Feedback",
            entry.analysis.feedback,
            "",
            "Detailed Metrics",
            f"  Word Count: {metrics.word_count}",
            f"  Sentence Count: {metrics.sentence_count}",
            f"  Avg. Words per Sentence: {metrics.avg_words_per_sentence:.1f}",
        ]
    )


def format_level_meter(level: int, width: int = 10) -> str:
    """Render a 16-bit input peak as a fixed-width bar, e.g. ``[#####     ]``."""
    level = min(max(0, int(level)), 32767)
    filled = round(level / 32767 * width)
    return "[" + "#" * filled + " " * (width - filled) + "]"


def format_timer_line(elapsed: int, min_seconds: int, level: int = 0) -> str:
    """The live ``record`` status line: clock, input meter, minimum hint."""
    hint = f"  (Minimum {min_seconds} seconds required)" if elapsed < min_seconds else ""
    return f"⏺ {format_clock(elapsed)} {format_level_meter(level)}{hint}"
