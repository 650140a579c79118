from datetime import datetime

from speakwell.core.models import AnalysisMetrics, AnalysisResult, HistoryEntry
from speakwell.formatting import (
    format_clock,
    format_duration,
    format_entry_date,
    format_entry_details,
    format_history_row,
    format_level_meter,
    format_timer_line,
)


def _entry():
    return HistoryEntry(
        id="1760778000000",
        date=datetime(2026, 10, 18, 14, 5),
        duration=75,
        location="/tmp/a.wav",
        transcript="Hello world. This is a test.",
        analysis=AnalysisResult(
            score=5.0,
            feedback="Try to speak more.",
            metrics=AnalysisMetrics(word_count=6, sentence_count=2, avg_words_per_sentence=3.0),
        ),
    )


def test_clock_and_duration():
    assert format_clock(0) == "00:00"
    assert format_clock(59) == "00:59"
    assert format_clock(60) == "01:00"
    assert format_duration(45) == "0:45"
    assert format_duration(75) == "1:15"


def test_entry_date():
    assert format_entry_date(datetime(2026, 10, 18, 14, 5)) == "Oct 18, 2026 14:05"


def test_history_row():
    row = format_history_row(_entry())
    assert row.startswith("1760778000000  Oct 18, 2026 14:05")
    assert "Score: 5.0/10" in row
    assert "Duration: 1:15" in row
    assert "Words: 6" in row


def test_entry_details():
    details = format_entry_details(_entry())
    assert "Hello world. This is a test." in details
    assert "Try to speak more." in details
    assert "Avg. Words per Sentence: 3.0" in details


def test_level_meter():
    assert format_level_meter(0) == "[          ]"
    assert format_level_meter(32767) == "[##########]"
    assert format_level_meter(16384, width=4) == "[##  ]"
    assert format_level_meter(40000, width=4) == "[####]"


def test_timer_line_shows_meter_and_minimum_hint():
    line = format_timer_line(12, 30, level=32767)
    assert line.startswith("⏺ 00:12 [##########]")
    assert "(Minimum 30 seconds required)" in line

    assert format_timer_line(30, 30) == "⏺ 00:30 [          ]"
