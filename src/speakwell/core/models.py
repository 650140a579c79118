"""Value objects produced by a recording session."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CapturedAudio:
    """A finished recording that can be handed to processing.

    Attributes:
        location: Path or URI of the audio file (a reference, not ownership)
        duration_seconds: Elapsed seconds at the moment the session stopped
        recovered: True when the hardware stop failed but the file was usable
    """

    location: str
    duration_seconds: int
    recovered: bool = False


@dataclass(frozen=True)
class AnalysisMetrics:
    word_count: int
    sentence_count: int
    avg_words_per_sentence: float

    def to_dict(self) -> dict:
        return {
            "word_count": self.word_count,
            "sentence_count": self.sentence_count,
            "avg_words_per_sentence": self.avg_words_per_sentence,
        }

    @classmethod
    def from_dict(cls, data: dict) -> AnalysisMetrics:
        return cls(
            word_count=int(data["word_count"]),
            sentence_count=int(data["sentence_count"]),
            avg_words_per_sentence=float(data["avg_words_per_sentence"]),
        )


@dataclass(frozen=True)
class AnalysisResult:
    score: float
    feedback: str
    metrics: AnalysisMetrics

    @property
    def score_text(self) -> str:
        return f"{self.score:.1f}"

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "feedback": self.feedback,
            "metrics": self.metrics.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> AnalysisResult:
        return cls(
            score=float(data["score"]),
            feedback=str(data["feedback"]),
            metrics=AnalysisMetrics.from_dict(data["metrics"]),
        )


@dataclass(frozen=True)
class HistoryEntry:
    """One processed recording as kept in the history list.

    Entries are created by the processing pipeline and never modified; the
    only other operation on them is deletion by id.
    """

    id: str
    date: datetime
    duration: int
    location: str
    transcript: str
    analysis: AnalysisResult

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.date.isoformat(),
            "duration": self.duration,
            "location": self.location,
            "transcript": self.transcript,
            "analysis": self.analysis.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> HistoryEntry:
        date = str(data["date"])
        # JavaScript-style timestamps end in "Z"
        if date.endswith("Z"):
            date = date[:-1] + "+00:00"
        return cls(
            id=str(data["id"]),
            date=datetime.fromisoformat(date),
            duration=int(data["duration"]),
            location=str(data["location"]),
            transcript=str(data["transcript"]),
            analysis=AnalysisResult.from_dict(data["analysis"]),
        )
