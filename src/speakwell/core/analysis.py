"""Lexical analysis of a transcript: metrics, score and feedback."""

from __future__ import annotations

import re

from .models import AnalysisMetrics, AnalysisResult

BASE_SCORE = 7
MIN_SCORE = 0
MAX_SCORE = 10

BRIEF_WORD_COUNT = 30
DETAILED_WORD_COUNT = 100
SHORT_SENTENCE_WORDS = 5
LONG_SENTENCE_WORDS = 15

_SENTENCE_BREAK = re.compile(r"[.!?]+")


def compute_metrics(text: str) -> AnalysisMetrics:
    word_count = len(text.split())
    sentence_count = sum(1 for segment in _SENTENCE_BREAK.split(text) if segment)
    avg = word_count / sentence_count if sentence_count > 0 else 0.0
    return AnalysisMetrics(
        word_count=word_count,
        sentence_count=sentence_count,
        avg_words_per_sentence=avg,
    )


def score_metrics(metrics: AnalysisMetrics) -> float:
    score = BASE_SCORE
    if metrics.avg_words_per_sentence < SHORT_SENTENCE_WORDS:
        score -= 1
    if metrics.avg_words_per_sentence > LONG_SENTENCE_WORDS:
        score -= 1
    if metrics.word_count < BRIEF_WORD_COUNT:
        score -= 1
    return float(max(MIN_SCORE, min(MAX_SCORE, score)))


def build_feedback(metrics: AnalysisMetrics) -> str:
    feedback = ""

    if metrics.word_count < BRIEF_WORD_COUNT:
        feedback += "Your response was quite brief. Try to elaborate more on your thoughts. "
    elif metrics.word_count > DETAILED_WORD_COUNT:
        feedback += "You provided a detailed response with good elaboration. "

    if metrics.avg_words_per_sentence < SHORT_SENTENCE_WORDS:
        feedback += "Your sentences were very short. Consider combining related ideas. "
    elif metrics.avg_words_per_sentence > LONG_SENTENCE_WORDS:
        feedback += (
            "Your sentences were quite long. Consider breaking complex ideas "
            "into shorter sentences for clarity. "
        )
    else:
        feedback += "You had a good balance of sentence lengths. "

    feedback += (
        f"Overall, your response had {metrics.word_count} words across "
        f"approximately {metrics.sentence_count} sentences."
    )
    return feedback


def analyze_transcript(text: str) -> AnalysisResult:
    """Score a transcript.

    The result is a pure function of ``text``: the same transcript always
    yields the same score, feedback and metrics.
    """
    metrics = compute_metrics(text)
    return AnalysisResult(
        score=score_metrics(metrics),
        feedback=build_feedback(metrics),
        metrics=metrics,
    )
