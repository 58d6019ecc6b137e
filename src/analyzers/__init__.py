"""Analyzers package for headline sentiment and score labelling."""

from src.analyzers.sentiment_result import (
    BEARISH_THRESHOLD,
    BULLISH_THRESHOLD,
    HeadlineSentiment,
    SentimentLabel,
    label_for_score,
    mean_headline_score,
)
from src.analyzers.headline_classifier import (
    NEGATIVE_WORDS,
    POSITIVE_WORDS,
    classify_headline,
)

__all__ = [
    "BEARISH_THRESHOLD",
    "BULLISH_THRESHOLD",
    "HeadlineSentiment",
    "SentimentLabel",
    "label_for_score",
    "mean_headline_score",
    "NEGATIVE_WORDS",
    "POSITIVE_WORDS",
    "classify_headline",
]
