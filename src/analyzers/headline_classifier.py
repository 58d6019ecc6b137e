"""Rule-based headline sentiment for news feeds.

Counts how many words of each fixed list occur in the lower-cased headline
(substring containment, so "gains" counts for "gain") and picks the side with
more hits. Ties, including zero hits, are neutral.
"""

from src.analyzers.sentiment_result import HeadlineSentiment

POSITIVE_WORDS = (
    "surge",
    "jump",
    "gain",
    "rise",
    "beat",
    "profit",
    "growth",
    "bullish",
    "upgrade",
    "record",
    "soar",
    "rally",
    "boost",
    "exceed",
    "outperform",
    "strong",
    "positive",
)

NEGATIVE_WORDS = (
    "fall",
    "drop",
    "decline",
    "loss",
    "miss",
    "cut",
    "bearish",
    "downgrade",
    "crash",
    "plunge",
    "tumble",
    "sink",
    "weak",
    "negative",
    "concern",
    "risk",
    "warning",
)


def classify_headline(headline: str | None) -> HeadlineSentiment:
    """Classify a headline as positive, negative or neutral."""
    lower = (headline or "").lower()

    positive_count = sum(1 for word in POSITIVE_WORDS if word in lower)
    negative_count = sum(1 for word in NEGATIVE_WORDS if word in lower)

    if positive_count > negative_count:
        return HeadlineSentiment.POSITIVE
    if negative_count > positive_count:
        return HeadlineSentiment.NEGATIVE
    return HeadlineSentiment.NEUTRAL
