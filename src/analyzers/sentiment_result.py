from enum import Enum

BULLISH_THRESHOLD = 0.2
BEARISH_THRESHOLD = -0.2


class SentimentLabel(str, Enum):
    BULLISH = "bullish"
    NEUTRAL = "neutral"
    BEARISH = "bearish"


class HeadlineSentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


HEADLINE_SCORES = {
    HeadlineSentiment.POSITIVE: 1.0,
    HeadlineSentiment.NEUTRAL: 0.0,
    HeadlineSentiment.NEGATIVE: -1.0,
}


def label_for_score(score: float) -> SentimentLabel:
    """Map a score in [-1, 1] to its label.

    Both boundaries are neutral: 0.2 and -0.2 do not cross the threshold.
    """
    if score > BULLISH_THRESHOLD:
        return SentimentLabel.BULLISH
    if score < BEARISH_THRESHOLD:
        return SentimentLabel.BEARISH
    return SentimentLabel.NEUTRAL


def mean_headline_score(sentiments: list[HeadlineSentiment]) -> float:
    """Average headline sentiments as +1/0/-1, rounded to 4 places.

    An empty list scores 0.0.
    """
    if not sentiments:
        return 0.0
    total = sum(HEADLINE_SCORES[s] for s in sentiments)
    return round(total / len(sentiments), 4)
