"""Provider payload records.

Each record validates one provider's response shape. Optional fields carry
their documented defaults here, once, so consumers never re-derive them:

- ``topTakes`` defaults to an empty sequence and keeps at most five entries
- ``retailVsInstitutional`` defaults to "mixed"
- news and research list fields default to empty sequences
- ``competitivePosition`` defaults to "Unknown"

Every payload exposes ``score`` in [-1, 1] and a ``label`` consistent with it.
"""

import math
from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from src.analyzers.headline_classifier import classify_headline
from src.analyzers.sentiment_result import (
    HeadlineSentiment,
    SentimentLabel,
    label_for_score,
    mean_headline_score,
)
from src.models.instructions import NonEmptyStr

MAX_TOP_TAKES = 5


class BuzzLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VIRAL = "viral"


class AudienceMix(str, Enum):
    """Informational only; never used for scoring."""
    RETAIL_HEAVY = "retail-heavy"
    MIXED = "mixed"
    INSTITUTIONAL = "institutional"


class AnalystConsensus(str, Enum):
    STRONG_BUY = "strong-buy"
    BUY = "buy"
    HOLD = "hold"
    SELL = "sell"
    STRONG_SELL = "strong-sell"


CONSENSUS_SCORES = {
    AnalystConsensus.STRONG_BUY: 1.0,
    AnalystConsensus.BUY: 0.5,
    AnalystConsensus.HOLD: 0.0,
    AnalystConsensus.SELL: -0.5,
    AnalystConsensus.STRONG_SELL: -1.0,
}


def _drop_none(data: dict, *keys: str) -> dict:
    """Remove keys explicitly set to null so field defaults apply."""
    for key in keys:
        if key in data and data[key] is None:
            del data[key]
    return data


def _lift(data: dict, nested_key: str) -> dict:
    """Merge a nested object's keys into the top level."""
    nested = data.pop(nested_key, None)
    if isinstance(nested, dict):
        for key, value in nested.items():
            data.setdefault(key, value)
    elif nested is not None:
        data[nested_key] = nested
    return data


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ── social sentiment ──────────────────────────────────────────────────────────

class SentimentBreakdown(_Record):
    """Percentages of positive, neutral and negative posts. Sums to 100."""

    positive: float = Field(ge=0)
    neutral: float = Field(ge=0)
    negative: float = Field(ge=0)

    @model_validator(mode="before")
    @classmethod
    def _rescale_to_100(cls, data):
        if not isinstance(data, dict):
            return data
        try:
            values = [float(data[k]) for k in ("positive", "neutral", "negative")]
        except (KeyError, TypeError, ValueError):
            return data
        if any(v < 0 for v in values):
            return data

        total = sum(values)
        if total == 0:
            return {"positive": 0.0, "neutral": 100.0, "negative": 0.0}
        if math.isclose(total, 100.0, abs_tol=1e-6):
            return data

        # remainder goes to neutral
        positive = round(values[0] * 100 / total, 1)
        negative = round(values[2] * 100 / total, 1)
        return {
            "positive": positive,
            "neutral": round(100 - positive - negative, 1),
            "negative": negative,
        }


class TopTake(_Record):
    text: NonEmptyStr
    engagement: int = Field(default=0, ge=0)
    sentiment: HeadlineSentiment = HeadlineSentiment.NEUTRAL


class SocialMetrics(_Record):
    mention_count: int = Field(ge=0, alias="mentionCount")
    sentiment_breakdown: SentimentBreakdown = Field(alias="sentimentBreakdown")
    trending: bool
    buzz_level: BuzzLevel = Field(alias="buzzLevel")


class SentimentRecord(_Record):
    """Social sentiment for a ticker.

    Accepts the provider's nested ``{"sentiment": {...}, "metrics": {...}}``
    shape as well as the flat field names. ``label`` is derived from the
    validated ``score``; a label sent by the provider is ignored.
    """

    kind: Literal["social"] = "social"
    score: float = Field(ge=-1.0, le=1.0)
    confidence: float = Field(ge=0.0, le=100.0)
    metrics: SocialMetrics
    top_takes: tuple[TopTake, ...] = Field(default=(), alias="topTakes")
    retail_vs_institutional: AudienceMix = Field(
        default=AudienceMix.MIXED, alias="retailVsInstitutional"
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data):
        if not isinstance(data, dict):
            return data
        data = _lift(dict(data), "sentiment")
        _drop_none(data, "topTakes", "top_takes", "retailVsInstitutional", "retail_vs_institutional")

        for key in ("topTakes", "top_takes"):
            takes = data.get(key)
            if isinstance(takes, (list, tuple)):
                data[key] = list(takes)[:MAX_TOP_TAKES]
        return data

    @computed_field
    @property
    def label(self) -> SentimentLabel:
        return label_for_score(self.score)

    def to_summary(self) -> str:
        """Markdown digest of the record."""
        breakdown = self.metrics.sentiment_breakdown
        lines = [
            "## X/Twitter Social Sentiment",
            "",
            f"**Overall Sentiment:** {self.label.value.upper()} "
            f"(score: {self.score:.2f}, confidence: {self.confidence:.0f}%)",
            "",
            f"- Mention Volume: ~{self.metrics.mention_count:,} posts",
            f"- Buzz Level: {self.metrics.buzz_level.value}",
            f"- Trending: {'YES' if self.metrics.trending else 'No'}",
            f"- Audience: {self.retail_vs_institutional.value}",
            f"- Breakdown: {breakdown.positive:g}% positive / "
            f"{breakdown.neutral:g}% neutral / {breakdown.negative:g}% negative",
        ]
        if self.top_takes:
            lines += ["", "**Top Takes:**"]
            lines += [
                f'{i}. "{take.text}" [{take.sentiment.value}]'
                for i, take in enumerate(self.top_takes[:3], start=1)
            ]
        return "\n".join(lines)


# ── news ──────────────────────────────────────────────────────────────────────

class NewsRecord(_Record):
    """A news item. ``sentiment`` is always computed from the headline."""

    headline: NonEmptyStr
    summary: str = ""
    source: str = ""
    url: str = ""
    timestamp: datetime
    sentiment: HeadlineSentiment

    @model_validator(mode="before")
    @classmethod
    def _derive_sentiment(cls, data):
        if not isinstance(data, dict):
            return data
        data = dict(data)
        headline = data.get("headline")
        data["sentiment"] = classify_headline(headline if isinstance(headline, str) else "")
        return data


class NewsDigest(_Record):
    """Headlines for a ticker, scored from locally classified sentiment."""

    kind: Literal["news"] = "news"
    headlines: tuple[NewsRecord, ...] = ()
    key_topics: tuple[str, ...] = Field(default=(), alias="keyTopics")
    market_impact: str | None = Field(default=None, alias="marketImpact")

    @computed_field
    @property
    def score(self) -> float:
        return mean_headline_score([h.sentiment for h in self.headlines])

    @computed_field
    @property
    def label(self) -> SentimentLabel:
        return label_for_score(self.score)

    def to_summary(self) -> str:
        """Markdown digest of the record."""
        if not self.headlines:
            return "## News\n\nNo recent news available."

        lines = [
            "## News",
            "",
            f"**Overall Sentiment:** {self.label.value.upper()} "
            f"(score: {self.score:.2f}, {len(self.headlines)} headlines)",
            "",
        ]
        for i, item in enumerate(self.headlines[:5], start=1):
            source = f" ({item.source})" if item.source else ""
            lines.append(f"{i}. {item.headline}{source} [{item.sentiment.value}]")
        if self.key_topics:
            lines += ["", f"**Key Topics:** {', '.join(self.key_topics)}"]
        if self.market_impact:
            lines.append(f"**Market Impact:** {self.market_impact}")
        return "\n".join(lines)


# ── web research ──────────────────────────────────────────────────────────────

class PriceTargetRange(_Record):
    low: float = Field(ge=0)
    high: float = Field(ge=0)

    @model_validator(mode="after")
    def _check_order(self):
        if self.low > self.high:
            raise ValueError(f"price target low {self.low} exceeds high {self.high}")
        return self


class SourceCitation(_Record):
    title: NonEmptyStr
    date: str = ""
    url: str | None = None


class ResearchRecord(_Record):
    """Analyst research for a ticker, scored from the analyst consensus."""

    kind: Literal["research"] = "research"
    analyst_consensus: AnalystConsensus = Field(alias="analystConsensus")
    average_price_target: float | None = Field(default=None, ge=0, alias="averagePriceTarget")
    price_target_range: PriceTargetRange | None = Field(default=None, alias="priceTargetRange")
    key_findings: tuple[str, ...] = Field(default=(), alias="keyFindings")
    recent_developments: tuple[str, ...] = Field(default=(), alias="recentDevelopments")
    competitive_position: str = Field(default="Unknown", alias="competitivePosition")
    risks: tuple[str, ...] = ()
    opportunities: tuple[str, ...] = ()
    sources: tuple[SourceCitation, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data):
        if not isinstance(data, dict):
            return data
        data = _lift(dict(data), "research")
        return _drop_none(
            data,
            "keyFindings", "key_findings",
            "recentDevelopments", "recent_developments",
            "competitivePosition", "competitive_position",
            "risks", "opportunities", "sources",
        )

    @computed_field
    @property
    def score(self) -> float:
        return CONSENSUS_SCORES[self.analyst_consensus]

    @computed_field
    @property
    def label(self) -> SentimentLabel:
        return label_for_score(self.score)

    def to_summary(self) -> str:
        """Markdown digest of the record."""
        lines = [
            "## Web Research & Analyst Data",
            "",
            f"**Analyst Consensus:** {self.analyst_consensus.value.upper()}",
        ]
        if self.average_price_target is not None:
            lines.append(f"**Average Price Target:** ${self.average_price_target:,.2f}")
        if self.price_target_range is not None:
            lines.append(
                f"**Target Range:** ${self.price_target_range.low:,.2f} - "
                f"${self.price_target_range.high:,.2f}"
            )
        if self.key_findings:
            lines += ["", "**Key Findings:**"]
            lines += [f"{i}. {f}" for i, f in enumerate(self.key_findings, start=1)]
        if self.recent_developments:
            lines += ["", "**Recent Developments:**"]
            lines += [f"- {d}" for d in self.recent_developments]
        lines += ["", f"**Competitive Position:** {self.competitive_position}"]
        if self.opportunities:
            lines.append(f"**Opportunities:** {', '.join(self.opportunities)}")
        if self.risks:
            lines.append(f"**Risks:** {', '.join(self.risks)}")
        return "\n".join(lines)


Payload = Annotated[
    Union[SentimentRecord, NewsDigest, ResearchRecord],
    Field(discriminator="kind"),
]
