# tests/models/test_records.py
from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from src.analyzers.sentiment_result import HeadlineSentiment, SentimentLabel
from src.models.records import (
    AnalystConsensus,
    AudienceMix,
    NewsDigest,
    NewsRecord,
    ResearchRecord,
    SentimentBreakdown,
    SentimentRecord,
)


def make_grok_data(**overrides) -> dict:
    data = {
        "sentiment": {"score": 0.65, "label": "bullish", "confidence": 78},
        "metrics": {
            "mentionCount": 1200,
            "sentimentBreakdown": {"positive": 60, "neutral": 25, "negative": 15},
            "trending": True,
            "buzzLevel": "high",
        },
        "topTakes": [
            {"text": "Phase 3 readout is the catalyst", "engagement": 340, "sentiment": "positive"},
        ],
        "retailVsInstitutional": "retail-heavy",
    }
    data.update(overrides)
    return data


def make_news(headline: str) -> NewsRecord:
    return NewsRecord(headline=headline, timestamp=datetime.now(timezone.utc))


class TestSentimentRecord:
    def test_parses_nested_shape(self):
        record = SentimentRecord.model_validate(make_grok_data())

        assert record.score == 0.65
        assert record.label == SentimentLabel.BULLISH
        assert record.confidence == 78
        assert record.metrics.mention_count == 1200
        assert record.metrics.trending is True
        assert record.retail_vs_institutional == AudienceMix.RETAIL_HEAVY
        assert record.top_takes[0].engagement == 340

    def test_contradicting_label_normalized(self):
        data = make_grok_data(sentiment={"score": -0.5, "label": "bullish", "confidence": 60})
        record = SentimentRecord.model_validate(data)
        assert record.label == SentimentLabel.BEARISH

    def test_string_score_label_follows_coerced_value(self):
        data = make_grok_data(sentiment={"score": "0.65", "label": "bearish", "confidence": 78})
        record = SentimentRecord.model_validate(data)

        assert record.score == 0.65
        assert record.label == SentimentLabel.BULLISH
        assert record.model_dump()["label"] == SentimentLabel.BULLISH

    def test_boundary_score_is_neutral(self):
        data = make_grok_data(sentiment={"score": 0.2, "label": "bullish", "confidence": 60})
        assert SentimentRecord.model_validate(data).label == SentimentLabel.NEUTRAL

    def test_optional_fields_default(self):
        data = make_grok_data()
        del data["topTakes"]
        del data["retailVsInstitutional"]
        record = SentimentRecord.model_validate(data)

        assert record.top_takes == ()
        assert record.retail_vs_institutional == AudienceMix.MIXED

    def test_null_optional_fields_default(self):
        record = SentimentRecord.model_validate(
            make_grok_data(topTakes=None, retailVsInstitutional=None)
        )
        assert record.top_takes == ()
        assert record.retail_vs_institutional == AudienceMix.MIXED

    def test_top_takes_bounded(self):
        takes = [{"text": f"take {i}"} for i in range(8)]
        record = SentimentRecord.model_validate(make_grok_data(topTakes=takes))
        assert len(record.top_takes) == 5
        assert record.top_takes[-1].text == "take 4"

    def test_score_out_of_range_rejected(self):
        data = make_grok_data(sentiment={"score": 1.5, "label": "bullish", "confidence": 90})
        with pytest.raises(ValidationError):
            SentimentRecord.model_validate(data)

    def test_invalid_buzz_level_rejected(self):
        data = make_grok_data()
        data["metrics"] = {**data["metrics"], "buzzLevel": "extreme"}
        with pytest.raises(ValidationError):
            SentimentRecord.model_validate(data)

    def test_missing_metrics_rejected(self):
        data = make_grok_data()
        del data["metrics"]
        with pytest.raises(ValidationError):
            SentimentRecord.model_validate(data)

    def test_summary_mentions_label(self):
        summary = SentimentRecord.model_validate(make_grok_data()).to_summary()
        assert "BULLISH" in summary
        assert "Phase 3 readout" in summary


class TestSentimentBreakdown:
    def test_rescaled_to_100(self):
        breakdown = SentimentBreakdown.model_validate({"positive": 30, "neutral": 10, "negative": 10})
        assert (breakdown.positive, breakdown.neutral, breakdown.negative) == (60.0, 20.0, 20.0)

    def test_all_zero_becomes_neutral(self):
        breakdown = SentimentBreakdown.model_validate({"positive": 0, "neutral": 0, "negative": 0})
        assert (breakdown.positive, breakdown.neutral, breakdown.negative) == (0.0, 100.0, 0.0)

    def test_sums_to_100(self):
        breakdown = SentimentBreakdown.model_validate({"positive": 1, "neutral": 1, "negative": 1})
        total = breakdown.positive + breakdown.neutral + breakdown.negative
        assert total == pytest.approx(100.0)

    def test_negative_percentage_rejected(self):
        with pytest.raises(ValidationError):
            SentimentBreakdown.model_validate({"positive": -10, "neutral": 60, "negative": 50})


class TestNewsRecord:
    def test_sentiment_derived_from_headline(self):
        assert make_news("Shares plunge after guidance cut").sentiment == HeadlineSentiment.NEGATIVE

    def test_supplied_sentiment_ignored(self):
        record = NewsRecord.model_validate(
            {
                "headline": "Shares plunge after guidance cut",
                "timestamp": datetime.now(timezone.utc),
                "sentiment": "positive",
            }
        )
        assert record.sentiment == HeadlineSentiment.NEGATIVE

    def test_blank_headline_rejected(self):
        with pytest.raises(ValidationError):
            make_news("  ")


class TestNewsDigest:
    def test_score_is_mean_of_headlines(self):
        digest = NewsDigest(
            headlines=(
                make_news("Revenue growth beats estimates"),
                make_news("Analyst downgrade on margin concern"),
                make_news("CEO to speak at conference"),
                make_news("Stock hits record high"),
            )
        )
        assert digest.score == 0.25
        assert digest.label == SentimentLabel.BULLISH

    def test_empty_digest_is_neutral(self):
        digest = NewsDigest()
        assert digest.score == 0.0
        assert digest.label == SentimentLabel.NEUTRAL
        assert "No recent news" in digest.to_summary()


class TestResearchRecord:
    def test_parses_nested_research(self):
        record = ResearchRecord.model_validate(
            {
                "research": {
                    "analystConsensus": "buy",
                    "averagePriceTarget": 12.5,
                    "priceTargetRange": {"low": 8, "high": 18},
                },
                "keyFindings": ["Phase 3 enrollment complete (2026-01-10)"],
                "competitivePosition": None,
            }
        )

        assert record.analyst_consensus == AnalystConsensus.BUY
        assert record.score == 0.5
        assert record.label == SentimentLabel.BULLISH
        assert record.price_target_range.high == 18
        assert record.competitive_position == "Unknown"
        assert record.risks == ()

    @pytest.mark.parametrize(
        "consensus,score,label",
        [
            ("strong-buy", 1.0, SentimentLabel.BULLISH),
            ("hold", 0.0, SentimentLabel.NEUTRAL),
            ("sell", -0.5, SentimentLabel.BEARISH),
            ("strong-sell", -1.0, SentimentLabel.BEARISH),
        ],
    )
    def test_score_from_consensus(self, consensus, score, label):
        record = ResearchRecord.model_validate({"analystConsensus": consensus})
        assert record.score == score
        assert record.label == label

    def test_unknown_consensus_rejected(self):
        with pytest.raises(ValidationError):
            ResearchRecord.model_validate({"analystConsensus": "accumulate"})

    def test_missing_consensus_rejected(self):
        with pytest.raises(ValidationError):
            ResearchRecord.model_validate({"keyFindings": ["something"]})

    def test_inverted_price_range_rejected(self):
        with pytest.raises(ValidationError):
            ResearchRecord.model_validate(
                {"analystConsensus": "buy", "priceTargetRange": {"low": 20, "high": 10}}
            )
