# tests/models/test_instructions.py
import pytest
from pydantic import ValidationError

from src.costs.ledger import RateTier
from src.models.instructions import CompanyType, OrchestratorInstructions, TokenUsage
from src.models.provider_id import ProviderId


def make_instructions_data(**overrides) -> dict:
    data = {
        "companyType": "biotech",
        "keyTopics": ["Efzofitimod", "Phase 3 trial"],
        "grokPrompt": "Search X/Twitter for: $ATYR",
        "openaiPrompt": "Search for aTyr Pharma official news",
        "geminiPrompt": "Search news for: aTyr Pharma clinical trial updates",
    }
    data.update(overrides)
    return data


class TestTokenUsage:
    def test_cost_derived_from_units(self):
        usage = TokenUsage(tier=RateTier.OPUS, input_units=1000, output_units=200)
        assert usage.cost_usd == pytest.approx(0.03)

    def test_cost_is_serialized(self):
        usage = TokenUsage(tier=RateTier.SONNET, input_units=1000, output_units=1000)
        assert usage.model_dump()["cost_usd"] == pytest.approx(0.018)

    def test_negative_units_rejected(self):
        with pytest.raises(ValidationError):
            TokenUsage(tier=RateTier.OPUS, input_units=-5, output_units=0)


class TestOrchestratorInstructions:
    def test_parses_camel_case(self):
        instructions = OrchestratorInstructions.model_validate(make_instructions_data())

        assert instructions.company_type == CompanyType.BIOTECH
        assert instructions.key_topics == ("Efzofitimod", "Phase 3 trial")
        assert instructions.source == "model"
        assert not instructions.is_fallback
        assert instructions.cost_usd == 0.0

    def test_unknown_company_type_rejected(self):
        with pytest.raises(ValidationError):
            OrchestratorInstructions.model_validate(make_instructions_data(companyType="crypto"))

    def test_blank_prompt_rejected(self):
        with pytest.raises(ValidationError):
            OrchestratorInstructions.model_validate(make_instructions_data(geminiPrompt="   "))

    def test_missing_prompt_rejected(self):
        data = make_instructions_data()
        del data["openaiPrompt"]
        with pytest.raises(ValidationError):
            OrchestratorInstructions.model_validate(data)

    def test_key_topics_must_be_list(self):
        with pytest.raises(ValidationError):
            OrchestratorInstructions.model_validate(make_instructions_data(keyTopics="AI chips"))

    def test_prompt_for_each_provider(self):
        instructions = OrchestratorInstructions.model_validate(make_instructions_data())

        assert instructions.prompt_for(ProviderId.GROK).startswith("Search X/Twitter")
        assert instructions.prompt_for(ProviderId.OPENAI).startswith("Search for aTyr")
        assert instructions.prompt_for(ProviderId.GEMINI).startswith("Search news for")
        assert instructions.prompt_for(ProviderId.FINNHUB) is None

    def test_cost_from_token_usage(self):
        usage = TokenUsage(tier=RateTier.OPUS, input_units=1200, output_units=300)
        instructions = OrchestratorInstructions.model_validate(
            {**make_instructions_data(), "token_usage": usage}
        )
        assert instructions.cost_usd == pytest.approx(0.0405)
