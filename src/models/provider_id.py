from enum import Enum


class ProviderId(str, Enum):
    """Downstream providers the dispatcher fans out to."""
    GROK = "grok"
    OPENAI = "openai"
    GEMINI = "gemini"
    FINNHUB = "finnhub"
