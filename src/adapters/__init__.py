"""Provider adapters: one per external intelligence source."""

from src.adapters.errors import ProviderError, classify_exception, classify_status_code
from src.adapters.base import BaseAdapter
from src.adapters.chat_adapter import ChatCompletionAdapter
from src.adapters.http_adapter import HttpAdapter
from src.adapters.grok_adapter import GrokSentimentAdapter
from src.adapters.openai_adapter import OpenAINewsAdapter
from src.adapters.gemini_adapter import GeminiResearchAdapter
from src.adapters.finnhub_adapter import FinnhubNewsAdapter

__all__ = [
    "ProviderError",
    "classify_exception",
    "classify_status_code",
    "BaseAdapter",
    "ChatCompletionAdapter",
    "HttpAdapter",
    "GrokSentimentAdapter",
    "OpenAINewsAdapter",
    "GeminiResearchAdapter",
    "FinnhubNewsAdapter",
]
