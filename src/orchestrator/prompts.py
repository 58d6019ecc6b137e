"""Prompt text for the orchestration model and the deterministic fallback set."""

from src.models.instructions import CompanyType, OrchestratorInstructions
from src.models.research_request import ResearchRequest

ORCHESTRATOR_PROMPT = '''You are a financial research orchestrator. Analyze this stock and write specialized search prompts for three research assistants.

STOCK: {symbol} - {company_name}
SECTOR: {sector}
CURRENT PRICE: ${price:.2f}

Your task:
1. Classify the company as one of: biotech, tech, finance, retail, energy, healthcare, industrial, other
2. List the key topics worth researching (products, trials, executives, competitors, recent events)
3. Write THREE specialized prompts:
   - grokPrompt: what to search on X/Twitter (cashtags, hashtags, product and executive names)
   - openaiPrompt: which official company news to look for (SEC filings, press releases, IR announcements)
   - geminiPrompt: which news, analyst coverage and industry context to research

OUTPUT FORMAT (JSON only, no markdown):
{{
  "companyType": "biotech|tech|finance|retail|energy|healthcare|industrial|other",
  "keyTopics": ["topic1", "topic2", "topic3"],
  "grokPrompt": "Search X/Twitter for: ...",
  "openaiPrompt": "Search for official company news: ...",
  "geminiPrompt": "Search news for: ..."
}}

EXAMPLES:

ATYR (aTyr Pharma, biotech):
{{
  "companyType": "biotech",
  "keyTopics": ["Efzofitimod", "Phase 3 trial", "pulmonary sarcoidosis", "FDA status"],
  "grokPrompt": "Search X/Twitter for: $ATYR, aTyr Pharma, Efzofitimod, pulmonary sarcoidosis treatment. Find retail sentiment, trial result reactions, analyst mentions from last 7 days.",
  "openaiPrompt": "Search for aTyr Pharma official news: Phase 3 EFZO-FIT trial results, FDA communications, SEC 8-K filings, investor presentations, earnings calls from last 30 days.",
  "geminiPrompt": "Search news for: aTyr Pharma clinical trial updates, Efzofitimod efficacy data, biotech analyst coverage, pulmonary sarcoidosis treatment landscape, competitor drugs from last 14 days."
}}

AAPL (Apple, tech):
{{
  "companyType": "tech",
  "keyTopics": ["iPhone sales", "Services revenue", "AI features", "China market"],
  "grokPrompt": "Search X/Twitter for: $AAPL, Apple stock, iPhone 17, Apple AI, Apple Vision Pro. Find retail sentiment, product reactions from last 7 days.",
  "openaiPrompt": "Search for Apple official news: earnings reports, product announcements, SEC filings, Tim Cook statements, supply chain updates from last 30 days.",
  "geminiPrompt": "Search news for: Apple financial performance, iPhone market share, Apple services growth, AI strategy, China sales data from last 14 days."
}}

NVDA (NVIDIA, tech/AI):
{{
  "companyType": "tech",
  "keyTopics": ["AI chips", "Data center revenue", "Blackwell architecture", "H100/H200 demand"],
  "grokPrompt": "Search X/Twitter for: $NVDA, NVIDIA stock, Blackwell, H100, AI chips, Jensen Huang. Find sentiment about AI demand, chip supply from last 7 days.",
  "openaiPrompt": "Search for NVIDIA official news: data center revenue, AI chip announcements, earnings guidance, partnership deals, SEC filings from last 30 days.",
  "geminiPrompt": "Search news for: NVIDIA financial results, AI chip competition (AMD, Intel), data center growth, Blackwell reviews, analyst price targets from last 14 days."
}}

Now analyze {symbol} - {company_name} and write the prompts:'''

FALLBACK_GROK_PROMPT = (
    "Search X/Twitter for: ${symbol}, {company_name} stock. "
    "Find retail sentiment, recent mentions from last 7 days."
)
FALLBACK_OPENAI_PROMPT = (
    "Search for {company_name} ({symbol}) official news: earnings reports, "
    "SEC filings, press releases from last 30 days."
)
FALLBACK_GEMINI_PROMPT = (
    "Search news for: {company_name} financial performance, analyst coverage, "
    "recent developments from last 14 days."
)


def build_orchestrator_prompt(request: ResearchRequest) -> str:
    return ORCHESTRATOR_PROMPT.format(
        symbol=request.symbol,
        company_name=request.company_name,
        sector=request.sector,
        price=request.current_price,
    )


def build_fallback_instructions(request: ResearchRequest) -> OrchestratorInstructions:
    """Generic instructions built from the request alone. Never raises."""
    values = {"symbol": request.symbol, "company_name": request.company_name}
    return OrchestratorInstructions(
        company_type=CompanyType.OTHER,
        key_topics=(request.company_name, request.symbol, "stock", "earnings"),
        grok_prompt=FALLBACK_GROK_PROMPT.format(**values),
        openai_prompt=FALLBACK_OPENAI_PROMPT.format(**values),
        gemini_prompt=FALLBACK_GEMINI_PROMPT.format(**values),
        token_usage=None,
        source="fallback",
    )
