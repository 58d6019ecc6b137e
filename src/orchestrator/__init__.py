"""Orchestrator module: prompt orchestration, dispatch and aggregation."""

from .aggregator import ReportAggregator
from .dispatcher import DEFAULT_TIMEOUT_SECONDS, Dispatcher
from .prompt_orchestrator import PromptOrchestrator
from .prompts import build_fallback_instructions, build_orchestrator_prompt
from .research_engine import ResearchEngine
from .settings import DispatcherSettings, OrchestratorSettings

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "Dispatcher",
    "DispatcherSettings",
    "OrchestratorSettings",
    "PromptOrchestrator",
    "ReportAggregator",
    "ResearchEngine",
    "build_fallback_instructions",
    "build_orchestrator_prompt",
]
