"""AI Agents package."""

from kitabkhata.agents.insight_agent import (
    ERROR_MESSAGE,
    NO_DATA_MESSAGE,
    InsightBusyError,
    InsightGenerationError,
    InsightRequest,
    InsightResult,
    InsightState,
    LedgerInsightAgent,
)

__all__ = [
    "ERROR_MESSAGE",
    "NO_DATA_MESSAGE",
    "InsightBusyError",
    "InsightGenerationError",
    "InsightRequest",
    "InsightResult",
    "InsightState",
    "LedgerInsightAgent",
]
