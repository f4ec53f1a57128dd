"""AI Agents package."""

from comissio.agents.insights import (
    INSIGHT_FALLBACK_MESSAGE,
    FinancialInsight,
    InsightAgent,
)

__all__ = [
    "INSIGHT_FALLBACK_MESSAGE",
    "FinancialInsight",
    "InsightAgent",
]
