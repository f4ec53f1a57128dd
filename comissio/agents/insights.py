"""
AI Insight Agent for Comissio

Asks Gemini for a short, plain-language reading of the salesperson's
commission data: peak months, default risk, one strategic tip.

CRITICAL BOUNDARIES:
- CAN: Read a snapshot of the commissions and installments
- CAN: Summarize what the data shows
- CANNOT: Modify any data
- CANNOT: Raise. Every failure (missing key, network, auth, quota,
  empty response) becomes the fixed fallback message.

The totals in the prompt are computed by the aggregation engine, not by
the model, so the summary starts from real numbers.
"""

from datetime import date
from typing import Optional, Sequence

import google.generativeai as genai
import structlog
from pydantic import BaseModel, Field, TypeAdapter

from comissio.config import GeminiSettings, get_settings
from comissio.engine.aggregation import compute_summary, monthly_stats
from comissio.models.commission import Commission, Installment
from comissio.utils.formatters import format_currency


logger = structlog.get_logger(__name__)

INSIGHT_FALLBACK_MESSAGE = (
    "Não foi possível gerar insights no momento. Tente novamente mais tarde."
)

_COMMISSIONS = TypeAdapter(list[Commission])
_INSTALLMENTS = TypeAdapter(list[Installment])


class FinancialInsight(BaseModel):
    """
    Result of one insight request.

    text is always safe to show: either the model's answer
    or the fallback message.
    """

    text: str
    used_fallback: bool = Field(
        default=False,
        description="Whether the fallback message was returned"
    )
    error: Optional[str] = Field(
        default=None,
        description="What went wrong, for logs only"
    )


class InsightAgent:
    """
    AI agent for the dashboard's insight panel.

    RESPONSIBILITIES:
    - Build the prompt from a read-only snapshot
    - Call Gemini once per request (no retries)
    - Turn every failure into the fallback message
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model=None,
    ):
        """
        Initialize the agent.

        Args:
            settings: Gemini configuration. If None, loaded on first use.
            model: Pre-built model object (anything with
                   generate_content_async). Mainly for tests.
        """
        self._settings = settings
        self._model = model

    def _get_model(self):
        """Configure Google Generative AI on first use."""
        if self._model is None:
            settings = self._settings or get_settings().gemini
            genai.configure(api_key=settings.api_key)
            self._model = genai.GenerativeModel(
                model_name=settings.model_name,
                generation_config={
                    "temperature": settings.temperature,
                    "max_output_tokens": settings.max_tokens,
                }
            )
        return self._model

    def build_prompt(
        self,
        commissions: Sequence[Commission],
        installments: Sequence[Installment],
        today: Optional[date] = None,
    ) -> str:
        """Build the pt-BR analysis prompt from the data snapshot."""
        today = today or date.today()
        summary = compute_summary(list(installments), today=today)

        months = "\n".join(
            f"- {stat.month}: previsto {format_currency(stat.total_expected)}, "
            f"recebido {format_currency(stat.total_received)}, "
            f"pendente {format_currency(stat.total_pending)}"
            for stat in monthly_stats(list(installments))
        ) or "- (sem parcelas)"

        commissions_json = _COMMISSIONS.dump_json(
            list(commissions), by_alias=True
        ).decode("utf-8")
        installments_json = _INSTALLMENTS.dump_json(
            list(installments), by_alias=True
        ).decode("utf-8")

        return f"""Analise os seguintes dados de comissões de um vendedor.

Data de hoje: {today.isoformat()}

Totais:
- Total em carteira: {format_currency(summary.total_expected)}
- Recebido total: {format_currency(summary.total_received)}
- Previsto no mês atual: {format_currency(summary.month_revenue)}
- Pendente no mês atual: {format_currency(summary.month_pending)}

Por mês:
{months}

Comissões: {commissions_json}
Parcelas: {installments_json}

Por favor, forneça um breve resumo (máximo 3 parágrafos) sobre a saúde financeira do vendedor,
destacando meses de pico, riscos de inadimplência (se houver muitas parcelas pendentes antigas)
e uma dica estratégica para aumentar o faturamento. Use um tom profissional e encorajador,
como um consultor financeiro de banco.

IMPORTANTE: Use SOMENTE os dados acima. Não invente valores.
Responda em Português do Brasil."""

    async def analyze(
        self,
        commissions: Sequence[Commission],
        installments: Sequence[Installment],
        today: Optional[date] = None,
    ) -> FinancialInsight:
        """
        Ask the model for an insight and report whether it fell back.

        Never raises.
        """
        try:
            prompt = self.build_prompt(commissions, installments, today=today)
            response = await self._get_model().generate_content_async(prompt)
            text = (response.text or "").strip()
            if not text:
                raise ValueError("Empty response from model")
            return FinancialInsight(text=text)
        except Exception as e:
            logger.error(
                "insight_generation_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return FinancialInsight(
                text=INSIGHT_FALLBACK_MESSAGE,
                used_fallback=True,
                error=str(e),
            )

    async def generate_insights(
        self,
        commissions: Sequence[Commission],
        installments: Sequence[Installment],
    ) -> str:
        """The insight text, or the fallback message. Never raises."""
        insight = await self.analyze(commissions, installments)
        return insight.text
