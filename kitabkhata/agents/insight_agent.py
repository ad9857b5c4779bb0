"""
AI Insight Agent for KitabKhata

DESIGN DECISION: The LLM only ever sees what is already in the ledger
and only ever produces free text for the shopkeeper to read. Nothing it
says flows back into the data.

CRITICAL BOUNDARIES:
- CAN: Summarise who owes the most, what sells, what needs follow-up
- CANNOT: Change, add or delete records
- MUST: Never raise into the UI. Failures become a readable message.

The request itself is an explicit state machine, so "is an analysis
already running?" is a value you can inspect and test:

    IDLE --start--> IN_FLIGHT --done--> RESOLVED(value | error)
                        ^                        |
                        +--------start-----------+
"""

import asyncio
import json
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

import google.generativeai as genai
import structlog
from pydantic import BaseModel, Field

from kitabkhata.config import GeminiSettings, get_settings
from kitabkhata.models.transaction import Transaction


logger = structlog.get_logger(__name__)

NO_DATA_MESSAGE = "No data available for analysis yet."
ERROR_MESSAGE = "Error generating AI insights. Please check your connection."

PROMPT_TEMPLATE = """Analyze this book ledger for a shopkeeper. Give a short, helpful summary in Hinglish (Hindi + English mix).
Identify:
1. Who owes the most money (Chronic debtors).
2. Popular books being bought.
3. Any urgent follow-ups needed.
Keep it professional but friendly for a small business owner.

Data: {data}"""


class InsightGenerationError(Exception):
    """The model call failed, timed out or returned nothing."""
    pass


class InsightBusyError(Exception):
    """An analysis is already in flight."""
    pass


class LedgerInsightAgent:
    """
    Asks Gemini for a natural-language summary of the ledger.

    RESPONSIBILITIES:
    - Reduce each sale to the fields the summary needs
    - Bound every call with a timeout
    - Map failures to ERROR_MESSAGE in analyze()
    """

    def __init__(
        self,
        settings: Optional[GeminiSettings] = None,
        model=None,
    ):
        self._settings = settings or get_settings().gemini
        self._model = model
        if self._model is None:
            self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        genai.configure(api_key=self._settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=self._settings.model_name,
            generation_config={
                "temperature": self._settings.temperature,
                "max_output_tokens": self._settings.max_tokens,
            }
        )

    @staticmethod
    def build_context(transactions: Sequence[Transaction]) -> list[dict]:
        """The slice of each sale the model gets to see."""
        return [
            {
                "date": t.sale_date.isoformat(),
                "name": t.customer_name,
                "book": t.book_title,
                "price": float(t.total_price),
                "paid": float(t.amount_paid),
                "balance": float(t.balance),
            }
            for t in transactions
        ]

    def build_prompt(self, transactions: Sequence[Transaction]) -> str:
        data = json.dumps(self.build_context(transactions), ensure_ascii=False)
        return PROMPT_TEMPLATE.format(data=data)

    async def generate_insight(self, transactions: Sequence[Transaction]) -> str:
        """
        Raw model call.

        Raises:
            InsightGenerationError: On any failure, including timeout
        """
        if not transactions:
            return NO_DATA_MESSAGE

        prompt = self.build_prompt(transactions)
        try:
            response = await asyncio.wait_for(
                self._model.generate_content_async(prompt),
                timeout=self._settings.timeout_seconds,
            )
            text = (response.text or "").strip()
        except asyncio.TimeoutError as e:
            raise InsightGenerationError(
                f"Gemini did not answer within {self._settings.timeout_seconds:g}s"
            ) from e
        except Exception as e:
            raise InsightGenerationError(f"Gemini request failed: {e}") from e

        if not text:
            raise InsightGenerationError("Gemini returned an empty response")
        return text

    async def analyze(self, transactions: Sequence[Transaction]) -> str:
        """Summary text, or ERROR_MESSAGE. Never raises."""
        try:
            return await self.generate_insight(transactions)
        except InsightGenerationError as e:
            logger.error("insight_generation_failed", error=str(e))
            return ERROR_MESSAGE


class InsightState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    RESOLVED = "resolved"


class InsightResult(BaseModel):
    """Snapshot of the insight request."""

    state: InsightState = InsightState.IDLE
    value: Optional[str] = Field(
        default=None,
        description="Summary text once resolved successfully"
    )
    error: Optional[str] = Field(
        default=None,
        description="Displayable failure message once resolved unsuccessfully"
    )
    detail: Optional[str] = Field(
        default=None,
        description="Technical reason for the failure, for logs"
    )
    requested_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return self.state == InsightState.RESOLVED and self.error is None

    @property
    def display_text(self) -> Optional[str]:
        return self.value if self.value is not None else self.error


class InsightRequest:
    """
    At most one analysis at a time.

    Starting while IN_FLIGHT raises InsightBusyError. Because the agent
    enforces a timeout, IN_FLIGHT always ends.
    """

    def __init__(self, agent: LedgerInsightAgent):
        self._agent = agent
        self._result = InsightResult()

    @property
    def result(self) -> InsightResult:
        return self._result

    @property
    def state(self) -> InsightState:
        return self._result.state

    @property
    def is_busy(self) -> bool:
        return self._result.state == InsightState.IN_FLIGHT

    async def run(self, transactions: Sequence[Transaction]) -> InsightResult:
        if self.is_busy:
            raise InsightBusyError("An analysis is already running")

        requested_at = datetime.now(timezone.utc)
        self._result = InsightResult(
            state=InsightState.IN_FLIGHT,
            requested_at=requested_at,
        )

        try:
            text = await self._agent.generate_insight(list(transactions))
        except InsightGenerationError as e:
            logger.error("insight_generation_failed", error=str(e))
            self._result = InsightResult(
                state=InsightState.RESOLVED,
                error=ERROR_MESSAGE,
                detail=str(e),
                requested_at=requested_at,
                resolved_at=datetime.now(timezone.utc),
            )
        except asyncio.CancelledError:
            # Do not stay stuck in flight
            self._result = InsightResult()
            raise
        else:
            self._result = InsightResult(
                state=InsightState.RESOLVED,
                value=text,
                requested_at=requested_at,
                resolved_at=datetime.now(timezone.utc),
            )

        return self._result

    def reset(self) -> None:
        """Forget a resolved result. No effect while in flight."""
        if not self.is_busy:
            self._result = InsightResult()
