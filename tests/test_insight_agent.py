"""Tests for the AI insight agent and its request state machine."""

import asyncio
import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from kitabkhata.agents import (
    ERROR_MESSAGE,
    NO_DATA_MESSAGE,
    InsightBusyError,
    InsightGenerationError,
    InsightRequest,
    InsightState,
    LedgerInsightAgent,
)
from kitabkhata.config import GeminiSettings


def _agent(reply=None, side_effect=None, timeout=5.0):
    model = MagicMock()
    model.generate_content_async = AsyncMock(
        return_value=SimpleNamespace(text=reply),
        side_effect=side_effect,
    )
    settings = GeminiSettings(api_key="test-key", timeout_seconds=timeout)
    return LedgerInsightAgent(settings=settings, model=model), model


class TestLedgerInsightAgent:

    def test_context_has_only_summary_fields(self, ledger):
        context = LedgerInsightAgent.build_context(ledger)
        assert context[0] == {
            "date": "2024-03-12",
            "name": "Ravi Kumar",
            "book": "RD Sharma Maths",
            "price": 800.0,
            "paid": 0.0,
            "balance": 800.0,
        }

    def test_prompt_embeds_data(self, ledger):
        agent, _ = _agent("ok")
        prompt = agent.build_prompt(ledger)
        assert "Hinglish" in prompt
        data = json.loads(prompt.split("Data: ", 1)[1])
        assert len(data) == 3

    @pytest.mark.asyncio
    async def test_empty_ledger_skips_model(self):
        agent, model = _agent("unused")
        assert await agent.generate_insight([]) == NO_DATA_MESSAGE
        model.generate_content_async.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_model_text(self, ledger):
        agent, model = _agent("  Ravi ji se 1100 lene hain.  ")
        assert await agent.generate_insight(ledger) == "Ravi ji se 1100 lene hain."
        model.generate_content_async.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_model_error_is_wrapped(self, ledger):
        agent, _ = _agent(side_effect=RuntimeError("network down"))
        with pytest.raises(InsightGenerationError, match="network down"):
            await agent.generate_insight(ledger)

    @pytest.mark.asyncio
    async def test_empty_reply_is_an_error(self, ledger):
        agent, _ = _agent("   ")
        with pytest.raises(InsightGenerationError):
            await agent.generate_insight(ledger)

    @pytest.mark.asyncio
    async def test_timeout(self, ledger):
        async def slow(_prompt):
            await asyncio.sleep(1)

        agent, _ = _agent(side_effect=slow, timeout=0.01)
        with pytest.raises(InsightGenerationError, match="did not answer"):
            await agent.generate_insight(ledger)

    @pytest.mark.asyncio
    async def test_analyze_never_raises(self, ledger):
        agent, _ = _agent(side_effect=RuntimeError("boom"))
        assert await agent.analyze(ledger) == ERROR_MESSAGE


@pytest.mark.asyncio
class TestInsightRequest:

    async def test_success(self, ledger):
        agent, _ = _agent("Summary")
        request = InsightRequest(agent)
        assert request.state == InsightState.IDLE

        result = await request.run(ledger)
        assert result.state == InsightState.RESOLVED
        assert result.succeeded
        assert result.value == "Summary"
        assert result.display_text == "Summary"
        assert result.resolved_at >= result.requested_at
        assert result.requested_at.tzinfo is not None

    async def test_failure_resolves_with_message(self, ledger):
        agent, _ = _agent(side_effect=RuntimeError("boom"))
        request = InsightRequest(agent)

        result = await request.run(ledger)
        assert result.state == InsightState.RESOLVED
        assert not result.succeeded
        assert result.error == ERROR_MESSAGE
        assert "boom" in result.detail
        assert result.display_text == ERROR_MESSAGE

    async def test_second_request_while_in_flight_is_rejected(self, ledger):
        release = asyncio.Event()

        async def wait_for_release(_prompt):
            await release.wait()
            return SimpleNamespace(text="done")

        agent, _ = _agent(side_effect=wait_for_release)
        request = InsightRequest(agent)

        first = asyncio.create_task(request.run(ledger))
        await asyncio.sleep(0)
        assert request.is_busy

        with pytest.raises(InsightBusyError):
            await request.run(ledger)

        release.set()
        result = await first
        assert result.value == "done"
        assert not request.is_busy

    async def test_can_run_again_after_resolving(self, ledger):
        agent, model = _agent("again")
        request = InsightRequest(agent)
        await request.run(ledger)
        await request.run(ledger)
        assert model.generate_content_async.await_count == 2

    async def test_cancel_returns_to_idle(self, ledger):
        async def hang(_prompt):
            await asyncio.sleep(10)

        agent, _ = _agent(side_effect=hang)
        request = InsightRequest(agent)
        task = asyncio.create_task(request.run(ledger))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert request.state == InsightState.IDLE

    async def test_reset(self, ledger):
        agent, _ = _agent("x")
        request = InsightRequest(agent)
        await request.run(ledger)
        request.reset()
        assert request.state == InsightState.IDLE
        assert request.result.value is None
