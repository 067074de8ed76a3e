"""
Unit tests for AIService with the OpenAI client and Redis mocked out.
"""
import json

import pytest
from unittest.mock import AsyncMock, MagicMock
from openai import APIConnectionError
import httpx

from app.ai.ai_service import AIService, AIServiceError
from app.ai.prompts import SYSTEM_INSTRUCTION
from app.core.deps import get_ai_service
from app.models.opportunity import PipelineStage
from app.schemas.ai import ChatTurn
from app.schemas.deal import Deal, LeadScore


def make_completion(content):
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = content
    return response


def provider_down():
    return APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


class TestScoreLead:
    async def test_composite_recomputed_from_subscores(self, ai_service, openai_client):
        openai_client.chat.completions.create.return_value = make_completion(json.dumps({
            "fit": 9, "need": 9, "timing": 10, "readiness": 8,
            "composite": 12, "rationale": "Great fit",
        }))

        score = await ai_service.score_lead("Cool Air", "HVAC", "outdated site")

        assert score.composite == 89
        assert score.rationale == "Great fit"
        kwargs = openai_client.chat.completions.create.call_args.kwargs
        assert kwargs["response_format"] == {"type": "json_object"}

    async def test_provider_failure_falls_back_to_rules(self, ai_service, openai_client):
        openai_client.chat.completions.create.side_effect = provider_down()

        score = await ai_service.score_lead("Cool Air", "HVAC", "hiring")

        assert score.rationale.startswith("[RULE-BASED / AI OFFLINE]")
        assert score.fit == 8.0
        assert score.timing == 6.0

    async def test_unparseable_response_falls_back(self, ai_service, openai_client):
        openai_client.chat.completions.create.return_value = make_completion("not json")

        score = await ai_service.score_lead("Cool Air", "HVAC", "")

        assert score.rationale.startswith("[RULE-BASED / AI OFFLINE]")

    async def test_cache_hit_skips_provider(self, ai_service, openai_client):
        cached = LeadScore(fit=5, need=5, timing=5, readiness=5, composite=50, rationale="cached")
        redis_client = AsyncMock()
        redis_client.get.return_value = cached.model_dump_json()
        ai_service._get_redis = AsyncMock(return_value=redis_client)

        score = await ai_service.score_lead("Cool Air", "HVAC", "")

        assert score == cached
        openai_client.chat.completions.create.assert_not_called()

    async def test_fresh_score_is_cached(self, ai_service, openai_client):
        redis_client = AsyncMock()
        redis_client.get.return_value = None
        ai_service._get_redis = AsyncMock(return_value=redis_client)
        openai_client.chat.completions.create.return_value = make_completion(json.dumps({
            "fit": 5, "need": 5, "timing": 5, "readiness": 5,
        }))

        await ai_service.score_lead("Cool Air", "HVAC", "")

        redis_client.setex.assert_awaited_once()

    def test_cache_key_depends_on_instruction(self):
        default = AIService()
        custom = AIService(system_instruction="Only score roofers.")
        assert default.system_instruction == SYSTEM_INSTRUCTION
        assert default._get_cache_key("A", "HVAC", "") != custom._get_cache_key("A", "HVAC", "")


class TestTextCalls:
    async def test_deep_analysis_uses_analysis_model(self, ai_service, openai_client):
        openai_client.chat.completions.create.return_value = make_completion("A long analysis")

        text = await ai_service.deep_analysis("Cool Air", "HVAC", "")

        assert text == "A long analysis"
        assert openai_client.chat.completions.create.call_args.kwargs["model"] == ai_service.analysis_model

    async def test_deep_analysis_error_text(self, ai_service, openai_client):
        openai_client.chat.completions.create.side_effect = provider_down()
        assert await ai_service.deep_analysis("Cool Air", "HVAC", "") == \
            "Error generating analysis. Please try again."

    async def test_deep_analysis_empty_text(self, ai_service, openai_client):
        assert await ai_service.deep_analysis("Cool Air", "HVAC", "") == "Could not generate deep analysis."

    async def test_email_error_text(self, ai_service, openai_client):
        openai_client.chat.completions.create.side_effect = provider_down()
        assert await ai_service.draft_outreach_email("Cool Air", ["slow site"], "PROSPECT") == \
            "Error generating email."

    async def test_chat_maps_history_roles(self, ai_service, openai_client):
        openai_client.chat.completions.create.return_value = make_completion("Call them Tuesday.")
        history = [ChatTurn(role="user", text="Who first?"), ChatTurn(role="model", text="Cool Air.")]

        reply = await ai_service.chat("When?", history)

        assert reply.text == "Call them Tuesday."
        messages = openai_client.chat.completions.create.call_args.kwargs["messages"]
        assert [m["role"] for m in messages] == ["system", "user", "assistant", "user"]
        assert messages[-1]["content"] == "When?"

    async def test_chat_failure_raises(self, ai_service, openai_client):
        openai_client.chat.completions.create.side_effect = provider_down()
        with pytest.raises(AIServiceError):
            await ai_service.chat("Hello", [])


class TestMorningBrief:
    async def test_brief_parsed(self, ai_service, openai_client):
        openai_client.chat.completions.create.return_value = make_completion(json.dumps({
            "summary": "Healthy.", "actionItems": ["Call Cool Air"], "risks": ["Stalled proposal"],
        }))
        deals = [Deal(id="1", company_name="Cool Air", stage=PipelineStage.PROPOSAL)]

        brief = await ai_service.morning_brief(deals)

        assert brief.summary == "Healthy."
        assert brief.action_items == ["Call Cool Air"]
        assert brief.risks == ["Stalled proposal"]

    async def test_closed_deals_not_sent(self, ai_service, openai_client):
        deals = [
            Deal(id="1", company_name="Open Co", stage=PipelineStage.ENGAGED),
            Deal(id="2", company_name="Done Co", stage=PipelineStage.CLOSED_WON),
        ]
        await ai_service.morning_brief(deals)

        prompt = openai_client.chat.completions.create.call_args.kwargs["messages"][-1]["content"]
        assert "Open Co" in prompt
        assert "Done Co" not in prompt

    async def test_empty_or_invalid_brief_is_none(self, ai_service, openai_client):
        assert await ai_service.morning_brief([]) is None

        openai_client.chat.completions.create.return_value = make_completion('{"risks": []}')
        assert await ai_service.morning_brief([]) is None


class TestLifecycle:
    async def test_aclose_releases_redis_and_provider(self, ai_service, openai_client):
        redis_client = AsyncMock()
        ai_service._redis = redis_client
        openai_client.close = AsyncMock()

        await ai_service.aclose()

        redis_client.aclose.assert_awaited_once()
        openai_client.close.assert_awaited_once()
        assert ai_service._redis is None

    async def test_dependency_closes_service_after_request(self, monkeypatch):
        settings_service = MagicMock()
        settings_service.get_config = AsyncMock(return_value=MagicMock(system_instruction=""))
        closed = AsyncMock()
        monkeypatch.setattr(AIService, "aclose", closed)

        dependency = get_ai_service(settings_service)
        ai = await dependency.__anext__()
        assert isinstance(ai, AIService)
        assert ai.system_instruction == SYSTEM_INSTRUCTION
        closed.assert_not_awaited()

        with pytest.raises(StopAsyncIteration):
            await dependency.__anext__()
        closed.assert_awaited_once()
