"""
AI Service — advisory layer only.

Contract:
  - Receives plain prospect facts or deals
  - Returns scores and text for a human to act on
  - NEVER writes to the store; saving a score is the pipeline's job
  - Lead scores are cached in Redis (TTL settings.AI_CACHE_TTL) keyed by an
    input hash; without Redis every call goes to the provider
  - Scoring falls back to rule_based_score when the provider is down
"""
import json
import logging
import hashlib
from typing import Optional

import redis.asyncio as redis
from openai import AsyncOpenAI, OpenAIError

from app.core.config import settings
from app.models.opportunity import composite_score
from app.schemas.ai import ChatTurn, ChatReply, MorningBrief
from app.schemas.deal import Deal, LeadScore
from app.ai.prompts import (
    SYSTEM_INSTRUCTION,
    build_lead_score_prompt,
    build_deep_analysis_prompt,
    build_outreach_email_prompt,
    build_morning_brief_prompt,
    parse_lead_score,
)
from app.ai.fallback_scorer import rule_based_score

logger = logging.getLogger(__name__)

# Errors that mean "the provider did not give us something usable"
_PROVIDER_ERRORS = (OpenAIError, ValueError, TypeError, IndexError, KeyError)


class AIServiceError(Exception):
    """Raised when AI service fails."""
    pass


class AIService:
    def __init__(self, system_instruction: Optional[str] = None):
        self.client = AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
        self.model = settings.OPENAI_MODEL
        self.analysis_model = settings.OPENAI_ANALYSIS_MODEL
        self.system_instruction = system_instruction or SYSTEM_INSTRUCTION
        self._redis: Optional[redis.Redis] = None

    async def _get_redis(self) -> Optional[redis.Redis]:
        """Get or create Redis connection."""
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.REDIS_URL,
                    encoding="utf-8",
                    decode_responses=True
                )
                await self._redis.ping()
                logger.info("Redis connection established for AI caching")
            except (redis.RedisError, OSError) as e:
                logger.warning(f"Redis unavailable, caching disabled: {e}")
                self._redis = None
        return self._redis

    async def aclose(self) -> None:
        """Release the Redis pool and the provider's HTTP client."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
        await self.client.close()

    def _get_cache_key(self, company_name: str, industry: str, observations: str) -> str:
        """Cache key based on the scoring inputs and the active instruction."""
        features = {
            "company": company_name.strip().lower(),
            "industry": industry.strip().lower(),
            "observations": observations.strip(),
            "model": self.model,
            "instruction": hashlib.sha256(self.system_instruction.encode()).hexdigest()[:8],
        }
        features_json = json.dumps(features, sort_keys=True)
        hash_value = hashlib.sha256(features_json.encode()).hexdigest()[:16]
        return f"ai:prospect:score:{hash_value}"

    async def _get_cached_score(self, cache_key: str) -> Optional[LeadScore]:
        redis_client = await self._get_redis()
        if not redis_client:
            return None

        try:
            cached = await redis_client.get(cache_key)
            if cached:
                logger.info(f"Cache hit for {cache_key}")
                return LeadScore.model_validate_json(cached)
        except (redis.RedisError, ValueError) as e:
            logger.warning(f"Cache read error: {e}")
        return None

    async def _set_cached_score(self, cache_key: str, result: LeadScore) -> None:
        redis_client = await self._get_redis()
        if not redis_client:
            return

        try:
            await redis_client.setex(cache_key, settings.AI_CACHE_TTL, result.model_dump_json())
        except redis.RedisError as e:
            logger.warning(f"Cache write error: {e}")

    async def _complete(self, prompt: str, *, model: Optional[str] = None, json_mode: bool = False, **kwargs) -> str:
        """Single-turn completion under the system instruction. Returns '' when the model said nothing."""
        params = {
            "model": model or self.model,
            "messages": [
                {"role": "system", "content": self.system_instruction},
                {"role": "user", "content": prompt},
            ],
            **kwargs,
        }
        if json_mode:
            params["response_format"] = {"type": "json_object"}
        response = await self.client.chat.completions.create(**params)
        return response.choices[0].message.content or ""

    async def score_lead(self, company_name: str, industry: str, observations: str) -> LeadScore:
        """
        Score a prospect. The composite is always recomputed from the
        sub-scores; the model's own arithmetic is ignored.
        """
        cache_key = self._get_cache_key(company_name, industry, observations)
        cached = await self._get_cached_score(cache_key)
        if cached:
            return cached

        prompt = build_lead_score_prompt(company_name, industry, observations)
        try:
            raw = await self._complete(prompt, json_mode=True, temperature=0.2, max_tokens=400)
            parsed = parse_lead_score(raw)
        except _PROVIDER_ERRORS as e:
            logger.warning(f"AI scoring unavailable for {company_name}, using rule-based fallback: {e}")
            return LeadScore(**rule_based_score(company_name, industry, observations))

        parsed["composite"] = composite_score(
            parsed["fit"], parsed["need"], parsed["timing"], parsed["readiness"]
        )
        result = LeadScore(**parsed)
        await self._set_cached_score(cache_key, result)
        return result

    async def deep_analysis(self, company_name: str, industry: str, observations: str) -> str:
        prompt = build_deep_analysis_prompt(company_name, industry, observations)
        try:
            text = await self._complete(prompt, model=self.analysis_model, temperature=0.7)
        except _PROVIDER_ERRORS as e:
            logger.error(f"Error generating deep analysis: {e}")
            return "Error generating analysis. Please try again."
        return text or "Could not generate deep analysis."

    async def chat(self, message: str, history: list[ChatTurn]) -> ChatReply:
        """
        Continue a conversation. Unlike the other calls, a provider failure
        is raised so the caller can tell the user the assistant is offline.
        """
        messages = [{"role": "system", "content": self.system_instruction}]
        for turn in history:
            role = "assistant" if turn.role == "model" else "user"
            messages.append({"role": role, "content": turn.text})
        messages.append({"role": "user", "content": message})

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=0.7,
            )
            text = response.choices[0].message.content
        except _PROVIDER_ERRORS as e:
            logger.error(f"Error in chat: {e}")
            raise AIServiceError(str(e)) from e

        return ChatReply(text=text or "No response generated.")

    async def draft_outreach_email(self, company_name: str, pain_points: list[str], stage: str) -> str:
        prompt = build_outreach_email_prompt(company_name, pain_points, stage)
        try:
            text = await self._complete(prompt, temperature=0.8)
        except _PROVIDER_ERRORS as e:
            logger.error(f"Error drafting email: {e}")
            return "Error generating email."
        return text or "Could not generate email."

    async def morning_brief(self, deals: list[Deal]) -> Optional[MorningBrief]:
        """Brief on the open deals. Returns None when no usable brief came back."""
        prompt = build_morning_brief_prompt([deal.to_wire() for deal in deals])
        try:
            raw = await self._complete(prompt, json_mode=True, temperature=0.5)
            if not raw:
                return None
            return MorningBrief.model_validate(json.loads(raw))
        except _PROVIDER_ERRORS as e:
            logger.error(f"Error generating morning brief: {e}")
            return None
