"""
AI prompts for prospect scoring, analysis, chat, outreach and the morning brief.

Prompt builders take plain values so they can be tested without a model.
"""
import json
from typing import Any, Optional

from app.models.opportunity import PipelineStage, CLOSED_STAGES, SCORE_WEIGHTS


SCORE_FIELDS = tuple(SCORE_WEIGHTS)  # fit, need, timing, readiness


# ──────────────────────────────────────────────
# System instruction
# ──────────────────────────────────────────────

SYSTEM_INSTRUCTION = """You are the sales assistant of a marketing agency that works with home service
companies: HVAC, plumbing, electrical, pest control and roofing contractors.

## Goal
Help the sales team find, qualify and close home service companies. Give strategic
advice, draft outreach and judge how well a lead fits the agency.

## Ideal client
- Trades: HVAC, Plumbing, Electrical, Pest Control, Roofing.
- Annual revenue between $500K and $10M.
- Typical pain: weak website, poor Google presence, invisible to AI assistants,
  dependent on lead aggregators such as HomeAdvisor or Angi.

## Scoring model
Each factor is scored 1-10:
- Fit: trade alignment, company size, location.
- Need: web and search weakness, aggregator dependency.
- Timing: seasonality and triggers such as hiring or bad reviews.
- Readiness: budget and attitude.
Composite (0-100) = Fit x 2 + Need x 3 + Timing x 2 + Readiness x 3.

## Services to sell
Conversion-focused websites, local SEO and Google Business Profile,
AI visibility optimisation, paid search and Local Services Ads.

## Tone
Professional, strategic and action-oriented.
"""


# ──────────────────────────────────────────────
# Prompt builders
# ──────────────────────────────────────────────

def build_lead_score_prompt(company_name: str, industry: str, observations: str) -> str:
    """Prompt asking for the four sub-scores as a JSON object."""
    return f"""Score this prospect for the agency.
Company: {company_name}
Industry: {industry}
Observations: {observations or 'none'}

Return a JSON object with integer scores from 1 to 10:
- "fit": service alignment and size
- "need": website quality, search presence, AI visibility
- "timing": seasonality and buying signals
- "readiness": budget and attitude
and a "rationale" string of one or two sentences explaining the scores.
Respond with JSON only."""


def build_deep_analysis_prompt(company_name: str, industry: str, observations: str) -> str:
    return f"""Write a deep strategic analysis of this prospect.
Company: {company_name}
Industry: {industry}
Observations: {observations or 'none'}

Cover:
1. Hidden opportunities in their local market.
2. Competitive weaknesses implied by the observations.
3. A step-by-step 90-day plan to win their market.
4. Likely objections and how to answer them.

Be detailed and tactical."""


def build_outreach_email_prompt(company_name: str, pain_points: list[str], stage: str) -> str:
    points = ", ".join(p for p in pain_points if p) or "none recorded"
    return f"""Draft a short, punchy outreach email for {company_name}.
Pipeline stage: {stage}.
Observed pain points: {points}.
Lead with value rather than features and refer to the agency's experience in their trade."""


def brief_context(deals: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Reduce deals (camelCase dicts) to the open ones and the fields the brief needs."""
    closed = {stage.value for stage in CLOSED_STAGES}
    context = []
    for deal in deals:
        stage = deal.get("stage")
        if isinstance(stage, PipelineStage):
            stage = stage.value
        if stage in closed:
            continue
        score = deal.get("score") or {}
        context.append({
            "name": deal.get("companyName"),
            "stage": stage,
            "score": score.get("composite") or "N/A",
            "lastContact": deal.get("lastContact") or "Never",
            "revenue": deal.get("revenueRange"),
        })
    return context


def build_morning_brief_prompt(deals: list[dict[str, Any]]) -> str:
    return f"""Act as a sales director and write a morning brief for the active pipeline below.

Active pipeline:
{json.dumps(brief_context(deals), ensure_ascii=False)}

1. List 3 critical action items (stalled deals, high-value opportunities).
2. List 2-3 risks (deals stuck early in the pipeline, missing follow-ups).
3. Write a two-sentence summary of pipeline health.

Respond with JSON only:
{{"summary": "...", "actionItems": ["..."], "risks": ["..."]}}"""


# ──────────────────────────────────────────────
# Response parsing
# ──────────────────────────────────────────────

def clamp_subscore(value: Any) -> Optional[float]:
    """Coerce a model-provided sub-score into 1..10, or None if unusable."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return max(1.0, min(10.0, round(number, 1)))


def parse_lead_score(raw: str) -> dict[str, Any]:
    """
    Parse and normalise the model's score JSON.
    Raises ValueError if the payload is not usable.
    """
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("Score response is not a JSON object")

    parsed: dict[str, Any] = {}
    for field in SCORE_FIELDS:
        value = clamp_subscore(data.get(field))
        if value is None:
            raise ValueError(f"Score response missing numeric '{field}'")
        parsed[field] = value
    parsed["rationale"] = str(data.get("rationale") or "").strip()
    return parsed
