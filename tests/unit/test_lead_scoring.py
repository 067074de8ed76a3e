"""
Unit tests for the scoring model: composite formula, stage order,
prompt parsing and the rule-based fallback.
"""
import json

import pytest

from app.ai.fallback_scorer import rule_based_score
from app.ai.prompts import (
    brief_context,
    build_lead_score_prompt,
    build_morning_brief_prompt,
    clamp_subscore,
    parse_lead_score,
)
from app.models.opportunity import PipelineStage, ADVANCE_ORDER, composite_score, next_stage


class TestCompositeScore:
    def test_weighted_formula(self):
        assert composite_score(9, 9, 10, 8) == 89

    def test_bounds(self):
        assert composite_score(1, 1, 1, 1) == 10
        assert composite_score(10, 10, 10, 10) == 100


class TestStageOrder:
    def test_advance_order(self):
        assert ADVANCE_ORDER == [
            PipelineStage.PROSPECT,
            PipelineStage.OUTREACH,
            PipelineStage.ENGAGED,
            PipelineStage.PROPOSAL,
            PipelineStage.NEGOTIATION,
        ]

    def test_next_stage(self):
        assert next_stage(PipelineStage.ENGAGED) == PipelineStage.PROPOSAL

    @pytest.mark.parametrize("stage", [
        PipelineStage.NEGOTIATION,
        PipelineStage.DISCOVERY,
        PipelineStage.CLOSED_WON,
        PipelineStage.CLOSED_LOST,
    ])
    def test_cannot_advance(self, stage):
        assert next_stage(stage) is None


class TestParseLeadScore:
    def test_valid_payload(self):
        raw = json.dumps({"fit": 9, "need": 8, "timing": 7, "readiness": 6, "rationale": " Strong fit. "})
        parsed = parse_lead_score(raw)
        assert parsed == {"fit": 9.0, "need": 8.0, "timing": 7.0, "readiness": 6.0, "rationale": "Strong fit."}

    def test_subscores_are_clamped(self):
        parsed = parse_lead_score(json.dumps({"fit": 14, "need": 0, "timing": "7", "readiness": -3}))
        assert parsed["fit"] == 10.0
        assert parsed["need"] == 1.0
        assert parsed["timing"] == 7.0
        assert parsed["readiness"] == 1.0
        assert parsed["rationale"] == ""

    def test_missing_field_raises(self):
        with pytest.raises(ValueError):
            parse_lead_score(json.dumps({"fit": 9, "need": 8, "timing": 7}))

    def test_not_json_raises(self):
        with pytest.raises(ValueError):
            parse_lead_score("I think this lead is great")

    def test_not_an_object_raises(self):
        with pytest.raises(ValueError):
            parse_lead_score("[1, 2, 3]")

    def test_clamp_rejects_garbage(self):
        assert clamp_subscore("high") is None
        assert clamp_subscore(None) is None


class TestPrompts:
    def test_score_prompt_mentions_inputs(self):
        prompt = build_lead_score_prompt("Acme HVAC", "HVAC", "outdated website")
        assert "Acme HVAC" in prompt
        assert "outdated website" in prompt
        assert "JSON" in prompt

    def test_brief_context_skips_closed_deals(self):
        deals = [
            {"companyName": "Open Co", "stage": "OUTREACH", "score": {"composite": 72}, "revenueRange": "$1M-$5M"},
            {"companyName": "Won Co", "stage": "CLOSED_WON"},
            {"companyName": "Lost Co", "stage": "CLOSED_LOST"},
            {"companyName": "New Co", "stage": "PROSPECT"},
        ]
        context = brief_context(deals)
        assert [c["name"] for c in context] == ["Open Co", "New Co"]
        assert context[0]["score"] == 72
        assert context[1]["score"] == "N/A"
        assert context[1]["lastContact"] == "Never"

    def test_brief_prompt_embeds_pipeline(self):
        prompt = build_morning_brief_prompt([{"companyName": "Open Co", "stage": "ENGAGED"}])
        assert "Open Co" in prompt
        assert "actionItems" in prompt


class TestRuleBasedScore:
    def test_core_trade_with_signals(self):
        result = rule_based_score(
            "Cool Air",
            "HVAC",
            "Outdated website, relies on HomeAdvisor. Hiring two techs. Owner has budget.",
        )
        assert result["fit"] == 8.0
        assert result["need"] == 8.0      # outdated + homeadvisor
        assert result["timing"] == 6.0    # hiring
        assert result["readiness"] == 6.0  # has budget
        assert result["composite"] == composite_score(8, 8, 6, 6)
        assert result["rationale"].startswith("[RULE-BASED / AI OFFLINE] Cool Air")

    def test_non_core_trade_without_signals(self):
        result = rule_based_score("Sparkle Cleaning", "Cleaning", "")
        assert result["fit"] == 5.0
        assert result["need"] == 4.0
        assert result["timing"] == 4.0
        assert result["readiness"] == 4.0
        assert "non-core-trade" in result["rationale"]

    def test_blockers_lower_readiness_but_not_below_one(self):
        result = rule_based_score(
            "Drip Plumbing",
            "plumbing",
            "No budget, not interested, never replied, locked into contract",
        )
        assert result["readiness"] == 1.0
        assert result["fit"] == 8.0

    def test_subscores_capped_at_ten(self):
        observations = "outdated, no website, aggregator, few reviews, weak seo, not on google"
        assert rule_based_score("X", "Roofing", observations)["need"] == 10.0
