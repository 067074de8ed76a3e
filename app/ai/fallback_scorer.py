"""
Fallback Lead Scorer — Rule-Based

Activated when the AI provider is unavailable. Produces a deterministic
baseline from the industry and keywords in the salesperson's observations,
so scoring degrades instead of failing.
"""
from app.models.opportunity import composite_score

CORE_INDUSTRIES = {"hvac", "plumbing", "electrical", "roofing", "pest control"}

NEED_SIGNALS = (
    "outdated",
    "no website",
    "bad website",
    "old website",
    "homeadvisor",
    "aggregator",
    "few reviews",
    "weak seo",
    "not on google",
)
TIMING_SIGNALS = (
    "hiring",
    "season",
    "expanding",
    "new location",
    "bad review",
    "new owner",
)
READINESS_SIGNALS = (
    "has budget",
    "budget approved",
    "asked for a quote",
    "responded",
    "called back",
    "wants to grow",
)
READINESS_BLOCKERS = (
    "no budget",
    "not interested",
    "never replied",
    "locked into contract",
)


def _count(text: str, phrases: tuple[str, ...]) -> list[str]:
    return [p for p in phrases if p in text]


def _bounded(value: float) -> float:
    return float(max(1, min(10, value)))


def rule_based_score(company_name: str, industry: str, observations: str) -> dict:
    """
    Compute a lead score without the AI provider.
    Returns a dict with keys: fit, need, timing, readiness, composite, rationale.
    Sub-scores are in [1, 10], composite in [10, 100].
    """
    text = (observations or "").lower()
    reasons: list[str] = []

    # ── Fit: trade alignment ──────────────────────
    if (industry or "").strip().lower() in CORE_INDUSTRIES:
        fit = 8.0
        reasons.append(f"core-trade={industry}")
    else:
        fit = 5.0
        reasons.append("non-core-trade")

    # ── Need / timing / readiness: keyword signals ──
    need_hits = _count(text, NEED_SIGNALS)
    need = _bounded(4 + 2 * len(need_hits))
    if need_hits:
        reasons.append(f"need({', '.join(need_hits)})")

    timing_hits = _count(text, TIMING_SIGNALS)
    timing = _bounded(4 + 2 * len(timing_hits))
    if timing_hits:
        reasons.append(f"timing({', '.join(timing_hits)})")

    ready_hits = _count(text, READINESS_SIGNALS)
    blockers = _count(text, READINESS_BLOCKERS)
    readiness = _bounded(4 + 2 * len(ready_hits) - 2 * len(blockers))
    if ready_hits:
        reasons.append(f"readiness({', '.join(ready_hits)})")
    if blockers:
        reasons.append(f"blockers({', '.join(blockers)})")

    composite = composite_score(fit, need, timing, readiness)
    rationale = (
        f"[RULE-BASED / AI OFFLINE] {company_name}: "
        f"signals {', '.join(reasons) or 'none'}. Composite {composite:.0f}."
    )

    return {
        "fit": fit,
        "need": need,
        "timing": timing,
        "readiness": readiness,
        "composite": composite,
        "rationale": rationale,
    }
