# AI package

from app.ai.ai_service import AIService, AIServiceError
from app.ai.fallback_scorer import rule_based_score

__all__ = [
    "AIService",
    "AIServiceError",
    "rule_based_score",
]
