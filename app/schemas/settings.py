from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.sanitization import sanitize_labels, sanitize_long


DEFAULT_INDUSTRIES = ["HVAC", "Plumbing", "Electrical", "Roofing", "Pest Control", "Other"]


class AppConfig(BaseModel):
    """Admin-editable settings."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    industries: list[str] = Field(default_factory=lambda: list(DEFAULT_INDUSTRIES))
    # Empty means "use the built-in system instruction"
    system_instruction: str = ""

    @field_validator("industries", mode="before")
    @classmethod
    def dedupe(cls, v):
        return sanitize_labels(v) if isinstance(v, list) else v

    @field_validator("system_instruction", mode="before")
    @classmethod
    def clean_instruction(cls, v):
        if isinstance(v, str):
            return sanitize_long(v) or ""
        return v
