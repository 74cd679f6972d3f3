"""Pydantic schemas for the brand voice guideline corpus."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleCategory(str, Enum):
    """Functional area a guideline rule applies to."""

    CTA = "cta"
    TOOLTIP = "tooltip"
    ERROR = "error"
    HELPER = "helper"
    LABEL = "label"
    DIALOG_TITLE = "dialog-title"
    VOICE = "voice"
    GENERAL = "general"


class Intent(str, Enum):
    """Functional role of the UI string being rewritten."""

    CTA = "cta"
    TOOLTIP = "tooltip"
    ERROR = "error"
    HELPER = "helper"
    LABEL = "label"
    DIALOG_TITLE = "dialog-title"
    GENERAL = "general"


class Audience(str, Enum):
    """Reader class used to filter applicable guidance."""

    GENERAL = "general"
    END_USER = "end-user"
    IT_ADMIN = "it-admin"


# Categories whose rules apply to every intent
BRAND_WIDE_CATEGORIES = (RuleCategory.VOICE, RuleCategory.GENERAL)


class Rule(BaseModel):
    """A single atomic piece of style guidance with a stable id for citation."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable, corpus-unique rule id")
    category: RuleCategory = Field(..., description="Category the rule belongs to")
    audience: frozenset[Audience] = Field(
        default_factory=lambda: frozenset({Audience.GENERAL}),
        description="Audiences the rule applies to",
    )
    text: str = Field(..., min_length=1, description="Guidance text")

    @field_validator("id", "text")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("audience", mode="before")
    @classmethod
    def _coerce_audience(cls, value):
        if isinstance(value, str):
            return [value]
        return value

    def applies_to(self, audience: Audience | None) -> bool:
        """True if the rule targets `audience` or is tagged for everyone."""
        if audience is None:
            return True
        return audience in self.audience or Audience.GENERAL in self.audience

    @property
    def is_brand_wide(self) -> bool:
        return self.category in BRAND_WIDE_CATEGORIES


class GuidelineCorpus(BaseModel):
    """Versioned corpus document as stored on disk."""

    model_config = ConfigDict(populate_by_name=True)

    dataset_version: str = Field(..., alias="datasetVersion", min_length=1)
    rules: list[Rule] = Field(..., description="Top-level rule list")


class GuidelineSummary(BaseModel):
    """Response body for the guideline overview endpoint."""

    dataset_version: str
    rule_count: int
    categories: dict[str, int] = Field(
        default_factory=dict, description="Rule count per category"
    )
