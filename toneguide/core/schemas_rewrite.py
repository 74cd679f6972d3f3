"""Pydantic schemas for variant generation and history tracking."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from toneguide.core.schemas_guidelines import Audience, Intent, Rule

VARIANT_COUNT = 3


# =======================
# Generation models
# =======================


class GenerationRequest(BaseModel):
    """Everything the prompt builder renders into a single generation call."""

    original_text: str
    intent: Intent
    audience: Audience
    instructions: str | None = None
    selected_rules: list[Rule] = Field(
        default_factory=list, description="Relevance-ordered, deduplicated by id"
    )

    @property
    def selected_rule_ids(self) -> list[str]:
        return [rule.id for rule in self.selected_rules]


class Variant(BaseModel):
    """One candidate rewrite plus its justification."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1)
    rationale: str = Field(..., min_length=1)
    applied_rules: list[str] = Field(
        default_factory=list,
        alias="appliedRules",
        description="Rule ids the generator cited (not cross-checked against the corpus)",
    )


class VariantSet(BaseModel):
    """Exactly three variants, produced all-or-nothing."""

    variants: list[Variant] = Field(..., min_length=VARIANT_COUNT, max_length=VARIANT_COUNT)

    def __len__(self) -> int:
        return len(self.variants)

    def __getitem__(self, index: int) -> Variant:
        return self.variants[index]

    @property
    def texts(self) -> list[str]:
        return [v.text for v in self.variants]


class GenerationMode(str, Enum):
    """Which path produced a VariantSet."""

    REMOTE = "remote"
    FALLBACK = "fallback"


class GenerationState(str, Enum):
    """Orchestrator states, terminal ones prefixed with done_."""

    IDLE = "idle"
    SELECTING = "selecting"
    BUILDING = "building"
    CALLING = "calling"
    PARSING = "parsing"
    DONE_REMOTE = "done_remote"
    DONE_FALLBACK = "done_fallback"


class GenerationStatus(BaseModel):
    """Status event emitted once per generate() call."""

    mode: GenerationMode
    state: GenerationState
    reason: str | None = Field(default=None, description="Why the fallback was used")
    duration_ms: int = 0

    @property
    def offline(self) -> bool:
        return self.mode == GenerationMode.FALLBACK


class GenerationResult(BaseModel):
    """What generate() hands back to the caller."""

    variants: VariantSet
    mode: GenerationMode
    dataset_version: str
    selected_rule_ids: list[str] = Field(default_factory=list)
    states: list[GenerationState] = Field(default_factory=list)
    error: str | None = None

    @property
    def offline(self) -> bool:
        return self.mode == GenerationMode.FALLBACK


# =======================
# History models
# =======================


class HistoryItem(BaseModel):
    """One applied text, stored as {text, ts (epoch ms), datasetVersion}."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    applied_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias="ts"
    )
    dataset_version: str = Field(..., alias="datasetVersion")

    @field_validator("applied_at", mode="before")
    @classmethod
    def _from_epoch_ms(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (OverflowError, OSError) as e:
                raise ValueError(f"timestamp out of range: {value}") from e
        return value

    @field_serializer("applied_at")
    def _to_epoch_ms(self, value: datetime) -> int:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp() * 1000)


# =======================
# API request/response models
# =======================


class RewriteRequest(BaseModel):
    """Request body for the rewrite endpoint."""

    original_text: str = Field(..., max_length=2000, description="UI string to rewrite")
    intent: Intent = Field(default=Intent.GENERAL, description="Functional role of the string")
    audience: Audience = Field(default=Audience.GENERAL, description="Target reader class")
    instructions: str | None = Field(
        default=None, max_length=1000, description="Free-form override instructions"
    )


class RewriteResponse(BaseModel):
    """Response body for the rewrite endpoint."""

    variants: list[Variant]
    mode: GenerationMode
    offline: bool
    dataset_version: str
    selected_rule_ids: list[str] = Field(default_factory=list)


class ApplyHistoryRequest(BaseModel):
    """Request body for recording an applied variant."""

    text: str = Field(..., min_length=1, description="Text that was applied to the target")


class HistoryResponse(BaseModel):
    """Response body for history endpoints."""

    target_id: str
    items: list[HistoryItem] = Field(default_factory=list)


class ApplyResult(BaseModel):
    """Outcome of applying a variant to a target."""

    ok: bool
    error: str | None = None
