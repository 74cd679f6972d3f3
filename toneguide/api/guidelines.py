"""API endpoints for inspecting the loaded guideline corpus."""

from fastapi import APIRouter, Depends, Query

from toneguide.api.deps import get_index
from toneguide.core.config import get_settings
from toneguide.core.guidelines import RuleIndex
from toneguide.core.rule_selector import select_rules
from toneguide.core.schemas_guidelines import Audience, GuidelineSummary, Intent, Rule

router = APIRouter()


@router.get("/guidelines", response_model=GuidelineSummary)
async def get_guidelines(index: RuleIndex = Depends(get_index)) -> GuidelineSummary:
    """Dataset version and rule counts per category."""
    return index.summary()


@router.get("/guidelines/select", response_model=list[Rule])
async def preview_selection(
    intent: Intent = Query(Intent.GENERAL, description="Functional role of the string"),
    audience: Audience = Query(Audience.GENERAL, description="Target reader class"),
    index: RuleIndex = Depends(get_index),
) -> list[Rule]:
    """Rules that would be rendered into the prompt for this intent and audience."""
    return select_rules(index, intent, audience, max_rules=get_settings().MAX_SELECTED_RULES)
