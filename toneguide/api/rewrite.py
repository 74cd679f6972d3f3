"""API endpoint for generating rewrite variants."""

from fastapi import APIRouter, Depends

from toneguide.api.deps import get_orchestrator
from toneguide.core.logging import get_logger
from toneguide.core.rewrite_orchestrator import RewriteOrchestrator
from toneguide.core.schemas_rewrite import RewriteRequest, RewriteResponse

logger = get_logger(__name__)

router = APIRouter()


@router.post("/rewrite", response_model=RewriteResponse)
async def rewrite_text(
    request: RewriteRequest,
    orchestrator: RewriteOrchestrator = Depends(get_orchestrator),
) -> RewriteResponse:
    """
    Rewrite a UI string into three brand-aligned variants.

    Always answers with three variants. When the generation backend is
    unavailable the response carries mode="fallback" and offline=true.

    Args:
        request: RewriteRequest with original_text, intent, audience, instructions

    Returns:
        RewriteResponse with the variants and the path that produced them
    """
    result = await orchestrator.generate(
        request.original_text,
        intent=request.intent,
        audience=request.audience,
        instructions=request.instructions,
    )

    if result.offline:
        logger.info("Serving offline fallback variants", extra={"reason": result.error})

    return RewriteResponse(
        variants=result.variants.variants,
        mode=result.mode,
        offline=result.offline,
        dataset_version=result.dataset_version,
        selected_rule_ids=result.selected_rule_ids,
    )
