"""API endpoints for per-target history of applied text."""

from fastapi import APIRouter, Depends, HTTPException, Path

from toneguide.api.deps import get_history_ledger, get_index
from toneguide.core.guidelines import RuleIndex
from toneguide.core.logging import get_logger
from toneguide.core.rewrite_orchestrator import apply_history
from toneguide.core.schemas_rewrite import ApplyHistoryRequest, HistoryResponse
from toneguide.db.history import HistoryLedger

logger = get_logger(__name__)

router = APIRouter()


@router.get("/history/{target_id}", response_model=HistoryResponse)
async def get_history(
    target_id: str = Path(..., min_length=1, description="Host target identifier"),
    ledger: HistoryLedger = Depends(get_history_ledger),
) -> HistoryResponse:
    """
    Get the most recent applied texts for a target, oldest first.

    Raises:
        HTTPException 500: If the history store fails
    """
    try:
        items = ledger.recent(target_id)
    except Exception:
        logger.exception(f"Failed to load history for target {target_id}")
        raise HTTPException(status_code=500, detail="Failed to load history")

    return HistoryResponse(target_id=target_id, items=items)


@router.post("/history/{target_id}", response_model=HistoryResponse)
async def record_history(
    request: ApplyHistoryRequest,
    target_id: str = Path(..., min_length=1, description="Host target identifier"),
    ledger: HistoryLedger = Depends(get_history_ledger),
    index: RuleIndex = Depends(get_index),
) -> HistoryResponse:
    """
    Record text the host just applied to a target.

    Called by the host after its text-replacement action succeeds.

    Raises:
        HTTPException 500: If the history store fails
    """
    try:
        items = apply_history(ledger, index, target_id, request.text)
    except Exception:
        logger.exception(f"Failed to record history for target {target_id}")
        raise HTTPException(status_code=500, detail="Failed to record history")

    return HistoryResponse(target_id=target_id, items=items)
