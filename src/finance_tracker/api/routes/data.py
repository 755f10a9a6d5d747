from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException

from finance_tracker.api.dependencies import get_state
from finance_tracker.logger import get_logger
from finance_tracker.models import ImportResult
from finance_tracker.state import FinanceState

logger = get_logger(__name__)

router = APIRouter(prefix="/api")


@router.get("/export")
def export_data(state: Annotated[FinanceState, Depends(get_state)]) -> dict[str, Any]:
    return state.export_data()


@router.post("/import", response_model=ImportResult)
def import_data(
    data: Annotated[Any, Body()],
    state: Annotated[FinanceState, Depends(get_state)],
) -> ImportResult:
    result = state.import_data(data)
    if not result.success:
        raise HTTPException(status_code=422, detail=result.message)
    return result


@router.post("/clear")
def clear_data(state: Annotated[FinanceState, Depends(get_state)]) -> dict[str, Any]:
    ok = state.clear_all_data()
    logger.info("[API] Cleared all data (persisted=%s).", ok)
    return {"success": ok}
