from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from finance_tracker.api.dependencies import get_state
from finance_tracker.api.schemas import BudgetRequest
from finance_tracker.domain.currency import convert_amount, currency_symbol
from finance_tracker.state import FinanceState

router = APIRouter(prefix="/api")


@router.get("/settings")
def get_settings(state: Annotated[FinanceState, Depends(get_state)]) -> dict[str, Any]:
    return state.settings.to_payload()


@router.put("/settings")
def update_settings(
    changes: Annotated[dict[str, Any], Body()],
    state: Annotated[FinanceState, Depends(get_state)],
) -> dict[str, Any]:
    try:
        settings = state.update_settings(changes)
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=[error["msg"] for error in exc.errors()],
        ) from exc
    return settings.to_payload()


@router.get("/convert")
def convert(
    amount: float,
    to: str,
    state: Annotated[FinanceState, Depends(get_state)],
) -> dict[str, Any]:
    try:
        converted = convert_amount(amount, to, state.settings)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    target = to.strip().upper()
    return {
        "amount": converted,
        "currency": target,
        "symbol": currency_symbol(target),
    }


@router.get("/budget")
def get_budget(state: Annotated[FinanceState, Depends(get_state)]) -> dict[str, Any]:
    return {"budgetCap": state.budget_cap}


@router.put("/budget")
def set_budget(
    req: BudgetRequest,
    state: Annotated[FinanceState, Depends(get_state)],
) -> dict[str, Any]:
    state.set_budget_cap(req.amount)
    return {"budgetCap": state.budget_cap, "saved": state.last_save_ok}
