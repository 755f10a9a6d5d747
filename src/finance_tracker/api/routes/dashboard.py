import datetime as dt
from typing import Annotated

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_state
from finance_tracker.models import Dashboard
from finance_tracker.state import FinanceState

router = APIRouter(prefix="/api")


@router.get("/dashboard", response_model=Dashboard, response_model_by_alias=True)
def get_dashboard(
    state: Annotated[FinanceState, Depends(get_state)],
    today: dt.date | None = None,
) -> Dashboard:
    return state.dashboard(today=today)
