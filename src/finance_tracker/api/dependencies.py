from fastapi import HTTPException, Request

from finance_tracker.state import FinanceState


def get_state(request: Request) -> FinanceState:
    state = getattr(request.app.state, "finance", None)
    if not state:
        raise HTTPException(status_code=500, detail="State not initialized")
    return state
