from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from finance_tracker.api.dependencies import get_state
from finance_tracker.api.schemas import CategoryRequest
from finance_tracker.domain.validators import validate_category
from finance_tracker.state import FinanceState

router = APIRouter(prefix="/api/categories")


@router.get("")
def list_categories(state: Annotated[FinanceState, Depends(get_state)]) -> list[str]:
    return state.categories


@router.post("", status_code=status.HTTP_201_CREATED)
def add_category(
    req: CategoryRequest,
    state: Annotated[FinanceState, Depends(get_state)],
) -> list[str]:
    name = req.name.strip()
    check = validate_category(name)
    if not check.valid:
        raise HTTPException(status_code=422, detail=check.message)
    if not state.add_category(name):
        raise HTTPException(status_code=409, detail="That category already exists")
    return state.categories


@router.delete("/{name}")
def remove_category(
    name: str,
    state: Annotated[FinanceState, Depends(get_state)],
) -> list[str]:
    if not state.remove_category(name):
        raise HTTPException(status_code=404, detail="Category not found")
    return state.categories
