from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Response, status

from finance_tracker.api.dependencies import get_state
from finance_tracker.domain.records import build_record_payload, build_records_display
from finance_tracker.domain.search import FilterSelection, compile_search
from finance_tracker.logger import get_logger
from finance_tracker.models import RecordCheck, TransactionDraft
from finance_tracker.state import FinanceState

logger = get_logger(__name__)

router = APIRouter(prefix="/api/transactions")


def _rejected(check: RecordCheck) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=check.model_dump(),
    )


@router.get("")
def list_transactions(
    state: Annotated[FinanceState, Depends(get_state)],
    search: str | None = None,
    case_sensitive: bool = False,
    category: str | None = None,
    sort: str | None = None,
) -> dict[str, Any]:
    matcher = compile_search(search, case_sensitive)
    selection = FilterSelection(
        matcher=matcher,
        category=category or None,
        sort_by=sort or state.selection.sort_by,
    )
    visible = state.visible_transactions(selection)
    return {
        "transactions": build_records_display(visible, matcher),
        "count": len(visible),
        "total": len(state.get_transactions()),
        "searchError": matcher.error if matcher else None,
    }


@router.get("/{transaction_id}")
def get_transaction(
    transaction_id: str,
    state: Annotated[FinanceState, Depends(get_state)],
) -> dict[str, Any]:
    txn = state.get_transaction(transaction_id)
    if txn is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return build_record_payload(txn, None)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_transaction(
    draft: TransactionDraft,
    state: Annotated[FinanceState, Depends(get_state)],
) -> dict[str, Any]:
    txn, check = state.add_transaction(draft)
    if txn is None:
        raise _rejected(check)
    return {"transaction": txn.to_payload(), "saved": state.last_save_ok}


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: str,
    draft: TransactionDraft,
    state: Annotated[FinanceState, Depends(get_state)],
) -> dict[str, Any]:
    if state.get_transaction(transaction_id) is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    txn, check = state.update_transaction(transaction_id, draft)
    if txn is None:
        raise _rejected(check)
    return {"transaction": txn.to_payload(), "saved": state.last_save_ok}


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: str,
    state: Annotated[FinanceState, Depends(get_state)],
) -> Response:
    if not state.delete_transaction(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    logger.info("[API] Deleted transaction %s", transaction_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
