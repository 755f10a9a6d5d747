from collections.abc import Sequence
from typing import Any

from finance_tracker.domain.search import SearchPattern, highlight, highlight_amount
from finance_tracker.models import Transaction


def build_record_payload(txn: Transaction, matcher: SearchPattern | None) -> dict[str, Any]:
    return {
        "id": txn.id,
        "description": txn.description,
        "amount": txn.amount,
        "category": txn.category,
        "date": txn.date.isoformat(),
        "createdAt": txn.created_at.isoformat(),
        "updatedAt": txn.updated_at.isoformat(),
        "highlighted": {
            "description": highlight(txn.description, matcher),
            "amount": highlight_amount(txn.amount, matcher),
            "category": highlight(txn.category, matcher),
            "date": highlight(txn.date.isoformat(), matcher),
        },
    }


def build_records_display(
    transactions: Sequence[Transaction], matcher: SearchPattern | None
) -> list[dict[str, Any]]:
    return [build_record_payload(txn, matcher) for txn in transactions]
