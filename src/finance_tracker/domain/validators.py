"""Field and record validation for transactions.

Every check returns a result object; nothing here raises for bad input.
Patterns are matched against the whole value with ``fullmatch`` so a trailing
newline never slips through.
"""

import datetime as dt
import re
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from finance_tracker.models import RecordCheck, Transaction, TransactionDraft, ValidationResult

REGEX_PATTERNS: dict[str, re.Pattern[str]] = {
    # First and last character are not whitespace
    "description": re.compile(r"\S(?:.*\S)?", re.ASCII),
    # 0, or no leading zero; up to two decimals
    "amount": re.compile(r"(0|[1-9]\d*)(\.\d{1,2})?", re.ASCII),
    "date": re.compile(r"\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])", re.ASCII),
    # Letter runs joined by single spaces or hyphens
    "category": re.compile(r"[A-Za-z]+(?:[ -][A-Za-z]+)*", re.ASCII),
    # Same word twice in a row, e.g. "the the"
    "duplicate_word": re.compile(r"\b(\w+)\s+\1\b", re.ASCII | re.IGNORECASE),
}

MESSAGES = {
    "description": {
        "required": "Description is required",
        "invalid": "Description cannot start or end with a space",
        "duplicate": 'Description has a repeated word (e.g. "the the")',
    },
    "amount": {
        "required": "Amount is required",
        "invalid": "Enter a valid amount like 10 or 10.50",
        "negative": "Amount cannot be negative",
    },
    "date": {
        "required": "Date is required",
        "invalid": "Date must be in YYYY-MM-DD format (e.g. 2025-09-29)",
        "nonexistent": "That date does not exist (e.g. Feb 30 is invalid)",
    },
    "category": {
        "required": "Please select a category",
        "invalid": "Category can only contain letters, spaces, and hyphens",
    },
}

FIELDS = ("description", "amount", "date", "category")


def _reject(field: str, reason: str) -> ValidationResult:
    return ValidationResult(valid=False, message=MESSAGES[field][reason])


def _is_blank(value: str | None) -> bool:
    return value is None or value.strip() == ""


def validate_description(value: str | None) -> ValidationResult:
    if _is_blank(value):
        return _reject("description", "required")
    if not REGEX_PATTERNS["description"].fullmatch(value):
        return _reject("description", "invalid")
    if REGEX_PATTERNS["duplicate_word"].search(value):
        return _reject("description", "duplicate")
    return ValidationResult(valid=True)


def validate_amount(value: str | None) -> ValidationResult:
    if _is_blank(value):
        return _reject("amount", "required")
    if not REGEX_PATTERNS["amount"].fullmatch(value):
        return _reject("amount", "invalid")
    if float(value) < 0:
        return _reject("amount", "negative")
    return ValidationResult(valid=True)


def validate_date(value: str | None) -> ValidationResult:
    if _is_blank(value):
        return _reject("date", "required")
    if not REGEX_PATTERNS["date"].fullmatch(value):
        return _reject("date", "invalid")

    year, month, day = (int(part) for part in value.split("-"))
    try:
        dt.date(year, month, day)
    except ValueError:
        return _reject("date", "nonexistent")
    return ValidationResult(valid=True)


def validate_category(value: str | None) -> ValidationResult:
    if _is_blank(value):
        return _reject("category", "required")
    if not REGEX_PATTERNS["category"].fullmatch(value):
        return _reject("category", "invalid")
    return ValidationResult(valid=True)


FIELD_VALIDATORS = {
    "description": validate_description,
    "amount": validate_amount,
    "date": validate_date,
    "category": validate_category,
}


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return ""
    return str(value)


def validate_field(field: str, value: Any) -> ValidationResult:
    validator = FIELD_VALIDATORS.get(field)
    if validator is None:
        return ValidationResult(valid=False, message=f"Unknown field: {field}")
    return validator(_as_text(value))


def validate_transaction(draft: TransactionDraft | Mapping[str, Any]) -> RecordCheck:
    """Check every field and report all failures together."""
    if isinstance(draft, TransactionDraft):
        values = draft.model_dump()
    else:
        values = dict(draft)

    errors: dict[str, str] = {}
    for field in FIELDS:
        check = validate_field(field, values.get(field))
        if not check.valid:
            errors[field] = check.message

    return RecordCheck(valid=not errors, errors=errors)


def _non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_import_record(txn: Any) -> str | None:
    if not isinstance(txn, Mapping):
        return "not an object"
    if not _non_empty_string(txn.get("id")):
        return "missing or invalid id"
    if not _non_empty_string(txn.get("description")):
        return "missing description"
    amount = txn.get("amount")
    if not _is_number(amount) or amount < 0:
        return "invalid amount"
    if not _non_empty_string(txn.get("category")):
        return "missing category"
    date_value = txn.get("date")
    if not isinstance(date_value, str) or not REGEX_PATTERNS["date"].fullmatch(date_value):
        return "invalid date format"
    if not txn.get("createdAt") or not txn.get("updatedAt"):
        return "missing timestamps"

    try:
        Transaction.model_validate(txn)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "record"
        return f"invalid {field}"
    return None


def validate_import_data(data: Any) -> ValidationResult:
    """Structural check of an imported bundle; one bad record rejects it all."""
    if not isinstance(data, Mapping):
        return ValidationResult(valid=False, message="File does not contain valid JSON data")

    transactions = data.get("transactions")
    if not isinstance(transactions, list):
        return ValidationResult(valid=False, message="Missing transactions list in file")

    seen_ids: set[str] = set()
    for position, txn in enumerate(transactions, start=1):
        reason = _check_import_record(txn)
        if reason is None and txn["id"] in seen_ids:
            reason = "duplicate id"
        if reason:
            return ValidationResult(valid=False, message=f"Transaction {position}: {reason}")
        seen_ids.add(txn["id"])

    return ValidationResult(valid=True, message="Data looks good!")
