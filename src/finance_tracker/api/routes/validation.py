from fastapi import APIRouter

from finance_tracker.api.schemas import FieldRequest
from finance_tracker.domain.validators import validate_field, validate_transaction
from finance_tracker.models import RecordCheck, TransactionDraft, ValidationResult

router = APIRouter(prefix="/api/validate")


@router.post("", response_model=RecordCheck)
def validate_draft(draft: TransactionDraft) -> RecordCheck:
    return validate_transaction(draft)


@router.post("/{field}", response_model=ValidationResult)
def validate_single_field(field: str, req: FieldRequest) -> ValidationResult:
    return validate_field(field, req.value)
