import datetime as dt
import uuid
from typing import Any

from finance_tracker.core import settings as app_settings
from finance_tracker.domain import stats
from finance_tracker.domain.search import FilterSelection, apply_filters, compile_search
from finance_tracker.domain.validators import validate_category, validate_import_data, validate_transaction
from finance_tracker.logger import get_logger
from finance_tracker.models import (
    Dashboard,
    DashboardStats,
    ImportResult,
    RecordCheck,
    Settings,
    Transaction,
    TransactionDraft,
)
from finance_tracker.services.persistence import FinanceStorage

logger = get_logger(__name__)


def _now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class FinanceState:
    """In-memory application state with write-through persistence.

    Every mutation saves before returning. A failed save is logged and
    recorded in ``last_save_ok``; the in-memory change is kept.
    """

    def __init__(self, storage: FinanceStorage, default_sort: str | None = None):
        self.storage = storage
        self.transactions: list[Transaction] = []
        self.categories: list[str] = []
        self.settings = Settings()
        self.budget_cap = 0.0
        self.selection = FilterSelection(sort_by=default_sort or app_settings.DEFAULT_SORT)
        self.last_save_ok = True

    def initialize(self) -> None:
        self.transactions = self.storage.load_transactions()
        self.categories = self.storage.load_categories()
        self.settings = self.storage.load_settings()
        self.budget_cap = self.storage.load_budget_cap()
        logger.info(
            "[STATE] Loaded %d transactions, %d categories.",
            len(self.transactions),
            len(self.categories),
        )

    def _record_save(self, what: str, ok: bool) -> bool:
        self.last_save_ok = ok
        if not ok:
            logger.warning("[STATE] %s changed in memory but was not persisted.", what)
        return ok

    @staticmethod
    def generate_id() -> str:
        return f"txn_{uuid.uuid4().hex}"

    # Transactions

    def check_draft(self, draft: TransactionDraft) -> RecordCheck:
        check = validate_transaction(draft)
        if "category" not in check.errors and draft.category not in self.categories:
            errors = dict(check.errors)
            errors["category"] = f"Unknown category: {draft.category}"
            return RecordCheck(valid=False, errors=errors)
        return check

    def add_transaction(self, draft: TransactionDraft) -> tuple[Transaction | None, RecordCheck]:
        check = self.check_draft(draft)
        if not check.valid:
            return None, check

        now = _now()
        txn = Transaction(
            id=self.generate_id(),
            description=draft.description.strip(),
            amount=round(float(draft.amount), 2),
            category=draft.category,
            date=dt.date.fromisoformat(draft.date),
            created_at=now,
            updated_at=now,
        )
        # Newest first
        self.transactions.insert(0, txn)
        self._record_save("Transactions", self.storage.save_transactions(self.transactions))
        logger.debug("[STATE] Added transaction %s", txn.id)
        return txn, check

    def _index_of(self, transaction_id: str) -> int | None:
        for index, txn in enumerate(self.transactions):
            if txn.id == transaction_id:
                return index
        return None

    def update_transaction(
        self, transaction_id: str, draft: TransactionDraft
    ) -> tuple[Transaction | None, RecordCheck]:
        index = self._index_of(transaction_id)
        if index is None:
            return None, RecordCheck(valid=False, errors={"id": "Transaction not found"})

        check = self.check_draft(draft)
        if not check.valid:
            return None, check

        original = self.transactions[index]
        updated = Transaction(
            id=original.id,
            description=draft.description.strip(),
            amount=round(float(draft.amount), 2),
            category=draft.category,
            date=dt.date.fromisoformat(draft.date),
            created_at=original.created_at,
            updated_at=max(_now(), original.created_at),
        )
        self.transactions[index] = updated
        self._record_save("Transactions", self.storage.save_transactions(self.transactions))
        return updated, check

    def delete_transaction(self, transaction_id: str) -> bool:
        index = self._index_of(transaction_id)
        if index is None:
            return False
        del self.transactions[index]
        self._record_save("Transactions", self.storage.save_transactions(self.transactions))
        return True

    def get_transaction(self, transaction_id: str) -> Transaction | None:
        index = self._index_of(transaction_id)
        return None if index is None else self.transactions[index]

    def get_transactions(self) -> list[Transaction]:
        return self.transactions

    # Categories

    def add_category(self, name: str) -> bool:
        trimmed = name.strip()
        if not validate_category(trimmed).valid or trimmed in self.categories:
            return False
        self.categories.append(trimmed)
        self._record_save("Categories", self.storage.save_categories(self.categories))
        return True

    def remove_category(self, name: str) -> bool:
        # Transactions keep their category name
        if name not in self.categories:
            return False
        self.categories.remove(name)
        self._record_save("Categories", self.storage.save_categories(self.categories))
        return True

    # Budget and settings

    def set_budget_cap(self, amount: float) -> bool:
        if amount < 0:
            return False
        self.budget_cap = float(amount)
        self._record_save("Budget cap", self.storage.save_budget_cap(self.budget_cap))
        return True

    def update_settings(self, changes: dict[str, Any]) -> Settings:
        # Accept both wire (camelCase) and field names
        aliases = {field.alias: name for name, field in Settings.model_fields.items()}
        normalized = {aliases.get(key, key): value for key, value in changes.items()}
        merged = {**self.settings.model_dump(), **normalized}
        # Rates merge per currency so a partial update keeps the others
        if isinstance(normalized.get("rates"), dict):
            merged["rates"] = {**self.settings.rates, **normalized["rates"]}
        self.settings = Settings.model_validate(merged)
        self._record_save("Settings", self.storage.save_settings(self.settings))
        return self.settings

    # Bulk operations

    def clear_all_data(self) -> bool:
        """Wipe transactions and the budget cap; categories and settings are kept."""
        ok = self.storage.clear_all()
        self.transactions = []
        self.budget_cap = 0.0
        if ok:
            ok = self.storage.save_categories(self.categories) and self.storage.save_settings(self.settings)
        return self._record_save("All data", ok)

    def export_data(self) -> dict[str, Any]:
        return self.storage.export_data()

    def import_data(self, data: Any) -> ImportResult:
        validation = validate_import_data(data)
        if not validation.valid:
            logger.warning("[IMPORT] Rejected: %s", validation.message)
            return ImportResult(success=False, message=validation.message)

        result = self.storage.import_data(data)
        self.last_save_ok = result.success
        if result.success:
            self.initialize()
        return result

    # Search, filter and sort

    def set_search(self, text: str | None, case_sensitive: bool = False) -> None:
        self.selection = FilterSelection(
            matcher=compile_search(text, case_sensitive),
            category=self.selection.category,
            sort_by=self.selection.sort_by,
        )

    def set_category_filter(self, category: str | None) -> None:
        self.selection = FilterSelection(
            matcher=self.selection.matcher,
            category=category or None,
            sort_by=self.selection.sort_by,
        )

    def set_sort(self, sort_by: str) -> None:
        self.selection = FilterSelection(
            matcher=self.selection.matcher,
            category=self.selection.category,
            sort_by=sort_by,
        )

    def visible_transactions(self, selection: FilterSelection | None = None) -> list[Transaction]:
        return apply_filters(self.transactions, selection or self.selection)

    # Dashboard

    def calculate_stats(self, today: dt.date | None = None) -> DashboardStats:
        return stats.calculate_stats(self.transactions, budget_cap=self.budget_cap, today=today)

    def dashboard(self, today: dt.date | None = None) -> Dashboard:
        return stats.build_dashboard(
            self.transactions,
            budget_cap=self.budget_cap,
            settings=self.settings,
            today=today,
            warning_percent=app_settings.BUDGET_WARNING_PERCENT,
            months=app_settings.MONTHLY_TREND_MONTHS,
        )
