import datetime as dt
import json
from typing import Any

from finance_tracker.core import settings as app_settings
from finance_tracker.logger import get_logger
from finance_tracker.models import ExportBundle, ImportResult, Settings, Transaction
from finance_tracker.storage.base import KeyValueStore
from finance_tracker.storage.json_store import JsonFileStore
from finance_tracker.storage.memory import MemoryStore

logger = get_logger(__name__)

STORAGE_KEYS = {
    "transactions": "finance-tracker:transactions",
    "settings": "finance-tracker:settings",
    "categories": "finance-tracker:categories",
    "budget_cap": "finance-tracker:budget-cap",
}

DEFAULT_CATEGORIES = ("Food", "Books", "Transport", "Entertainment", "Fees", "Other")

# OSError from the backend; ValueError covers JSON decoding and model validation
_STORAGE_ERRORS = (OSError, ValueError)


class FinanceStorage:
    """Load/save contract over a key-value store.

    Loads fall back to defaults when a value is missing or unreadable; saves
    report failure with ``False`` instead of raising.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def _read_json(self, name: str) -> Any:
        raw = self.store.get(STORAGE_KEYS[name])
        if not raw:
            return None
        return json.loads(raw)

    def _write_json(self, name: str, value: Any) -> bool:
        try:
            self.store.set(STORAGE_KEYS[name], json.dumps(value))
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not save %s: %s", name, exc)
            return False
        return True

    def load_transactions(self) -> list[Transaction]:
        try:
            data = self._read_json("transactions")
            if data is None:
                return []
            if not isinstance(data, list):
                raise ValueError("transactions is not a list")
            return [Transaction.model_validate(item) for item in data]
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not load transactions: %s", exc)
            return []

    def save_transactions(self, transactions: list[Transaction]) -> bool:
        return self._write_json("transactions", [txn.to_payload() for txn in transactions])

    def load_categories(self) -> list[str]:
        try:
            data = self._read_json("categories")
            if data is None:
                return list(DEFAULT_CATEGORIES)
            if not isinstance(data, list) or not all(isinstance(item, str) for item in data):
                raise ValueError("categories is not a list of names")
            return data
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not load categories: %s", exc)
            return list(DEFAULT_CATEGORIES)

    def save_categories(self, categories: list[str]) -> bool:
        return self._write_json("categories", list(categories))

    def load_settings(self) -> Settings:
        try:
            data = self._read_json("settings")
            if data is None:
                return Settings()
            return Settings.model_validate(data)
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not load settings: %s", exc)
            return Settings()

    def save_settings(self, settings: Settings) -> bool:
        return self._write_json("settings", settings.to_payload())

    def load_budget_cap(self) -> float:
        try:
            raw = self.store.get(STORAGE_KEYS["budget_cap"])
            if not raw:
                return 0.0
            cap = float(raw)
            if cap < 0:
                raise ValueError(f"negative budget cap {raw}")
            return cap
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not load budget cap: %s", exc)
            return 0.0

    def save_budget_cap(self, cap: float) -> bool:
        try:
            self.store.set(STORAGE_KEYS["budget_cap"], str(cap))
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not save budget cap: %s", exc)
            return False
        return True

    def clear_all(self) -> bool:
        try:
            for key in STORAGE_KEYS.values():
                self.store.remove(key)
        except _STORAGE_ERRORS as exc:
            logger.error("[STORAGE] Could not clear data: %s", exc)
            return False
        return True

    def export_data(self) -> dict[str, Any]:
        bundle = ExportBundle(
            transactions=self.load_transactions(),
            settings=self.load_settings(),
            categories=self.load_categories(),
            budget_cap=self.load_budget_cap(),
            export_date=dt.datetime.now(dt.timezone.utc),
        )
        return bundle.to_payload()

    def import_data(self, data: Any) -> ImportResult:
        """Apply each field of ``data`` that is present and of the right type."""
        if not isinstance(data, dict):
            return ImportResult(success=False, message="Invalid data format")

        applied: list[str] = []
        failed: list[str] = []

        def apply(name: str, saved: bool) -> None:
            (applied if saved else failed).append(name)

        transactions = data.get("transactions")
        if isinstance(transactions, list):
            apply("transactions", self._write_json("transactions", transactions))

        settings = data.get("settings")
        if isinstance(settings, dict):
            try:
                parsed = Settings.model_validate(settings)
            except ValueError as exc:
                logger.warning("[IMPORT] Skipping invalid settings: %s", exc)
            else:
                apply("settings", self.save_settings(parsed))

        categories = data.get("categories")
        if isinstance(categories, list):
            apply("categories", self.save_categories([str(name) for name in categories]))

        budget_cap = data.get("budgetCap")
        if isinstance(budget_cap, (int, float)) and not isinstance(budget_cap, bool):
            apply("budgetCap", self.save_budget_cap(float(budget_cap)))

        if failed:
            return ImportResult(success=False, message=f"Could not save: {', '.join(failed)}")
        logger.info("[IMPORT] Imported %s", ", ".join(applied) if applied else "nothing")
        return ImportResult(success=True, message="Data imported successfully")


def create_storage() -> FinanceStorage:
    if app_settings.STORAGE_BACKEND == "memory":
        logger.info("[STORAGE] Using in-memory storage; nothing is written to disk.")
        return FinanceStorage(MemoryStore())
    logger.info("[STORAGE] Using JSON file storage at %s", app_settings.STORAGE_FILE)
    return FinanceStorage(JsonFileStore(app_settings.STORAGE_FILE))
