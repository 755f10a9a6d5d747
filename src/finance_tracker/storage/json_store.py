import json
import os

from finance_tracker.logger import get_logger

from .base import KeyValueStore

logger = get_logger(__name__)


class JsonFileStore(KeyValueStore):
    def __init__(self, data_path: str = "finance-tracker.json"):
        self.data_path = data_path
        self.values: dict[str, str] = {}
        self.load()

    def load(self) -> None:
        if not os.path.exists(self.data_path):
            self.values = {}
            return
        try:
            with open(self.data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("[STORAGE] Could not read %s, starting empty: %s", self.data_path, exc)
            self.values = {}
            return
        if not isinstance(data, dict):
            logger.warning("[STORAGE] %s does not hold an object, starting empty.", self.data_path)
            self.values = {}
            return
        self.values = {str(key): value for key, value in data.items() if isinstance(value, str)}

    def save(self) -> None:
        with open(self.data_path, "w", encoding="utf-8") as f:
            json.dump(self.values, f, indent=2)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value
        self.save()

    def remove(self, key: str) -> None:
        if self.values.pop(key, None) is not None:
            self.save()
