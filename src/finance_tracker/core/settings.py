import os

from dotenv import find_dotenv, load_dotenv

from finance_tracker.domain.search import SORT_KEYS
from finance_tracker.logger import get_logger

logger = get_logger(__name__)


def _resolve_dotenv_path() -> str | None:
    config_dir = os.getenv("CONFIG_DIR")
    if config_dir:
        candidate = os.path.join(config_dir, ".env")
        if os.path.exists(candidate):
            return candidate
    resolved = find_dotenv(usecwd=True)
    return resolved or None


def load_environment() -> None:
    dotenv_path = _resolve_dotenv_path()
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)


def ensure_dir(path: str | None) -> None:
    if path and path not in {".", "./"}:
        os.makedirs(path, exist_ok=True)


def ensure_dirs(*paths: str | None) -> None:
    for path in paths:
        ensure_dir(path)


def get_env_int(name: str, default: int, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default
    if min_value is not None and value < min_value:
        logger.warning(
            "[ENV] %s='%s' below minimum %s, using default %s.",
            name,
            raw,
            min_value,
            default,
        )
        return default
    return value


def get_env_float(name: str, default: float = 0.0) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("[ENV] Invalid %s='%s', using default %s.", name, raw, default)
        return default


def get_env_choice(name: str, choices: tuple[str, ...], default: str) -> str:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    if raw not in choices:
        logger.warning(
            "[ENV] %s='%s' not one of %s, using default %s.",
            name,
            raw,
            ", ".join(choices),
            default,
        )
        return default
    return raw


_ENV_KEYS_TO_LOG = (
    "LOG_LEVEL",
    "LOG_DIR",
    "DATA_DIR",
    "CONFIG_DIR",
    "STORAGE_BACKEND",
    "STORAGE_FILE",
    "DEFAULT_SORT",
    "BUDGET_WARNING_PERCENT",
    "MONTHLY_TREND_MONTHS",
)


def log_environment() -> None:
    logger.info("[ENV] Logging configured environment variables.")
    for key in _ENV_KEYS_TO_LOG:
        raw_value = os.getenv(key)
        value = "<unset>" if raw_value is None else raw_value.replace("\n", "\\n")
        logger.info("[ENV] %s=%s", key, value)


STORAGE_BACKENDS = ("json", "memory")

DEFAULT_STORAGE_FILE = "finance-tracker.json"
DEFAULT_BUDGET_WARNING_PERCENT = 80.0
DEFAULT_MONTHLY_TREND_MONTHS = 6


load_environment()

DATA_DIR = os.getenv("DATA_DIR", ".")
LOG_DIR = os.getenv("LOG_DIR")
CONFIG_DIR = os.getenv("CONFIG_DIR")

ensure_dirs(DATA_DIR, LOG_DIR, CONFIG_DIR)

STORAGE_BACKEND = get_env_choice("STORAGE_BACKEND", STORAGE_BACKENDS, "json")
STORAGE_FILE = os.path.join(DATA_DIR, os.getenv("STORAGE_FILE", DEFAULT_STORAGE_FILE))

DEFAULT_SORT = get_env_choice("DEFAULT_SORT", SORT_KEYS, "date-desc")

BUDGET_WARNING_PERCENT = get_env_float("BUDGET_WARNING_PERCENT", DEFAULT_BUDGET_WARNING_PERCENT)

MONTHLY_TREND_MONTHS = get_env_int(
    "MONTHLY_TREND_MONTHS",
    DEFAULT_MONTHLY_TREND_MONTHS,
    min_value=1,
)
