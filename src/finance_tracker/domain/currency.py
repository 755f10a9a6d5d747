from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from finance_tracker.models import Settings

SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP")

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}

# Relative to USD; the user edits these, nothing is fetched.
DEFAULT_RATES: dict[str, float] = {
    "USD": 1.00,
    "EUR": 0.92,
    "GBP": 0.79,
}


def normalize_currency(value: str) -> str:
    normalized = value.strip().upper()
    if normalized not in SUPPORTED_CURRENCIES:
        raise ValueError(f"Unsupported currency: {normalized}")
    return normalized


def currency_symbol(code: str | None) -> str:
    if not code:
        return CURRENCY_SYMBOLS["USD"]
    return CURRENCY_SYMBOLS.get(code, code)


def convert_amount(amount: float, target_currency: str, settings: Settings) -> float:
    """Convert an amount held in the base currency into ``target_currency``."""
    target = normalize_currency(target_currency)
    base = settings.base_currency
    if target == base:
        return amount

    try:
        base_rate = settings.rates[base]
        target_rate = settings.rates[target]
    except KeyError as exc:
        raise ValueError(f"No rate configured for {exc.args[0]}") from exc
    return round(amount * target_rate / base_rate, 2)
