import pytest

from finance_tracker.domain.currency import convert_amount, currency_symbol
from finance_tracker.models import Settings


def test_symbols():
    assert currency_symbol("EUR") == "€"
    assert currency_symbol("GBP") == "£"
    assert currency_symbol(None) == "$"


def test_same_currency_returns_amount():
    assert convert_amount(12.5, "usd", Settings()) == 12.5


def test_converts_relative_to_base():
    settings = Settings(base_currency="EUR", rates={"USD": 1.0, "EUR": 0.5, "GBP": 0.25})
    assert convert_amount(10, "USD", settings) == 20
    assert convert_amount(10, "GBP", settings) == 5


def test_missing_rate_raises():
    settings = Settings.model_construct(base_currency="USD", rates={"USD": 1.0})
    with pytest.raises(ValueError):
        convert_amount(10, "EUR", settings)
    with pytest.raises(ValueError):
        convert_amount(10, "JPY", Settings())


def test_settings_reject_unknown_currency_rate():
    with pytest.raises(ValueError):
        Settings(rates={"JPY": 150.0})


def test_settings_require_a_rate_for_every_currency():
    with pytest.raises(ValueError, match="Missing rate for EUR, GBP"):
        Settings(rates={"USD": 1.0})
