"""Dashboard figures derived from the transaction collection.

Everything is recomputed from scratch on each call. ``today`` is injectable
so the rolling windows can be pinned in tests.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence

from finance_tracker.domain.currency import currency_symbol
from finance_tracker.models import (
    BudgetStatus,
    CategoryShare,
    Dashboard,
    DashboardStats,
    MonthlyTotal,
    Settings,
    Transaction,
)

NO_CATEGORY = "None"
DAILY_WINDOW_DAYS = 7
MONTHLY_WINDOW = 6
WARNING_PERCENT = 80.0
OVER_PERCENT = 100.0


def _money(value: float) -> float:
    return round(value, 2)


def category_totals(transactions: Sequence[Transaction]) -> dict[str, float]:
    """Sum per category, in first-encountered order."""
    totals: dict[str, float] = {}
    for txn in transactions:
        totals[txn.category] = totals.get(txn.category, 0.0) + txn.amount
    return {category: _money(amount) for category, amount in totals.items()}


def top_category(totals: dict[str, float]) -> tuple[str, float]:
    name, best = NO_CATEGORY, 0.0
    for category, amount in totals.items():
        # Strictly greater: the first category seen keeps a tie
        if amount > best:
            name, best = category, amount
    return name, best


def daily_window(today: dt.date, days: int = DAILY_WINDOW_DAYS) -> list[dt.date]:
    return [today - dt.timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def calculate_stats(
    transactions: Sequence[Transaction],
    budget_cap: float = 0.0,
    today: dt.date | None = None,
) -> DashboardStats:
    today = today or dt.date.today()
    window = daily_window(today)
    window_start = window[0]

    total_expenses = 0.0
    week_total = 0.0
    daily_totals = {day: 0.0 for day in window}
    for txn in transactions:
        total_expenses += txn.amount
        if window_start <= txn.date <= today:
            week_total += txn.amount
        if txn.date in daily_totals:
            daily_totals[txn.date] += txn.amount

    name, amount = top_category(category_totals(transactions))

    return DashboardStats(
        total=len(transactions),
        total_expenses=_money(total_expenses),
        top_category=name,
        top_category_amount=amount,
        week_total=_money(week_total),
        daily_totals={day: _money(value) for day, value in daily_totals.items()},
        budget_cap=budget_cap,
    )


def category_breakdown(transactions: Sequence[Transaction]) -> list[CategoryShare]:
    totals = category_totals(transactions)
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if not ranked:
        return []

    largest = ranked[0][1]
    return [
        CategoryShare(
            category=category,
            amount=amount,
            share=amount / largest if largest else 0.0,
        )
        for category, amount in ranked
    ]


def _trend(current: float, previous: float) -> str:
    if current > previous:
        return "increased"
    if current < previous:
        return "decreased"
    return "flat"


def monthly_trend(
    transactions: Sequence[Transaction], months: int = MONTHLY_WINDOW
) -> list[MonthlyTotal]:
    """Totals for the most recent ``months`` months that have data.

    Empty months are not filled in.
    """
    totals: dict[str, float] = {}
    for txn in transactions:
        key = f"{txn.date.year:04d}-{txn.date.month:02d}"
        totals[key] = totals.get(key, 0.0) + txn.amount

    recent = sorted(totals.items())[-months:]
    if not recent:
        return []

    largest = max(amount for _, amount in recent)
    result: list[MonthlyTotal] = []
    previous: float | None = None
    for month, amount in recent:
        amount = _money(amount)
        result.append(MonthlyTotal(
            month=month,
            amount=amount,
            share=amount / largest if largest else 0.0,
            trend=None if previous is None else _trend(amount, previous),
        ))
        previous = amount
    return result


def compare_budget(
    spent: float,
    cap: float,
    warning_percent: float = WARNING_PERCENT,
) -> BudgetStatus | None:
    """Spending against the monthly cap; ``None`` when no cap is set."""
    if not cap or cap <= 0:
        return None

    percentage = spent / cap * 100
    if percentage >= OVER_PERCENT:
        state = "over"
    elif percentage >= warning_percent:
        state = "warning"
    else:
        state = "normal"

    return BudgetStatus(
        cap=cap,
        spent=_money(spent),
        percentage=round(percentage, 2),
        progress=round(min(percentage, OVER_PERCENT), 2),
        remaining=_money(cap - spent),
        state=state,
    )


def build_dashboard(
    transactions: Sequence[Transaction],
    *,
    budget_cap: float,
    settings: Settings,
    today: dt.date | None = None,
    warning_percent: float = WARNING_PERCENT,
    months: int = MONTHLY_WINDOW,
) -> Dashboard:
    stats = calculate_stats(transactions, budget_cap=budget_cap, today=today)
    return Dashboard(
        stats=stats,
        categories=category_breakdown(transactions),
        monthly=monthly_trend(transactions, months=months),
        budget=compare_budget(stats.total_expenses, budget_cap, warning_percent=warning_percent),
        currency=settings.base_currency,
        symbol=currency_symbol(settings.base_currency),
    )
