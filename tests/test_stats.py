import datetime as dt

from finance_tracker.domain.stats import (
    build_dashboard,
    calculate_stats,
    category_breakdown,
    category_totals,
    compare_budget,
    monthly_trend,
)
from finance_tracker.models import Settings, Transaction

TODAY = dt.date(2025, 9, 29)
CREATED = dt.datetime(2025, 9, 1, tzinfo=dt.timezone.utc)


def make_txn(amount: float, category: str, date: dt.date, txn_id: str = "t") -> Transaction:
    return Transaction(
        id=txn_id,
        description="Something",
        amount=amount,
        category=category,
        date=date,
        created_at=CREATED,
        updated_at=CREATED,
    )


def test_empty_collection():
    stats = calculate_stats([], today=TODAY)

    assert stats.total == 0
    assert stats.total_expenses == 0
    assert stats.top_category == "None"
    assert stats.top_category_amount == 0
    assert stats.week_total == 0
    assert len(stats.daily_totals) == 7
    assert all(value == 0 for value in stats.daily_totals.values())


def test_category_totals_and_top_category():
    transactions = [
        make_txn(30, "Food", TODAY),
        make_txn(20, "Food", TODAY),
        make_txn(10, "Books", TODAY),
    ]

    assert category_totals(transactions) == {"Food": 50, "Books": 10}
    stats = calculate_stats(transactions, today=TODAY)
    assert stats.top_category == "Food"
    assert stats.top_category_amount == 50
    assert stats.total == 3
    assert stats.total_expenses == 60


def test_top_category_tie_keeps_first_seen():
    transactions = [
        make_txn(25, "Transport", TODAY),
        make_txn(25, "Books", TODAY),
    ]
    assert calculate_stats(transactions, today=TODAY).top_category == "Transport"


def test_week_total_and_daily_totals_window():
    transactions = [
        make_txn(5, "Food", TODAY),
        make_txn(7, "Food", TODAY - dt.timedelta(days=6)),
        make_txn(100, "Food", TODAY - dt.timedelta(days=7)),
        make_txn(50, "Food", TODAY + dt.timedelta(days=1)),
    ]

    stats = calculate_stats(transactions, today=TODAY)

    assert stats.week_total == 12
    assert stats.total_expenses == 162
    days = list(stats.daily_totals)
    assert days[0] == TODAY - dt.timedelta(days=6)
    assert days[-1] == TODAY
    assert stats.daily_totals[TODAY] == 5
    assert stats.daily_totals[TODAY - dt.timedelta(days=6)] == 7


def test_category_breakdown_sorted_with_shares():
    transactions = [
        make_txn(10, "Books", TODAY),
        make_txn(40, "Food", TODAY),
        make_txn(20, "Fees", TODAY),
    ]

    breakdown = category_breakdown(transactions)

    assert [item.category for item in breakdown] == ["Food", "Fees", "Books"]
    assert [item.share for item in breakdown] == [1.0, 0.5, 0.25]
    assert category_breakdown([]) == []


def test_monthly_trend_keeps_last_six_months_with_data():
    amounts = {
        dt.date(2025, 1, 5): 10,
        dt.date(2025, 2, 5): 30,
        dt.date(2025, 3, 5): 20,
        dt.date(2025, 5, 5): 20,
        dt.date(2025, 6, 5): 40,
        dt.date(2025, 8, 5): 15,
        dt.date(2025, 9, 5): 80,
    }
    transactions = [make_txn(amount, "Food", date) for date, amount in amounts.items()]

    trend = monthly_trend(transactions)

    assert [month.month for month in trend] == [
        "2025-02", "2025-03", "2025-05", "2025-06", "2025-08", "2025-09",
    ]
    assert [month.trend for month in trend] == [
        None, "decreased", "flat", "increased", "decreased", "increased",
    ]
    assert trend[-1].share == 1.0
    assert trend[0].share == 30 / 80


def test_budget_states():
    warning = compare_budget(85, 100)
    assert warning.state == "warning"
    assert warning.remaining == 15

    over = compare_budget(120, 100)
    assert over.state == "over"
    assert over.remaining == -20
    assert over.progress == 100

    assert compare_budget(50, 100).state == "normal"
    assert compare_budget(100, 100).state == "over"
    assert compare_budget(80, 100).state == "warning"
    assert compare_budget(85, 0) is None


def test_build_dashboard():
    transactions = [make_txn(90, "Food", TODAY)]

    dashboard = build_dashboard(
        transactions,
        budget_cap=100,
        settings=Settings(base_currency="EUR"),
        today=TODAY,
    )

    assert dashboard.stats.total == 1
    assert dashboard.budget.state == "warning"
    assert dashboard.symbol == "€"
    assert dashboard.categories[0].category == "Food"
    assert dashboard.monthly[0].month == "2025-09"
