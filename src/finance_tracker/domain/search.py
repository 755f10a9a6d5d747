from __future__ import annotations

import html
import locale
import re
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from finance_tracker.logger import get_logger
from finance_tracker.models import Transaction

logger = get_logger(__name__)

DEFAULT_SORT = "date-desc"

MARK_OPEN = "<mark>"
MARK_CLOSE = "</mark>"


@dataclass(frozen=True)
class SearchPattern:
    """A compiled search expression.

    ``re.Pattern`` keeps no position between calls, so one instance can be
    tested against any number of fields. A pattern that failed to compile
    carries the error and matches nothing.
    """

    source: str
    case_sensitive: bool = False
    regex: re.Pattern[str] | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.regex is not None

    def test(self, text: str) -> bool:
        if self.regex is None:
            return False
        return self.regex.search(text) is not None

    def finditer(self, text: str) -> Iterator[re.Match[str]]:
        if self.regex is None:
            return iter(())
        return self.regex.finditer(text)


@dataclass(frozen=True)
class FilterSelection:
    matcher: SearchPattern | None = None
    category: str | None = None
    sort_by: str = DEFAULT_SORT


def compile_search(text: str | None, case_sensitive: bool = False) -> SearchPattern | None:
    if text is None or text.strip() == "":
        return None

    flags = 0 if case_sensitive else re.IGNORECASE
    try:
        regex = re.compile(text, flags)
    except re.error as exc:
        logger.warning("[SEARCH] Invalid pattern %r: %s", text, exc)
        return SearchPattern(source=text, case_sensitive=case_sensitive, error=str(exc))
    return SearchPattern(source=text, case_sensitive=case_sensitive, regex=regex)


def escape_html(text: str | None) -> str:
    return html.escape(text or "", quote=True)


def highlight(text: str | None, matcher: SearchPattern | None) -> str:
    """Escape ``text`` and wrap every match in <mark> tags.

    Matching runs on the escaped text, so the inserted tags are never escaped.
    """
    safe_text = escape_html(text)
    if matcher is None or not matcher.is_valid or not safe_text:
        return safe_text

    parts: list[str] = []
    last = 0
    for match in matcher.finditer(safe_text):
        start, end = match.span()
        if start == end:
            continue
        parts.append(safe_text[last:start])
        parts.append(f"{MARK_OPEN}{match.group(0)}{MARK_CLOSE}")
        last = end
    parts.append(safe_text[last:])
    return "".join(parts)


def filter_by_category(
    transactions: Sequence[Transaction], category: str | None
) -> Sequence[Transaction]:
    if not category:
        return transactions
    return [txn for txn in transactions if txn.category == category]


def amount_text(amount: float) -> str:
    if float(amount).is_integer():
        return str(int(amount))
    return str(amount)


def highlight_amount(amount: float, matcher: SearchPattern | None) -> str:
    """Highlight the 2-decimal form, or the raw form when only that one matched."""
    display = f"{amount:.2f}"
    if matcher is not None and not matcher.test(display) and matcher.test(amount_text(amount)):
        display = amount_text(amount)
    return highlight(display, matcher)


def _searchable_fields(txn: Transaction) -> tuple[str, ...]:
    return (
        txn.description,
        amount_text(txn.amount),
        f"{txn.amount:.2f}",
        txn.category,
        txn.date.isoformat(),
    )


def search_transactions(
    transactions: Sequence[Transaction], matcher: SearchPattern | None
) -> Sequence[Transaction]:
    if matcher is None:
        return transactions
    return [
        txn
        for txn in transactions
        if any(matcher.test(value) for value in _searchable_fields(txn))
    ]


def use_system_collation() -> None:
    """Collate descriptions by the environment's locale (LC_ALL, LC_COLLATE, LANG)."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("[SEARCH] Locale not available, sorting by code point: %s", exc)


def _description_key(txn: Transaction) -> str:
    return locale.strxfrm(txn.description.casefold())


_SORTERS = {
    "date-desc": (lambda txn: txn.date, True),
    "date-asc": (lambda txn: txn.date, False),
    "desc-asc": (_description_key, False),
    "desc-desc": (_description_key, True),
    "amount-desc": (lambda txn: txn.amount, True),
    "amount-asc": (lambda txn: txn.amount, False),
}

SORT_KEYS = tuple(_SORTERS)


def sort_transactions(transactions: Sequence[Transaction], sort_by: str | None) -> list[Transaction]:
    """Return a sorted copy; an unknown key keeps the input order."""
    sorter = _SORTERS.get(sort_by or "")
    if sorter is None:
        return list(transactions)
    key, reverse = sorter
    return sorted(transactions, key=key, reverse=reverse)


def apply_filters(transactions: Sequence[Transaction], selection: FilterSelection) -> list[Transaction]:
    filtered = filter_by_category(transactions, selection.category)
    filtered = search_transactions(filtered, selection.matcher)
    return sort_transactions(filtered, selection.sort_by)
