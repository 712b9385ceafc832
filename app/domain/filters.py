# app/domain/filters.py
from datetime import date, datetime, timedelta, timezone
from typing import List, Sequence

from app.domain.schemas import Product, Transaction


def _utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def monday_of_week(value: datetime) -> date:
    """Poniedzialek tygodnia (UTC), obciety do dnia. Niedziela nalezy do tygodnia ktory sie konczy."""
    # weekday(): poniedzialek 0 ... niedziela 6
    day = _utc(value).date()
    return day - timedelta(days=day.weekday())


def filter_by_month(
    transactions: Sequence[Transaction], month: int | str | None
) -> List[Transaction]:
    if month is None or month == "":
        return list(transactions)

    month = int(month)
    if not 1 <= month <= 12:
        raise ValueError(f"Niepoprawny miesiac: {month}")

    return [t for t in transactions if _utc(t.date).month == month]


def filter_by_current_week(
    transactions: Sequence[Transaction],
    enabled: bool,
    now: datetime | None = None,
) -> List[Transaction]:
    if not enabled:
        return list(transactions)

    current = monday_of_week(now or datetime.now(timezone.utc))
    return [t for t in transactions if monday_of_week(t.date) == current]


def filter_transactions(
    transactions: Sequence[Transaction],
    month: int | str | None = None,
    current_week: bool = False,
    now: datetime | None = None,
) -> List[Transaction]:
    by_month = filter_by_month(transactions, month)
    return filter_by_current_week(by_month, current_week, now)


def search_products(
    catalog: Sequence[Product], term: str | None, limit: int | None = None
) -> List[Product]:
    if not term:
        matches = list(catalog)
    else:
        needle = term.lower()
        matches = [p for p in catalog if needle in p.name.lower()]

    return matches[:limit] if limit else matches
