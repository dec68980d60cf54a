"""Billing period keys (``YYYY-MM``) and inclusive month windows."""

import calendar
import re
from dataclasses import dataclass
from datetime import date
from typing import Iterator, List

from edura_finance.app.core.errors import FinanceValidationError, PeriodValidationError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


@dataclass(frozen=True, order=True)
class BillingPeriod:
    year: int
    month: int

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def shift(self, months: int) -> "BillingPeriod":
        index = self.year * 12 + (self.month - 1) + months
        return BillingPeriod(index // 12, index % 12 + 1)

    def next(self) -> "BillingPeriod":
        return self.shift(1)

    def months_since(self, other: "BillingPeriod") -> int:
        return (self.year - other.year) * 12 + (self.month - other.month)

    def __str__(self) -> str:
        return self.key


def parse_period(value: str | None) -> BillingPeriod:
    if not isinstance(value, str):
        raise PeriodValidationError(value)
    match = _PERIOD_RE.match(value.strip())
    if not match:
        raise PeriodValidationError(value)
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise PeriodValidationError(value)
    return BillingPeriod(year, month)


def period_of(day: date) -> BillingPeriod:
    return BillingPeriod(day.year, day.month)


@dataclass(frozen=True)
class ReportingWindow:
    """Inclusive range of billing periods."""

    start: BillingPeriod
    end: BillingPeriod

    def __post_init__(self):
        if self.start > self.end:
            raise FinanceValidationError(f"Window start {self.start} is after end {self.end}")

    @classmethod
    def for_month(cls, key: str) -> "ReportingWindow":
        period = parse_period(key)
        return cls(period, period)

    @classmethod
    def for_year(cls, year: int) -> "ReportingWindow":
        if year < 1 or year > 9999:
            raise FinanceValidationError(f"Invalid year {year}")
        return cls(BillingPeriod(year, 1), BillingPeriod(year, 12))

    @classmethod
    def between(cls, start_key: str, end_key: str) -> "ReportingWindow":
        return cls(parse_period(start_key), parse_period(end_key))

    @property
    def first_day(self) -> date:
        return self.start.first_day

    @property
    def last_day(self) -> date:
        return self.end.last_day

    def periods(self) -> Iterator[BillingPeriod]:
        current = self.start
        while current <= self.end:
            yield current
            current = current.next()

    def keys(self) -> List[str]:
        return [p.key for p in self.periods()]
