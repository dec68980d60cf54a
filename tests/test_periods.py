from datetime import date

import pytest

from edura_finance.app.core.errors import FinanceValidationError, PeriodValidationError
from edura_finance.app.services.periods import BillingPeriod, ReportingWindow, parse_period, period_of


def test_parse_period_valid():
    period = parse_period("2024-02")
    assert period == BillingPeriod(2024, 2)
    assert period.key == "2024-02"
    assert period.first_day == date(2024, 2, 1)
    assert period.last_day == date(2024, 2, 29)


@pytest.mark.parametrize("value", ["2024-13", "2024-00", "2024-1", "24-01", "2024/01", "", None, "abcd-ef"])
def test_parse_period_rejects_malformed(value):
    with pytest.raises(PeriodValidationError):
        parse_period(value)


def test_shift_crosses_year_boundary():
    assert BillingPeriod(2024, 12).next() == BillingPeriod(2025, 1)
    assert BillingPeriod(2024, 1).shift(-1) == BillingPeriod(2023, 12)
    assert BillingPeriod(2024, 11).shift(3) == BillingPeriod(2025, 2)
    assert BillingPeriod(2025, 2).months_since(BillingPeriod(2024, 11)) == 3


def test_period_of_uses_calendar_month():
    period = period_of(date(2024, 6, 30))
    assert period.key == "2024-06"
    assert period.first_day == date(2024, 6, 1)
    assert period_of(date(2024, 7, 1)) == period.next()


def test_window_for_year_lists_twelve_keys():
    window = ReportingWindow.for_year(2024)
    keys = window.keys()
    assert len(keys) == 12
    assert keys[0] == "2024-01" and keys[-1] == "2024-12"
    assert window.first_day == date(2024, 1, 1)
    assert window.last_day == date(2024, 12, 31)


def test_window_between_rejects_reversed_range():
    with pytest.raises(FinanceValidationError):
        ReportingWindow.between("2024-05", "2024-03")
