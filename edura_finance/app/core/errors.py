"""Domain errors raised by the finance services.

Routes translate these into HTTP responses through the handlers registered in
``edura_finance.app.main``; services never raise ``HTTPException`` directly.
"""


class FinanceError(Exception):
    """Base class for every error the finance engine reports to callers."""


class FinanceValidationError(FinanceError):
    """Input rejected before any write took place."""


class PeriodValidationError(FinanceValidationError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid period {value!r}: expected YYYY-MM")


class RecordNotFoundError(FinanceError):
    def __init__(self, kind: str, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class RateInUseError(FinanceError):
    def __init__(self, rate_id: int, usage_count: int):
        self.rate_id = rate_id
        self.usage_count = usage_count
        super().__init__(
            f"Rate {rate_id} is referenced by {usage_count} tutor payment(s); "
            "create a new rate instead of editing it"
        )


class CategoryInUseError(FinanceError):
    def __init__(self, category_id: int, expense_count: int):
        self.category_id = category_id
        self.expense_count = expense_count
        super().__init__(f"Expense category {category_id} is used by {expense_count} expense(s)")
