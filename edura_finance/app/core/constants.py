"""Closed value sets shared by models, schemas and services."""

BILLING_STATUS_PENDING = "pending"
BILLING_STATUS_PAID = "paid"
BILLING_STATUS_OVERDUE = "overdue"
BILLING_STATUS_CANCELLED = "cancelled"
BILLING_STATUSES = (
    BILLING_STATUS_PENDING,
    BILLING_STATUS_PAID,
    BILLING_STATUS_OVERDUE,
    BILLING_STATUS_CANCELLED,
)
UNPAID_STATUSES = (BILLING_STATUS_PENDING, BILLING_STATUS_OVERDUE)

PAYMENT_METHODS = ("cash", "bank_transfer", "momo", "vnpay")

RATE_TYPE_HOURLY = "HOURLY"
RATE_TYPE_PER_STUDENT = "PER_STUDENT"
RATE_TYPE_MONTHLY_FIXED = "MONTHLY_FIXED"
RATE_TYPES = (RATE_TYPE_HOURLY, RATE_TYPE_PER_STUDENT, RATE_TYPE_MONTHLY_FIXED)

SESSION_STATUS_CHECKED_IN = "checked_in"
SESSION_STATUS_COMPLETED = "completed"
SESSION_STATUS_MISSED = "missed"

EXPENSE_CATEGORY_TYPES = ("facility", "marketing", "operational")
RECURRING_INTERVALS = ("monthly", "quarterly", "yearly")

ROLE_MANAGER = "manager"
ROLE_TEACHER = "teacher"
ROLE_STUDENT = "student"
USER_ROLES = (ROLE_MANAGER, ROLE_TEACHER, ROLE_STUDENT)
