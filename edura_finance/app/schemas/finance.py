"""Financial reporting schemas."""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class OverdueBillingRead(BaseModel):
    billing_id: int
    student_id: int
    class_id: int
    invoice_number: Optional[str]
    billing_month: str
    amount: int
    status: str
    due_date: date
    days_overdue: int
    aging_bucket: str
    student_name: Optional[str] = None
    student_email: Optional[str] = None
    class_name: Optional[str] = None
    class_code: Optional[str] = None


class AgingBucketRead(BaseModel):
    bucket: str
    total: int
    count: int

    model_config = ConfigDict(from_attributes=True)


class AgingSummaryRead(BaseModel):
    as_of: date
    currency: str | None = "VND"
    buckets: List[AgingBucketRead]
    total_overdue_amount: int
    total_overdue_count: int

    model_config = ConfigDict(from_attributes=True)


class PaymentMethodShare(BaseModel):
    method: str
    count: int
    amount: int


class CollectionMetrics(BaseModel):
    start_month: Optional[str] = None
    end_month: Optional[str] = None
    total_billed: int
    total_collected: int
    collection_rate: int
    payment_method_distribution: List[PaymentMethodShare]


class CashFlowMonth(BaseModel):
    month: str
    inflow: int
    tutor_wages: int
    expenses: int
    total_outflow: int
    net_cash_flow: int


class CashFlowSummary(BaseModel):
    year: int
    monthly_data: List[CashFlowMonth]
    total_inflow: int
    total_outflow: int
    total_net_cash_flow: int
    projected_monthly_revenue: int
    projected_annual_revenue: int


class ClassRevenue(BaseModel):
    class_id: int
    class_name: str
    revenue: int


class Profitability(BaseModel):
    start_month: str
    end_month: str
    total_revenue: int
    total_teacher_cost: int
    total_expenses: int
    net_profit: int
    net_profit_margin: int
    teacher_cost_ratio: int
    active_student_count: int
    revenue_per_student: int
    class_count: int
    avg_revenue_per_class: int
    revenue_by_class: List[ClassRevenue]


class MonthTrendPoint(BaseModel):
    month: str
    revenue: int
    outstanding: int


class FinancialSummary(BaseModel):
    as_of: str
    total_revenue: int
    outstanding_bills: int
    outstanding_count: int
    month_revenue: int
    pending_tutor_payments: int
    pending_tutor_count: int
    monthly_trend: List[MonthTrendPoint]
