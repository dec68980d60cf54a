"""Operating expenses; recurring rows are expanded at report time, never copied."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("expense_categories.id"), nullable=False, index=True)
    amount = Column(Integer, nullable=False)
    description = Column(Text, nullable=True)
    expense_date = Column(Date, nullable=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_interval = Column(String(20), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    category = relationship("ExpenseCategory", back_populates="expenses")
