from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from edura_finance.app.core.time import utc_now
from edura_finance.app.db.base_class import Base


class ExpenseCategory(Base):
    __tablename__ = "expense_categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    type = Column(String(20), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    expenses = relationship("Expense", back_populates="category")
