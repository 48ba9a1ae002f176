"""Analytics value models."""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from expenses.models import Expense


class DateRange(BaseModel):
    """Inclusive [start, end] interval."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    def contains(self, instant: datetime) -> bool:
        return self.start <= instant <= self.end


class CategorySpending(BaseModel):
    """Aggregate spending for one category within a range."""

    model_config = ConfigDict(frozen=True)

    category: str
    total: float
    count: int
    average: float


class SpendingTrend(BaseModel):
    """Change in total spending between two ranges."""

    model_config = ConfigDict(frozen=True)

    current_amount: float
    previous_amount: float
    difference: float
    percentage_change: float

    @classmethod
    def between(cls, current_amount: float, previous_amount: float) -> "SpendingTrend":
        difference = current_amount - previous_amount
        percentage_change = (difference / previous_amount) * 100 if previous_amount > 0 else 0.0
        return cls(
            current_amount=current_amount,
            previous_amount=previous_amount,
            difference=difference,
            percentage_change=percentage_change,
        )

    @property
    def is_increasing(self) -> bool:
        return self.difference > 0

    @property
    def is_decreasing(self) -> bool:
        return self.difference < 0


class WrappedInsights(BaseModel):
    """Month-in-review summary built from the other aggregates."""

    model_config = ConfigDict(frozen=True)

    total_this_month: float
    total_last_month: float
    total_this_year: float
    top_category: str
    top_category_amount: float
    largest_expense: Optional[Expense] = None
    average_daily_spending: float
    total_transactions: int
    category_breakdown: List[CategorySpending] = []

    @property
    def month_over_month(self) -> SpendingTrend:
        return SpendingTrend.between(self.total_this_month, self.total_last_month)
