"""Analytics service computing spending aggregates and insights."""

from typing import Callable, Dict, List, Optional, Tuple, Union
from datetime import datetime
import calendar
import logging

from expenses.models import Expense
from expenses.store import ExpenseStore
from analytics.models import CategorySpending, DateRange, SpendingTrend, WrappedInsights
from analytics.periods import (
    calendar_days_between,
    day_range,
    month_range,
    previous_month_range,
    week_range,
    year_range,
)

logger = logging.getLogger(__name__)

ErrorHook = Callable[[str, Exception], None]
RangeLike = Union[DateRange, Tuple[datetime, datetime]]


class AnalyticsService:
    """
    Read-only analytics over an expense store.

    Every operation issues its own store read and caches nothing, so two
    calls over the same range may observe different data if the store is
    written in between. Store failures never propagate: they are logged,
    passed to the `on_error` hook, and the operation returns its neutral
    default (0, empty list or None).
    """

    def __init__(
        self,
        store: ExpenseStore,
        on_error: Optional[ErrorHook] = None,
        first_weekday: int = calendar.MONDAY
    ):
        """
        Initialize analytics service.

        Args:
            store: Expense store to read from
            on_error: Diagnostic hook called with (operation, error) on store failure
            first_weekday: First day of the week for weekly totals (0 = Monday)
        """
        self.store = store
        self.on_error = on_error
        self.first_weekday = first_weekday

    # Basic totals

    def total_spending(self, start: datetime, end: datetime) -> float:
        """Sum of amounts for expenses dated within [start, end]."""
        expenses = self._fetch('total_spending', start, end)
        return sum(expense.amount for expense in expenses)

    def todays_spending(self, reference: Optional[datetime] = None) -> float:
        period = day_range(reference or datetime.now())
        return self.total_spending(period.start, period.end)

    def this_weeks_spending(self, reference: Optional[datetime] = None) -> float:
        period = week_range(reference or datetime.now(), self.first_weekday)
        return self.total_spending(period.start, period.end)

    def this_months_spending(self, reference: Optional[datetime] = None) -> float:
        period = month_range(reference or datetime.now())
        return self.total_spending(period.start, period.end)

    # Category analysis

    def spending_by_category(self, start: datetime, end: datetime) -> List[CategorySpending]:
        """
        Spending breakdown by category, highest total first.

        Expenses without a category are grouped under "Unknown". Categories
        with equal totals keep the order in which the store first returned them.
        """
        expenses = self._fetch('spending_by_category', start, end)

        grouped: Dict[str, List[Expense]] = {}
        for expense in expenses:
            grouped.setdefault(expense.wrapped_category, []).append(expense)

        breakdown = []
        for category, items in grouped.items():
            total = sum(item.amount for item in items)
            breakdown.append(CategorySpending(
                category=category,
                total=total,
                count=len(items),
                average=total / len(items)
            ))

        return sorted(breakdown, key=lambda entry: entry.total, reverse=True)

    def most_frequent_category(self, start: datetime, end: datetime) -> Optional[str]:
        breakdown = self.spending_by_category(start, end)
        if not breakdown:
            return None
        # max() keeps the first of equal counts, i.e. the higher-spending one
        return max(breakdown, key=lambda entry: entry.count).category

    def highest_spending_category(self, start: datetime, end: datetime) -> Optional[str]:
        breakdown = self.spending_by_category(start, end)
        return breakdown[0].category if breakdown else None

    # Pattern analysis

    def average_daily_spending(self, start: datetime, end: datetime) -> float:
        total = self.total_spending(start, end)
        return total / calendar_days_between(start, end)

    def largest_expense(self, start: datetime, end: datetime) -> Optional[Expense]:
        """Largest single expense in the range; ties go to the first in store order."""
        largest = None
        for expense in self._fetch('largest_expense', start, end):
            if largest is None or expense.amount > largest.amount:
                largest = expense
        return largest

    def count_transactions(self, start: datetime, end: datetime) -> int:
        try:
            return self.store.count_range(start, end)
        except Exception as e:
            self._report('count_transactions', start, end, e)
            return 0

    def recent_expenses(self, start: datetime, end: datetime, limit: int = 5) -> List[Expense]:
        """Most recent expenses in the range, newest first."""
        expenses = self._fetch('recent_expenses', start, end)
        return sorted(expenses, key=lambda expense: expense.date, reverse=True)[:limit]

    def spending_trend(self, current_period: RangeLike, previous_period: RangeLike) -> SpendingTrend:
        """
        Compare total spending between two ranges.

        Ranges may overlap; each total is computed independently.
        """
        current_start, current_end = _unpack(current_period)
        previous_start, previous_end = _unpack(previous_period)

        return SpendingTrend.between(
            self.total_spending(current_start, current_end),
            self.total_spending(previous_start, previous_end)
        )

    # Wrapped-style insights

    def generate_wrapped_insights(self, reference: Optional[datetime] = None) -> WrappedInsights:
        """
        Build the month-in-review summary for the month containing `reference`.

        Args:
            reference: Instant inside the month to summarize (default: now)

        Returns:
            Insights for that month, with last-month and year-to-date totals
        """
        reference = reference or datetime.now()
        this_month = month_range(reference)
        last_month = previous_month_range(reference)
        this_year = year_range(reference)

        categories = self.spending_by_category(this_month.start, this_month.end)
        top = categories[0] if categories else None

        return WrappedInsights(
            total_this_month=self.total_spending(this_month.start, this_month.end),
            total_last_month=self.total_spending(last_month.start, last_month.end),
            total_this_year=self.total_spending(this_year.start, this_year.end),
            top_category=top.category if top else "",
            top_category_amount=top.total if top else 0.0,
            largest_expense=self.largest_expense(this_month.start, this_month.end),
            average_daily_spending=self.average_daily_spending(this_month.start, this_month.end),
            total_transactions=self.count_transactions(this_month.start, this_month.end),
            category_breakdown=categories
        )

    def _fetch(self, operation: str, start: datetime, end: datetime) -> List[Expense]:
        try:
            return self.store.fetch_range(start, end)
        except Exception as e:
            self._report(operation, start, end, e)
            return []

    def _report(self, operation: str, start: datetime, end: datetime, error: Exception) -> None:
        logger.error(
            f"Store read failed in {operation} for {start.isoformat()} - {end.isoformat()}: {error}",
            exc_info=True
        )
        if self.on_error is None:
            return
        try:
            self.on_error(operation, error)
        except Exception:
            logger.exception(f"Analytics error hook failed for {operation}")


def _unpack(period: RangeLike) -> Tuple[datetime, datetime]:
    if isinstance(period, DateRange):
        return period.start, period.end
    start, end = period
    return start, end
