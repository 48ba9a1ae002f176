"""Expense store abstraction and adapters consumed by the analytics engine."""

import uuid
import threading
from abc import ABC, abstractmethod
from datetime import datetime, time
from typing import Any, Dict, List, Optional
import logging

from boto3.dynamodb.conditions import Key
from pydantic import ValidationError as PydanticValidationError

from shared.dynamodb import DynamoDBClient
from shared.exceptions import StoreAccessError
from expenses.models import Expense, ExpenseCreate

logger = logging.getLogger(__name__)


class ExpenseStore(ABC):
    """
    Range-queryable collection of expenses.

    Implementations raise StoreAccessError when a read fails.
    """

    @abstractmethod
    def fetch_range(self, start: datetime, end: datetime) -> List[Expense]:
        """Return every expense with start <= date <= end, in store order."""

    @abstractmethod
    def fetch_all(self) -> List[Expense]:
        """Return every expense, in store order."""

    @abstractmethod
    def add(self, expense: Expense) -> Expense:
        """Persist an expense."""

    def count_range(self, start: datetime, end: datetime) -> int:
        return len(self.fetch_range(start, end))

    def record(self, payload: ExpenseCreate, now: Optional[datetime] = None) -> Expense:
        """
        Create and persist an expense from a request payload.

        Args:
            payload: Validated expense payload
            now: Timestamp used when the payload has no date

        Returns:
            The stored expense
        """
        expense = Expense(
            id=str(uuid.uuid4()),
            amount=payload.amount,
            category=payload.category.value,
            description=payload.description,
            date=payload.date or now or datetime.now(),
        )
        return self.add(expense)


class InMemoryExpenseStore(ExpenseStore):
    """List-backed store; reads return a snapshot in insertion order."""

    def __init__(self, expenses: Optional[List[Expense]] = None):
        self._expenses: List[Expense] = list(expenses or [])
        self._lock = threading.Lock()

    def fetch_range(self, start: datetime, end: datetime) -> List[Expense]:
        with self._lock:
            return [expense for expense in self._expenses if start <= expense.date <= end]

    def fetch_all(self) -> List[Expense]:
        with self._lock:
            return list(self._expenses)

    def add(self, expense: Expense) -> Expense:
        with self._lock:
            self._expenses.append(expense)
        return expense


class DynamoDBExpenseStore(ExpenseStore):
    """
    Per-user view over the expenses table.

    Range reads go through the user/date secondary index. Dates are stored as
    ISO 8601 strings, so `between` on the sort key is an inclusive range.
    """

    def __init__(
        self,
        user_id: str,
        table: DynamoDBClient,
        index_name: str = 'user-date-index',
        page_size: int = 100
    ):
        self.user_id = user_id
        self.table = table
        self.index_name = index_name
        self.page_size = page_size

    def fetch_range(self, start: datetime, end: datetime) -> List[Expense]:
        condition = Key('user_id').eq(self.user_id) & Key('date').between(_lower_key(start), end.isoformat())
        items = self.table.query_all(
            key_condition_expression=condition,
            index_name=self.index_name,
            page_size=self.page_size
        )
        return self._to_expenses(items)

    def fetch_all(self) -> List[Expense]:
        items = self.table.query_all(
            key_condition_expression=Key('user_id').eq(self.user_id),
            index_name=self.index_name,
            page_size=self.page_size
        )
        return self._to_expenses(items)

    def add(self, expense: Expense) -> Expense:
        self.table.put_item(expense.to_item(self.user_id))
        logger.info(f"Stored expense {expense.id} for user {self.user_id}")
        return expense

    def _to_expenses(self, items: List[Dict[str, Any]]) -> List[Expense]:
        expenses = []
        for item in items:
            try:
                expenses.append(Expense.from_item(item))
            except (KeyError, TypeError, ValueError, PydanticValidationError) as e:
                logger.error(f"Corrupt expense record for user {self.user_id}: {item.get('expense_id')}")
                raise StoreAccessError(f"Corrupt expense record: {str(e)}")
        return expenses


def _lower_key(start: datetime) -> str:
    """
    Lower sort-key bound for a range starting at `start`.

    Date-only items (YYYY-MM-DD) mean midnight but sort before the
    `T00:00:00` form, so a range opening at midnight starts at the bare date.
    """
    if start.time() == time.min:
        return start.date().isoformat()
    return start.isoformat()
