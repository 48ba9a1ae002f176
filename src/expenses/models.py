"""Expense data models."""

from enum import Enum
from typing import Optional, List, Dict, Any
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime

UNKNOWN_CATEGORY = "Unknown"


class ExpenseCategory(str, Enum):
    """Categories offered when recording an expense."""

    FOOD_AND_DINING = "Food & Dining"
    FUEL = "Fuel"
    VEHICLE_MAINTENANCE = "Vehicle Maintenance"
    RENT_MORTGAGE = "Rent/Mortgage"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    HEALTHCARE = "Healthcare"
    TRAVEL = "Travel"
    OTHER = "Other"

    @classmethod
    def default_categories(cls) -> List["ExpenseCategory"]:
        return list(cls)


QUICK_AMOUNTS: Dict[ExpenseCategory, List[float]] = {
    ExpenseCategory.FOOD_AND_DINING: [5, 10, 15, 20, 25, 30],
    ExpenseCategory.FUEL: [20, 30, 40, 50, 60, 70],
    ExpenseCategory.VEHICLE_MAINTENANCE: [50, 100, 150, 200, 300, 500],
    ExpenseCategory.RENT_MORTGAGE: [500, 800, 1000, 1200, 1500, 2000],
    ExpenseCategory.SHOPPING: [25, 50, 75, 100, 150, 200],
    ExpenseCategory.ENTERTAINMENT: [10, 20, 30, 50, 75, 100],
    ExpenseCategory.UTILITIES: [50, 75, 100, 125, 150, 200],
    ExpenseCategory.HEALTHCARE: [25, 50, 75, 100, 150, 200],
    ExpenseCategory.TRAVEL: [50, 100, 200, 300, 500, 1000],
    ExpenseCategory.OTHER: [10, 25, 50, 75, 100, 200],
}


def quick_amounts(category: ExpenseCategory) -> List[float]:
    """Preset amounts suggested for a category on the quick-add sheet."""
    return list(QUICK_AMOUNTS[ExpenseCategory(category)])


class Expense(BaseModel):
    """
    Expense record as returned by the store.

    Amounts are taken as-is; callers are expected to keep them non-negative.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    amount: float
    category: Optional[str] = None
    description: Optional[str] = None
    date: datetime

    @property
    def wrapped_category(self) -> str:
        return self.category or UNKNOWN_CATEGORY

    @property
    def wrapped_description(self) -> str:
        return self.description or ""

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "Expense":
        """
        Build an expense from a stored item.

        Accepts `expense_id` or `id`, and `description` or `notes`.

        Raises:
            KeyError: If the item has no id, amount or date
        """
        expense_id = item.get('expense_id') or item.get('id')
        if not expense_id:
            raise KeyError('expense_id')

        return cls(
            id=str(expense_id),
            amount=float(item['amount']),
            category=item.get('category') or None,
            description=item.get('description') or item.get('notes'),
            date=item['date'],
        )

    def to_item(self, user_id: str) -> Dict[str, Any]:
        """Serialize into a store item keyed by user."""
        return {
            'user_id': user_id,
            'expense_id': self.id,
            'amount': self.amount,
            'category': self.category,
            'description': self.description,
            'date': self.date.isoformat(),
        }


class ExpenseCreate(BaseModel):
    """Payload used to record a new expense."""

    amount: float = Field(..., ge=0, description="Expense amount")
    category: ExpenseCategory = Field(..., description="Expense category")
    description: Optional[str] = Field(None, description="Optional notes")
    date: Optional[datetime] = Field(None, description="Defaults to now")
