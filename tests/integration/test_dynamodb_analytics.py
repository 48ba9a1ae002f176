"""Integration tests for analytics over the DynamoDB expense store."""

import pytest
from datetime import datetime
from moto import mock_aws
import boto3
import sys
import os

# Add src directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from analytics.service import AnalyticsService
from expenses.models import Expense, ExpenseCategory, ExpenseCreate
from expenses.store import DynamoDBExpenseStore
from shared.dynamodb import DynamoDBClient


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS Credentials for moto."""
    monkeypatch.setenv('AWS_ACCESS_KEY_ID', 'testing')
    monkeypatch.setenv('AWS_SECRET_ACCESS_KEY', 'testing')
    monkeypatch.setenv('AWS_SECURITY_TOKEN', 'testing')
    monkeypatch.setenv('AWS_SESSION_TOKEN', 'testing')
    monkeypatch.setenv('AWS_DEFAULT_REGION', 'us-east-1')
    monkeypatch.delenv('USE_LOCALSTACK', raising=False)


@pytest.fixture
def expenses_table(aws_credentials):
    """Create mock expenses table with the user/date index."""
    with mock_aws():
        dynamodb = boto3.resource('dynamodb', region_name='us-east-1')
        dynamodb.create_table(
            TableName='test-expenses',
            KeySchema=[
                {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                {'AttributeName': 'expense_id', 'KeyType': 'RANGE'}
            ],
            AttributeDefinitions=[
                {'AttributeName': 'user_id', 'AttributeType': 'S'},
                {'AttributeName': 'expense_id', 'AttributeType': 'S'},
                {'AttributeName': 'date', 'AttributeType': 'S'}
            ],
            BillingMode='PAY_PER_REQUEST',
            GlobalSecondaryIndexes=[
                {
                    'IndexName': 'user-date-index',
                    'KeySchema': [
                        {'AttributeName': 'user_id', 'KeyType': 'HASH'},
                        {'AttributeName': 'date', 'KeyType': 'RANGE'}
                    ],
                    'Projection': {'ProjectionType': 'ALL'}
                }
            ]
        )
        yield DynamoDBClient('test-expenses')


@pytest.fixture
def store(expenses_table):
    store = DynamoDBExpenseStore('user123', expenses_table, page_size=2)
    expenses = [
        Expense(id='e1', amount=45.5, category='Food & Dining', date=datetime(2024, 1, 3, 12, 30)),
        Expense(id='e2', amount=30.0, category='Fuel', date=datetime(2024, 1, 5, 8, 0)),
        Expense(id='e3', amount=40.0, category='Fuel', date=datetime(2024, 1, 28, 9, 15)),
        Expense(id='e4', amount=120.0, category='Shopping', date=datetime(2024, 1, 31, 23, 59, 59, 999999)),
        Expense(id='e5', amount=80.0, category='Utilities', date=datetime(2023, 12, 15, 10, 0)),
        Expense(id='e6', amount=15.0, category=None, date=datetime(2024, 2, 1)),
    ]
    for expense in expenses:
        store.add(expense)

    # Another user's expense must never be visible
    DynamoDBExpenseStore('someone-else', expenses_table).add(
        Expense(id='other', amount=999.0, category='Travel', date=datetime(2024, 1, 15))
    )
    return store


class TestDynamoDBAnalytics:
    """Analytics over a moto-backed expenses table."""

    def test_fetch_range_paginates_and_is_inclusive(self, store):
        expenses = store.fetch_range(datetime(2024, 1, 1), datetime(2024, 1, 31, 23, 59, 59, 999999))

        assert [expense.id for expense in expenses] == ['e1', 'e2', 'e3', 'e4']
        assert all(isinstance(expense.amount, float) for expense in expenses)

    def test_fetch_all_scoped_to_user(self, store):
        assert len(store.fetch_all()) == 6

    def test_wrapped_insights(self, store):
        service = AnalyticsService(store)

        insights = service.generate_wrapped_insights(datetime(2024, 1, 15))

        assert insights.total_this_month == pytest.approx(235.5)
        assert insights.total_last_month == pytest.approx(80.0)
        assert insights.total_this_year == pytest.approx(250.5)
        assert insights.top_category == 'Shopping'
        assert insights.largest_expense.id == 'e4'
        assert insights.total_transactions == 4
        assert [entry.category for entry in insights.category_breakdown] == ['Shopping', 'Fuel', 'Food & Dining']

    def test_missing_category_round_trips_as_unknown(self, store):
        service = AnalyticsService(store)

        breakdown = service.spending_by_category(datetime(2024, 2, 1), datetime(2024, 2, 29))

        assert breakdown[0].category == 'Unknown'
        assert breakdown[0].total == 15.0

    def test_record_then_query(self, store):
        service = AnalyticsService(store)
        store.record(
            ExpenseCreate(amount=9.5, category=ExpenseCategory.ENTERTAINMENT, date=datetime(2024, 3, 3, 20, 0))
        )

        assert service.total_spending(datetime(2024, 3, 1), datetime(2024, 3, 31)) == pytest.approx(9.5)

    def test_missing_table_fails_soft(self, aws_credentials):
        with mock_aws():
            on_error = []
            store = DynamoDBExpenseStore('user123', DynamoDBClient('no-such-table'))
            service = AnalyticsService(store, on_error=lambda operation, error: on_error.append(operation))

            assert service.total_spending(datetime(2024, 1, 1), datetime(2024, 1, 31)) == 0
            assert on_error == ['total_spending']


class TestDateOnlyRecords:
    """Analytics over items stored with YYYY-MM-DD dates."""

    @pytest.fixture
    def date_only_store(self, expenses_table):
        for expense_id, amount, date in [
            ('d1', 10.0, '2024-01-01'),
            ('d2', 20.0, '2024-01-15'),
            ('d3', 5.0, '2024-01-31'),
            ('d4', 7.0, '2024-02-01'),
        ]:
            expenses_table.put_item({
                'user_id': 'user123',
                'expense_id': expense_id,
                'amount': amount,
                'merchant': 'Corner Shop',
                'category': 'Shopping',
                'date': date
            })
        return DynamoDBExpenseStore('user123', expenses_table)

    def test_first_day_of_month_is_included(self, date_only_store):
        service = AnalyticsService(date_only_store)

        assert service.this_months_spending(datetime(2024, 1, 10)) == pytest.approx(35.0)

    def test_single_day_range(self, date_only_store):
        service = AnalyticsService(date_only_store)

        assert service.todays_spending(datetime(2024, 2, 1, 18, 0)) == pytest.approx(7.0)

    def test_range_starting_after_midnight_excludes_that_day(self, date_only_store):
        expenses = date_only_store.fetch_range(datetime(2024, 1, 1, 9, 0), datetime(2024, 1, 31))

        assert [expense.id for expense in expenses] == ['d2', 'd3']
