"""Lambda handler for analytics operations."""

import os
import logging
from typing import Dict, Any, Optional, Tuple
from datetime import datetime
import sys

# Add parent directory to path for imports
sys.path.append(os.path.join(os.path.dirname(__file__), '..'))

from shared.config import AnalyticsConfig
from shared.dynamodb import DynamoDBClient
from shared.response import (
    success_response,
    error_response,
    validation_error_response,
    not_found_response,
    unauthorized_response
)
from shared.validators import (
    validate_datetime,
    validate_date_range,
    validate_first_weekday,
    validate_required_fields
)
from shared.exceptions import ExpenseTrackerException, NotFoundError, ValidationError
from expenses.store import DynamoDBExpenseStore
from analytics.periods import day_range
from analytics.service import AnalyticsService
from analytics import cosmetics

config = AnalyticsConfig.from_env()

# Configure logging
logger = logging.getLogger()
logger.setLevel(config.log_level)

_expenses_table: Optional[DynamoDBClient] = None


def get_expenses_table() -> DynamoDBClient:
    """Create the expenses table client on first use."""
    global _expenses_table
    if _expenses_table is None:
        _expenses_table = DynamoDBClient(config.expenses_table, endpoint_url=config.endpoint_url)
    return _expenses_table


def get_analytics_service(user_id: str) -> AnalyticsService:
    """Build an analytics service over one user's expenses."""
    store = DynamoDBExpenseStore(user_id, get_expenses_table(), index_name=config.date_index)
    return AnalyticsService(store, first_weekday=config.first_weekday)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Lambda handler for analytics operations.

    Handles:
    - GET /analytics/summary - Today, this week and this month totals
    - GET /analytics/recent - Today's newest expenses
    - GET /analytics/categories - Category breakdown for a range
    - GET /analytics/daily-average - Average daily spending for a range
    - GET /analytics/largest - Largest expense in a range
    - GET /analytics/trend - Compare two ranges
    - GET /analytics/wrapped - Month-in-review insights

    Args:
        event: Lambda event
        context: Lambda context

    Returns:
        API Gateway response
    """
    try:
        logger.info(f"Request: {event.get('httpMethod')} {event.get('path')}")

        user_id = get_user_id(event)
        if not user_id:
            return unauthorized_response()

        http_method = event.get('httpMethod')
        path = event.get('path')

        if http_method != 'GET' or path not in ROUTES:
            raise NotFoundError("Route not found")

        query_params = event.get('queryStringParameters') or {}
        service = get_analytics_service(user_id)

        return ROUTES[path](service, query_params)

    except ValidationError as e:
        return validation_error_response(e.message)
    except NotFoundError as e:
        return not_found_response(e.message)
    except ExpenseTrackerException as e:
        logger.error(f"Application error: {str(e)}")
        return error_response(e.message, status_code=e.status_code)
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        return error_response("Internal server error", status_code=500)


def handle_summary(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle dashboard totals relative to a reference instant."""
    reference = _reference(query_params)

    if query_params.get('first_weekday') is not None:
        service.first_weekday = validate_first_weekday(query_params['first_weekday'])

    return success_response(data={
        'reference': reference,
        'today': service.todays_spending(reference),
        'this_week': service.this_weeks_spending(reference),
        'this_month': service.this_months_spending(reference)
    })


def handle_recent(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle the dashboard's newest expenses for the reference day."""
    reference = _reference(query_params)
    today = day_range(reference)

    return success_response(data={
        'today': service.todays_spending(reference),
        'expenses': service.recent_expenses(today.start, today.end, limit=config.recent_expenses_limit)
    })


def handle_categories(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle category breakdown for a range."""
    start, end = _range(query_params, 'start_date', 'end_date')

    return success_response(data={
        'start_date': start,
        'end_date': end,
        'categories': service.spending_by_category(start, end),
        'most_frequent_category': service.most_frequent_category(start, end),
        'highest_spending_category': service.highest_spending_category(start, end)
    })


def handle_daily_average(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle average daily spending for a range."""
    start, end = _range(query_params, 'start_date', 'end_date')

    return success_response(data={
        'start_date': start,
        'end_date': end,
        'average_daily_spending': service.average_daily_spending(start, end)
    })


def handle_largest(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle largest expense for a range."""
    start, end = _range(query_params, 'start_date', 'end_date')

    return success_response(data={
        'start_date': start,
        'end_date': end,
        'largest_expense': service.largest_expense(start, end)
    })


def handle_trend(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle spending comparison between two ranges."""
    validate_required_fields(query_params, ['current_start', 'current_end', 'previous_start', 'previous_end'])

    current = _range(query_params, 'current_start', 'current_end')
    previous = _range(query_params, 'previous_start', 'previous_end')

    trend = service.spending_trend(current, previous)

    return success_response(data={
        **trend.model_dump(),
        'is_increasing': trend.is_increasing,
        'is_decreasing': trend.is_decreasing
    })


def handle_wrapped(service: AnalyticsService, query_params: Dict[str, Any]) -> Dict[str, Any]:
    """Handle month-in-review insights."""
    reference = _reference(query_params)
    insights = service.generate_wrapped_insights(reference)

    logger.info(f"Generated wrapped insights for {reference:%Y-%m}")

    return success_response(data={
        'insights': insights,
        'month_over_month': insights.month_over_month,
        'comparisons': cosmetics.comparisons()
    })


ROUTES = {
    '/analytics/summary': handle_summary,
    '/analytics/recent': handle_recent,
    '/analytics/categories': handle_categories,
    '/analytics/daily-average': handle_daily_average,
    '/analytics/largest': handle_largest,
    '/analytics/trend': handle_trend,
    '/analytics/wrapped': handle_wrapped,
}


def _reference(query_params: Dict[str, Any]) -> datetime:
    if query_params.get('reference'):
        return validate_datetime(query_params['reference'], 'reference')
    return datetime.now()


def _range(query_params: Dict[str, Any], start_field: str, end_field: str) -> Tuple[datetime, datetime]:
    start = validate_datetime(query_params.get(start_field), start_field)
    end = validate_datetime(query_params.get(end_field), end_field, end_of_day=True)
    validate_date_range(start, end)
    return start, end


def get_user_id(event: Dict[str, Any]) -> Optional[str]:
    """
    Extract user ID from Cognito authorizer claims.

    Args:
        event: Lambda event

    Returns:
        User ID (sub claim)
    """
    request_context = event.get('requestContext', {})
    authorizer = request_context.get('authorizer', {})
    claims = authorizer.get('claims', {})
    return claims.get('sub')
