"""DynamoDB utilities and helper functions."""

import os
import boto3
from typing import Any, Dict, List, Optional
from decimal import Decimal
from botocore.exceptions import ClientError
import logging

from .exceptions import StoreAccessError

logger = logging.getLogger(__name__)


class DynamoDBClient:
    """DynamoDB table wrapper used by the expense store."""

    def __init__(self, table_name: str, endpoint_url: Optional[str] = None):
        """
        Initialize DynamoDB client.

        Args:
            table_name: Name of the DynamoDB table
            endpoint_url: Optional endpoint override (LocalStack)
        """
        self.table_name = table_name

        # Support for LocalStack
        if endpoint_url is None and os.environ.get('USE_LOCALSTACK', 'false').lower() == 'true':
            endpoint_url = os.environ.get('LOCALSTACK_ENDPOINT')

        if endpoint_url:
            self.dynamodb = boto3.resource('dynamodb', endpoint_url=endpoint_url)
        else:
            self.dynamodb = boto3.resource('dynamodb')

        self.table = self.dynamodb.Table(table_name)

    def put_item(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """
        Put an item in the table.

        Args:
            item: Item to put

        Returns:
            The item as written

        Raises:
            StoreAccessError: If the operation fails
        """
        try:
            item = self._python_to_dynamodb(item)
            self.table.put_item(Item=item)
            return item
        except ClientError as e:
            logger.error(f"Error putting item into {self.table_name}: {e}")
            raise StoreAccessError(f"Failed to put item: {str(e)}")

    def query(
        self,
        key_condition_expression: Any,
        index_name: Optional[str] = None,
        limit: Optional[int] = None,
        scan_forward: bool = True,
        exclusive_start_key: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Query a single page of items.

        Args:
            key_condition_expression: Key condition expression
            index_name: Optional index name
            limit: Optional page size
            scan_forward: Sort order (default: True for ascending)
            exclusive_start_key: Optional pagination key

        Returns:
            Dictionary with items and optional last_evaluated_key

        Raises:
            StoreAccessError: If the operation fails
        """
        try:
            kwargs = {
                'KeyConditionExpression': key_condition_expression,
                'ScanIndexForward': scan_forward
            }

            if index_name:
                kwargs['IndexName'] = index_name
            if limit:
                kwargs['Limit'] = limit
            if exclusive_start_key:
                kwargs['ExclusiveStartKey'] = exclusive_start_key

            response = self.table.query(**kwargs)

            return {
                'items': [self._dynamodb_to_python(item) for item in response.get('Items', [])],
                'last_evaluated_key': response.get('LastEvaluatedKey')
            }
        except ClientError as e:
            logger.error(f"Error querying {self.table_name}: {e}")
            raise StoreAccessError(f"Failed to query items: {str(e)}")

    def query_all(
        self,
        key_condition_expression: Any,
        index_name: Optional[str] = None,
        page_size: int = 100
    ) -> List[Dict[str, Any]]:
        """
        Query every page of items matching a key condition.

        Args:
            key_condition_expression: Key condition expression
            index_name: Optional index name
            page_size: Items requested per page

        Returns:
            All matching items in index order

        Raises:
            StoreAccessError: If any page fails
        """
        items = []
        last_key = None

        while True:
            result = self.query(
                key_condition_expression=key_condition_expression,
                index_name=index_name,
                limit=page_size,
                exclusive_start_key=last_key
            )

            items.extend(result['items'])
            last_key = result.get('last_evaluated_key')

            if not last_key:
                break

        return items

    @staticmethod
    def _python_to_dynamodb(obj: Any) -> Any:
        """Convert Python objects to DynamoDB compatible format."""
        if isinstance(obj, dict):
            return {k: DynamoDBClient._python_to_dynamodb(v) for k, v in obj.items() if v is not None}
        elif isinstance(obj, list):
            return [DynamoDBClient._python_to_dynamodb(item) for item in obj]
        elif isinstance(obj, float):
            return Decimal(str(obj))
        return obj

    @staticmethod
    def _dynamodb_to_python(obj: Any) -> Any:
        """Convert DynamoDB objects to Python format."""
        if isinstance(obj, dict):
            return {k: DynamoDBClient._dynamodb_to_python(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [DynamoDBClient._dynamodb_to_python(item) for item in obj]
        elif isinstance(obj, Decimal):
            return float(obj)
        return obj
