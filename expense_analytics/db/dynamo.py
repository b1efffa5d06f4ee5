from decimal import Decimal
from datetime import date
from typing import Any, Dict, List, Optional
import logging

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from expense_analytics.core.config import settings
from expense_analytics.core.errors import UpstreamQueryFailure
from expense_analytics.models.records import Category, ExpenseRecord
from expense_analytics.utils.calendar_window import DateWindow

logger = logging.getLogger(__name__)

# Sort keys are "<ISO date>#<uuid>"; "~" sorts after every uuid character.
SORT_KEY_CEILING = "~"


def expense_sort_key(expense_date: date, expense_id: str) -> str:
    return f"{expense_date.isoformat()}#{expense_id}"


class DynamoRecordSource:
    """
    Record source backed by two DynamoDB tables.

    Expenses: partition key ``user_id``, sort key ``expense_key`` built by
    ``expense_sort_key`` so date windows become key-range queries.
    Categories: partition key ``user_id``, sort key ``category_id``.
    """

    def __init__(self, expenses_table, categories_table) -> None:
        self.expenses_table = expenses_table
        self.categories_table = categories_table

    @classmethod
    def from_settings(cls) -> "DynamoRecordSource":
        dynamodb = boto3.resource("dynamodb", region_name=settings.DYNAMO_REGION)
        return cls(
            dynamodb.Table(settings.DYNAMO_EXPENSES_TABLE),
            dynamodb.Table(settings.DYNAMO_CATEGORIES_TABLE),
        )

    def get_categories(self, user_id: str) -> Dict[str, Category]:
        """All categories for a user, keyed by category id."""
        items = self._query_all(
            self.categories_table,
            "get_categories",
            KeyConditionExpression=Key("user_id").eq(user_id),
        )
        return {item["category_id"]: _category_from_item(item) for item in items}

    def get_expenses(self, user_id: str, window: Optional[DateWindow] = None) -> List[ExpenseRecord]:
        """
        Query expenses for a user, optionally restricted to a date window.
        Results come back in ascending date order.
        """
        condition = Key("user_id").eq(user_id)
        if window is not None:
            condition = condition & Key("expense_key").between(
                window.start.isoformat(), window.end.isoformat() + SORT_KEY_CEILING
            )
        items = self._query_all(self.expenses_table, "get_expenses", KeyConditionExpression=condition)
        return [_expense_from_item(item) for item in items]

    def get_recent_expenses(self, user_id: str, limit: int) -> List[ExpenseRecord]:
        try:
            response = self.expenses_table.query(
                KeyConditionExpression=Key("user_id").eq(user_id),
                ScanIndexForward=False,
                Limit=limit,
            )
        except ClientError as e:
            logger.error(f"get_recent_expenses failed: {e.response['Error']['Message']}")
            raise UpstreamQueryFailure(f"get_recent_expenses failed for user {user_id}") from e
        return [_expense_from_item(item) for item in response.get("Items", [])]

    def put_expense(self, user_id: str, record: ExpenseRecord) -> ExpenseRecord:
        item = {
            "user_id": user_id,
            "expense_key": expense_sort_key(record.date, record.id),
            "expense_id": record.id,
            "title": record.title,
            "description": record.description,
            "amount": record.amount,
            "date": record.date.isoformat(),
            "category_id": record.category_id,
        }
        self._put(self.expenses_table, "put_expense", item)
        return record

    def put_category(self, user_id: str, category: Category) -> Category:
        item = {"user_id": user_id, "category_id": category.id, **category.to_dict()}
        item.pop("id")
        self._put(self.categories_table, "put_category", item)
        return category

    def _put(self, table, operation: str, item: Dict[str, Any]) -> None:
        try:
            table.put_item(Item=_convert_for_dynamo(item))
        except ClientError as e:
            logger.error(f"{operation} failed: {e.response['Error']['Message']}")
            raise UpstreamQueryFailure(f"{operation} failed") from e

    @staticmethod
    def _query_all(table, operation: str, **kwargs) -> List[Dict[str, Any]]:
        """Run a query to completion, following pagination."""
        items: List[Dict[str, Any]] = []
        try:
            while True:
                response = table.query(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    return items
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error(f"{operation} failed: {e.response['Error']['Message']}")
            raise UpstreamQueryFailure(f"{operation} failed") from e


def _category_from_item(item: Dict[str, Any]) -> Category:
    return Category(
        id=item["category_id"],
        name=item["name"],
        color=item["color"],
        icon=item.get("icon"),
        description=item.get("description"),
    )


def _expense_from_item(item: Dict[str, Any]) -> ExpenseRecord:
    return ExpenseRecord(
        id=item["expense_id"],
        amount=Decimal(str(item["amount"])),
        date=date.fromisoformat(item["date"]),
        category_id=item["category_id"],
        title=item.get("title", ""),
        description=item.get("description"),
    )


def _convert_for_dynamo(obj: Any):
    """
    Recursively convert floats to Decimal and drop None values for DynamoDB.
    """
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _convert_for_dynamo(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [_convert_for_dynamo(v) for v in obj]
    return obj
