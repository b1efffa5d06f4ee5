import os

os.environ.setdefault("RECORD_BACKEND", "memory")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from expense_analytics.db.memory import InMemoryRecordSource
from expense_analytics.db.source import get_record_source
from expense_analytics.main import app
from expense_analytics.models.records import Category, ExpenseRecord


def make_record(expense_id, amount, day, category_id):
    return ExpenseRecord(
        id=expense_id,
        amount=Decimal(str(amount)),
        date=date.fromisoformat(day) if isinstance(day, str) else day,
        category_id=category_id,
    )


FOOD = Category(id="cat-food", name="Food", color="#FF0000", icon="utensils")
TRANSPORT = Category(id="cat-transport", name="Transport", color="#00FF00")
CATEGORIES = {FOOD.id: FOOD, TRANSPORT.id: TRANSPORT}


@pytest.fixture
def source():
    return InMemoryRecordSource()


@pytest.fixture
def client(source):
    app.dependency_overrides[get_record_source] = lambda: source
    yield TestClient(app)
    app.dependency_overrides.clear()
