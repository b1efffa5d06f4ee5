from pydantic import BaseModel, Field, field_validator
from typing import Optional
from uuid import UUID, uuid4
import datetime
from decimal import Decimal

from expense_analytics.models.category import CategorySummary
from expense_analytics.models.records import Category, ExpenseRecord


class ExpenseCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    amount: Decimal = Field(gt=0, le=Decimal("999999.99"), decimal_places=2)
    date: datetime.date
    category_id: UUID

    @field_validator("date")
    @classmethod
    def date_not_in_future(cls, value: datetime.date) -> datetime.date:
        if value > datetime.date.today():
            raise ValueError("Date cannot be in the future")
        return value

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            id=str(uuid4()),
            amount=self.amount,
            date=self.date,
            category_id=str(self.category_id),
            title=self.title,
            description=self.description,
        )


class ExpensePublic(BaseModel):
    expense_id: str
    title: str
    description: Optional[str] = None
    amount: float
    date: str
    category_id: str
    category: Optional[CategorySummary] = None

    @classmethod
    def from_record(cls, record: ExpenseRecord, category: Optional[Category] = None) -> "ExpensePublic":
        return cls(
            expense_id=record.id,
            title=record.title,
            description=record.description,
            amount=float(record.amount),
            date=record.date.isoformat(),
            category_id=record.category_id,
            category=CategorySummary.from_category(category) if category else None,
        )
