from pydantic import BaseModel, Field
from typing import Optional
from uuid import uuid4

from expense_analytics.models.records import Category


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=30)
    color: str = Field(pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: Optional[str] = None
    description: Optional[str] = Field(default=None, max_length=100)

    def to_category(self) -> Category:
        return Category(
            id=str(uuid4()),
            name=self.name,
            color=self.color,
            icon=self.icon,
            description=self.description,
        )


class CategorySummary(BaseModel):
    """Category fields embedded in expense listings."""

    id: str
    name: str
    color: str
    icon: Optional[str] = None

    @classmethod
    def from_category(cls, category: Category) -> "CategorySummary":
        return cls(id=category.id, name=category.name, color=category.color, icon=category.icon)


class CategoryPublic(CategorySummary):
    description: Optional[str] = None

    @classmethod
    def from_category(cls, category: Category) -> "CategoryPublic":
        return cls(**category.to_dict())


class CategoryWithStats(CategoryPublic):
    expense_count: int
    total_amount: float
