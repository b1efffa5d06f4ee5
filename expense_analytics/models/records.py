from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    color: str
    icon: Optional[str] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "icon": self.icon,
            "description": self.description,
        }


@dataclass(frozen=True)
class ExpenseRecord:
    """A single recorded expense, as supplied by the record source."""

    id: str
    amount: Decimal
    date: date
    category_id: str
    title: str = ""
    description: Optional[str] = None
