from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Department:
    dept_id: int
    name: str
    description: str
    employee_count: int = 0
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "dept_id": self.dept_id,
            "name": self.name,
            "description": self.description,
            "employee_count": self.employee_count,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
