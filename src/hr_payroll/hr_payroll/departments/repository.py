from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Department


class DepartmentRepository(Protocol):
    def get_by_id(self, dept_id: int) -> Optional[Department]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Department]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def create(self, *, name: str, description: str) -> int:
        raise NotImplementedError

    def delete_by_id(self, dept_id: int) -> bool:
        """Delete the department; its employees are left without one."""
        raise NotImplementedError

    def count_all(self) -> int:
        raise NotImplementedError
