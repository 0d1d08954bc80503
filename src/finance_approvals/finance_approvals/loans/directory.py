from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol

from .model import EmployeeSnapshot


class EmployeeDirectory(Protocol):
    def get_snapshot(self, employee_id: int, *, today: date) -> Optional[EmployeeSnapshot]:
        """Return the employee's current salary/service/loan data, or None if unknown."""

        raise NotImplementedError


class InMemoryEmployeeDirectory:
    def __init__(self, snapshots: Iterable[EmployeeSnapshot] = ()):
        self._snapshots: dict[int, EmployeeSnapshot] = {s.employee_id: s for s in snapshots}

    def put(self, snapshot: EmployeeSnapshot) -> None:
        self._snapshots[snapshot.employee_id] = snapshot

    def get_snapshot(self, employee_id: int, *, today: date) -> Optional[EmployeeSnapshot]:
        return self._snapshots.get(int(employee_id))
