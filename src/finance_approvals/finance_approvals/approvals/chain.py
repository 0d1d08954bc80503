from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol, Sequence

from ..core.enums import RequestType, Role


@dataclass(frozen=True)
class ApproverDescriptor:
    """One approval level: who must decide (a role or a specific employee)."""

    level_name: str
    role: Optional[Role] = None
    employee_id: Optional[int] = None
    employee_name: Optional[str] = None

    def __post_init__(self):
        if self.role is None and self.employee_id is None:
            raise ValueError(f"Approval level {self.level_name!r} needs a role or an employee id")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApproverDescriptor":
        role = data.get("role")
        employee_id = data.get("employee_id")
        return cls(
            level_name=str(data["level_name"]),
            role=Role(role) if role else None,
            employee_id=int(employee_id) if employee_id is not None else None,
            employee_name=data.get("employee_name"),
        )


@dataclass(frozen=True)
class ApprovalLevelChain:
    request_type: RequestType
    levels: tuple[ApproverDescriptor, ...]
    department_id: Optional[int] = None
    project_id: Optional[int] = None

    def __len__(self) -> int:
        return len(self.levels)

    def level(self, number: int) -> ApproverDescriptor:
        """Return the descriptor for a 1-based level number."""
        if number < 1 or number > len(self.levels):
            raise IndexError(f"Level {number} is outside a chain of {len(self.levels)}")
        return self.levels[number - 1]

    @property
    def specificity(self) -> int:
        return (2 if self.project_id is not None else 0) + (1 if self.department_id is not None else 0)

    def applies_to(self, *, department_id: Optional[int], project_id: Optional[int]) -> bool:
        if self.department_id is not None and self.department_id != department_id:
            return False
        if self.project_id is not None and self.project_id != project_id:
            return False
        return True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ApprovalLevelChain":
        department_id = data.get("department_id")
        project_id = data.get("project_id")
        return cls(
            request_type=RequestType(data["request_type"]),
            levels=tuple(ApproverDescriptor.from_dict(level) for level in data.get("levels", [])),
            department_id=int(department_id) if department_id is not None else None,
            project_id=int(project_id) if project_id is not None else None,
        )


class ApprovalChainProvider(Protocol):
    def chain_for(
        self,
        request_type: RequestType,
        *,
        department_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> Optional[ApprovalLevelChain]:
        raise NotImplementedError


class StaticChainProvider:
    """Chains loaded once from configuration.

    The most specific applicable chain wins: project scope beats department
    scope, which beats the unscoped default for the request type.
    """

    def __init__(self, chains: Iterable[ApprovalLevelChain]):
        self._chains = list(chains)

    @classmethod
    def from_settings(cls, config: Sequence[Mapping[str, Any]]) -> "StaticChainProvider":
        return cls(ApprovalLevelChain.from_dict(item) for item in config)

    def chain_for(
        self,
        request_type: RequestType,
        *,
        department_id: Optional[int] = None,
        project_id: Optional[int] = None,
    ) -> Optional[ApprovalLevelChain]:
        candidates = [
            c
            for c in self._chains
            if c.request_type == request_type and c.applies_to(department_id=department_id, project_id=project_id)
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda c: c.specificity)
