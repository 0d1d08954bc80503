from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import MissingApprover, NotAuthorized
from .chain import ApproverDescriptor

# Roles allowed to file requests for another employee.
SUBMIT_ON_BEHALF_ROLES = frozenset({Role.ADMIN, Role.HR_MANAGER})

# Roles allowed to reschedule loan installments.
INSTALLMENT_MANAGER_ROLES = frozenset({Role.ADMIN, Role.HR_MANAGER, Role.FINANCE_MANAGER})


@dataclass(frozen=True)
class Identity:
    """The acting user, passed explicitly into every operation."""

    user_id: int
    role: Role
    employee_id: Optional[int] = None
    display_name: Optional[str] = None

    @property
    def is_system_approver(self) -> bool:
        """An Admin account with no linked employee record decides as the system."""
        return self.employee_id is None and self.role == Role.ADMIN

    @property
    def audit_name(self) -> str:
        if self.is_system_approver:
            return f"SYSTEM(user={self.user_id})"
        return f"employee={self.employee_id}"


def can_act(identity: Identity, descriptor: ApproverDescriptor) -> bool:
    """Single authorization predicate for approval decisions."""
    if identity.role == Role.ADMIN:
        return True
    if descriptor.employee_id is not None:
        return identity.employee_id == descriptor.employee_id
    return descriptor.role == identity.role


def ensure_can_act(identity: Identity, descriptor: ApproverDescriptor) -> None:
    if identity.employee_id is None and not identity.is_system_approver:
        raise MissingApprover(f"User {identity.user_id} has no employee record to approve with")
    if not can_act(identity, descriptor):
        raise NotAuthorized(f"User {identity.user_id} cannot act on level {descriptor.level_name}")


def ensure_can_submit_for(identity: Identity, employee_id: int) -> None:
    if identity.employee_id is not None and identity.employee_id == int(employee_id):
        return
    if identity.role not in SUBMIT_ON_BEHALF_ROLES:
        raise NotAuthorized(f"User {identity.user_id} cannot submit requests for employee {employee_id}")


def ensure_can_manage_installments(identity: Identity) -> None:
    if identity.role not in INSTALLMENT_MANAGER_ROLES:
        raise NotAuthorized(f"User {identity.user_id} cannot reschedule installments")
