from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional, Union

from ..approvals.chain import ApproverDescriptor
from ..core.enums import ApprovalAction, RequestStatus, RequestType, Role, ViolationCode


@dataclass(frozen=True)
class LeaveDetails:
    leave_type: str
    start_date: date
    end_date: date
    reason: str

    @property
    def days(self) -> int:
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True)
class LoanDetails:
    principal: Decimal
    installment_count: int
    first_installment_date: date
    reason: Optional[str] = None


@dataclass(frozen=True)
class PayrollRunDetails:
    salary_month: str  # YYYY-MM
    gross_amount: Decimal
    net_amount: Decimal


@dataclass(frozen=True)
class ManualAttendanceDetails:
    attendance_date: date
    entry_time: time
    exit_time: time
    reason: str


@dataclass(frozen=True)
class PurchaseOrderDetails:
    supplier_id: int
    amount: Decimal
    description: str


RequestDetails = Union[LeaveDetails, LoanDetails, PayrollRunDetails, ManualAttendanceDetails, PurchaseOrderDetails]

DETAILS_BY_TYPE: dict[RequestType, type] = {
    RequestType.LEAVE: LeaveDetails,
    RequestType.LOAN: LoanDetails,
    RequestType.PAYROLL_RUN: PayrollRunDetails,
    RequestType.MANUAL_ATTENDANCE: ManualAttendanceDetails,
    RequestType.PURCHASE_ORDER: PurchaseOrderDetails,
}


@dataclass(frozen=True)
class ApprovalStep:
    """One entry of a request's decision timeline."""

    level: int
    level_name: Optional[str]
    action: ApprovalAction
    actor_id: Optional[int]
    actor_role: Role
    decided_on: date
    notes: Optional[str] = None
    system: bool = False


@dataclass(frozen=True)
class FinancialRequest:
    """Domain entity: a request moving through an approval chain.

    Records are immutable; the approval router returns a new instance for
    every transition.
    """

    request_id: int
    request_type: RequestType
    subject_employee_id: int
    details: RequestDetails
    status: RequestStatus = RequestStatus.NEW
    current_level: int = 0
    next_approver: Optional[ApproverDescriptor] = None
    blocking_reason: Optional[ViolationCode] = None
    rejection_reason: Optional[str] = None
    approved_date: Optional[date] = None
    approver_id: Optional[int] = None
    decided_by_system: bool = False
    department_id: Optional[int] = None
    project_id: Optional[int] = None
    request_date: Optional[date] = None
    history: tuple[ApprovalStep, ...] = ()

    def __post_init__(self):
        expected = DETAILS_BY_TYPE[self.request_type]
        if not isinstance(self.details, expected):
            raise TypeError(
                f"{self.request_type.value} requests need {expected.__name__}, got {type(self.details).__name__}"
            )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def next_approver_id(self) -> Optional[int]:
        return self.next_approver.employee_id if self.next_approver else None

    @property
    def next_approver_name(self) -> Optional[str]:
        return self.next_approver.employee_name if self.next_approver else None

    @property
    def next_level_name(self) -> Optional[str]:
        return self.next_approver.level_name if self.next_approver else None

    @property
    def amount(self) -> Optional[Decimal]:
        d = self.details
        if isinstance(d, LoanDetails):
            return d.principal
        if isinstance(d, PurchaseOrderDetails):
            return d.amount
        if isinstance(d, PayrollRunDetails):
            return d.net_amount
        return None
