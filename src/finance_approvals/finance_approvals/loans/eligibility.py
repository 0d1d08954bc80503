from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import add_months, months_between
from ..common.money import sum_amounts, to_decimal
from ..core.enums import EmploymentStatus, ViolationCode
from ..requests.model import (
    FinancialRequest,
    LeaveDetails,
    LoanDetails,
    ManualAttendanceDetails,
    PayrollRunDetails,
    PurchaseOrderDetails,
)
from .model import EmployeeSnapshot, LoanPolicy
from .scheduler import InstallmentScheduler


class EligibilityValidator:
    """Checks a proposed request against a point-in-time employee snapshot.

    ``validate`` never stops at the first failure: it returns every violated
    rule so the caller can show all problems at once. An empty list means
    the request is eligible. The function has no side effects and reads the
    date only from its ``today`` argument.
    """

    def __init__(self, policy: Optional[LoanPolicy] = None, *, scheduler: Optional[InstallmentScheduler] = None):
        self._policy = policy or LoanPolicy()
        self._scheduler = scheduler or InstallmentScheduler()

    @property
    def policy(self) -> LoanPolicy:
        return self._policy

    def validate(
        self,
        request: FinancialRequest,
        snapshot: Optional[EmployeeSnapshot],
        *,
        today: date,
    ) -> list[ViolationCode]:
        violations: list[ViolationCode] = []
        if snapshot is not None and snapshot.employee_id != request.subject_employee_id:
            violations.append(ViolationCode.SNAPSHOT_MISMATCH)

        d = request.details
        if isinstance(d, LoanDetails):
            violations.extend(self._loan_rules(d, snapshot, today=today))
        elif isinstance(d, LeaveDetails):
            violations.extend(self._leave_rules(d, snapshot))
        elif isinstance(d, ManualAttendanceDetails):
            violations.extend(self._manual_attendance_rules(d, today=today))
        elif isinstance(d, PayrollRunDetails):
            if to_decimal(d.net_amount) <= 0 or to_decimal(d.gross_amount) <= 0:
                violations.append(ViolationCode.AMOUNT_NOT_POSITIVE)
        elif isinstance(d, PurchaseOrderDetails):
            if to_decimal(d.amount) <= 0:
                violations.append(ViolationCode.AMOUNT_NOT_POSITIVE)
        return violations

    def contract_months(self, snapshot: EmployeeSnapshot) -> int:
        if snapshot.termination_date is not None:
            return months_between(snapshot.hire_date, snapshot.termination_date)
        return self._policy.default_contract_months

    def _loan_rules(
        self,
        loan: LoanDetails,
        snapshot: Optional[EmployeeSnapshot],
        *,
        today: date,
    ) -> list[ViolationCode]:
        p = self._policy
        out: list[ViolationCode] = []
        principal = to_decimal(loan.principal)
        count = int(loan.installment_count)

        if principal <= 0:
            out.append(ViolationCode.PRINCIPAL_NOT_POSITIVE)
        if count < p.min_installments:
            out.append(ViolationCode.INSTALLMENT_COUNT_TOO_LOW)
        if loan.first_installment_date < add_months(today, p.first_installment_lead_months):
            out.append(ViolationCode.FIRST_INSTALLMENT_TOO_SOON)
        # Accepted loans must stay schedulable at final approval.
        out.extend(v for v in self._scheduler.input_violations(principal, count) if v not in out)

        if snapshot is None:
            out.append(ViolationCode.SNAPSHOT_MISSING)
            return out

        salary = to_decimal(snapshot.monthly_salary)
        if principal > salary * p.max_principal_salary_multiple:
            out.append(ViolationCode.PRINCIPAL_EXCEEDS_CAP)
        if count > min(p.max_installments, self.contract_months(snapshot)):
            out.append(ViolationCode.INSTALLMENT_COUNT_TOO_HIGH)
        if snapshot.employment_status != EmploymentStatus.ACTIVE:
            out.append(ViolationCode.EMPLOYEE_NOT_ACTIVE)

        if any(existing.is_outstanding for existing in snapshot.active_loans):
            out.append(ViolationCode.ACTIVE_LOAN_EXISTS)
        if months_between(snapshot.hire_date, today) < p.min_service_months:
            out.append(ViolationCode.INSUFFICIENT_SERVICE)

        if principal > 0 and count > 0:
            new_monthly = self._scheduler.base_amount(principal, count)
            if monthly_deduction(snapshot) + new_monthly > salary * p.max_deduction_ratio:
                out.append(ViolationCode.MONTHLY_DEDUCTION_EXCEEDS_CAP)
        return out

    @staticmethod
    def _leave_rules(leave: LeaveDetails, snapshot: Optional[EmployeeSnapshot]) -> list[ViolationCode]:
        out: list[ViolationCode] = []
        if leave.end_date < leave.start_date:
            out.append(ViolationCode.LEAVE_END_BEFORE_START)
        elif snapshot is not None and snapshot.leave_balance_days is not None:
            if leave.days > snapshot.leave_balance_days:
                out.append(ViolationCode.LEAVE_EXCEEDS_BALANCE)
        if snapshot is not None and snapshot.employment_status != EmploymentStatus.ACTIVE:
            out.append(ViolationCode.EMPLOYEE_NOT_ACTIVE)
        return out

    @staticmethod
    def _manual_attendance_rules(entry: ManualAttendanceDetails, *, today: date) -> list[ViolationCode]:
        out: list[ViolationCode] = []
        if entry.exit_time <= entry.entry_time:
            out.append(ViolationCode.EXIT_BEFORE_ENTRY)
        if entry.attendance_date > today:
            out.append(ViolationCode.ATTENDANCE_DATE_IN_FUTURE)
        return out


def monthly_deduction(snapshot: EmployeeSnapshot) -> Decimal:
    """Sum of monthly installments for the employee's outstanding loans."""
    return sum_amounts(loan.monthly_installment for loan in snapshot.active_loans if loan.is_outstanding)
