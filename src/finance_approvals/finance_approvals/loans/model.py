from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.money import to_decimal
from ..core import constants
from ..core.enums import EmploymentStatus, InstallmentStatus, RequestStatus


@dataclass(frozen=True)
class Installment:
    loan_id: int
    installment_no: int
    due_date: date
    amount: Decimal
    status: InstallmentStatus = InstallmentStatus.PENDING
    paid_date: Optional[date] = None
    postponed_to: Optional[date] = None

    @property
    def is_open(self) -> bool:
        return self.status in (InstallmentStatus.PENDING, InstallmentStatus.OVERDUE)

    @property
    def effective_due_date(self) -> date:
        return self.postponed_to or self.due_date


@dataclass(frozen=True)
class ActiveLoan:
    """An existing loan as seen by the employee directory."""

    loan_id: int
    monthly_installment: Decimal
    remaining_balance: Decimal
    status: RequestStatus = RequestStatus.APPROVED

    @property
    def is_outstanding(self) -> bool:
        return self.status == RequestStatus.APPROVED and self.remaining_balance > 0


@dataclass(frozen=True)
class EmployeeSnapshot:
    """Point-in-time view of an employee used for eligibility checks."""

    employee_id: int
    monthly_salary: Decimal
    hire_date: date
    employment_status: EmploymentStatus
    termination_date: Optional[date] = None
    active_loans: tuple[ActiveLoan, ...] = ()
    leave_balance_days: Optional[int] = None


@dataclass(frozen=True)
class LoanPolicy:
    max_principal_salary_multiple: int = constants.DEFAULT_MAX_PRINCIPAL_SALARY_MULTIPLE
    min_installments: int = constants.DEFAULT_MIN_INSTALLMENTS
    max_installments: int = constants.DEFAULT_MAX_INSTALLMENTS
    default_contract_months: int = constants.DEFAULT_CONTRACT_MONTHS
    min_service_months: int = constants.DEFAULT_MIN_SERVICE_MONTHS
    first_installment_lead_months: int = constants.DEFAULT_FIRST_INSTALLMENT_LEAD_MONTHS
    max_deduction_ratio: Decimal = constants.DEFAULT_MAX_DEDUCTION_RATIO

    @classmethod
    def from_settings(cls, values: Optional[Mapping[str, Any]]) -> "LoanPolicy":
        values = values or {}
        defaults = cls()
        return cls(
            max_principal_salary_multiple=int(
                values.get("max_principal_salary_multiple", defaults.max_principal_salary_multiple)
            ),
            min_installments=int(values.get("min_installments", defaults.min_installments)),
            max_installments=int(values.get("max_installments", defaults.max_installments)),
            default_contract_months=int(values.get("default_contract_months", defaults.default_contract_months)),
            min_service_months=int(values.get("min_service_months", defaults.min_service_months)),
            first_installment_lead_months=int(
                values.get("first_installment_lead_months", defaults.first_installment_lead_months)
            ),
            max_deduction_ratio=to_decimal(values.get("max_deduction_ratio", defaults.max_deduction_ratio)),
        )
