from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Sequence

from ..common.datetime_utils import add_months, months_between, parse_month, same_month
from ..common.money import Number, is_whole_cents, round_money, sum_amounts, to_decimal
from ..core.enums import InstallmentStatus, ViolationCode
from ..core.exceptions import InvalidInstallmentState, RoundingInvariantViolation, ValidationFailed
from .model import Installment


class InstallmentScheduler:
    """Equal-installment amortization for interest-free employee loans.

    Every installment except the last is ``round(principal / n, 2, HALF_UP)``;
    the last one absorbs the rounding residue so the schedule sums to the
    principal exactly. Due dates are anchored on the first due date and
    advance one calendar month at a time (day 31 becomes 30, 29 or 28 in
    shorter months).
    """

    def base_amount(self, principal: Number, installment_count: int) -> Decimal:
        return round_money(to_decimal(principal) / int(installment_count))

    def input_violations(self, principal: Number, installment_count: int) -> list[ViolationCode]:
        """Reasons no exact schedule exists for these inputs (empty when one does)."""
        principal = to_decimal(principal)
        n = int(installment_count)

        violations: list[ViolationCode] = []
        if principal <= 0:
            violations.append(ViolationCode.PRINCIPAL_NOT_POSITIVE)
        elif not is_whole_cents(principal):
            violations.append(ViolationCode.PRINCIPAL_NOT_IN_CENTS)
        if n < 1:
            violations.append(ViolationCode.INSTALLMENT_COUNT_TOO_LOW)
        if violations:
            return violations

        base = self.base_amount(principal, n)
        if base <= 0 or principal - base * (n - 1) <= 0:
            violations.append(ViolationCode.PRINCIPAL_TOO_SMALL)
        return violations

    def generate_schedule(
        self,
        principal: Number,
        installment_count: int,
        first_due_date: date,
        *,
        loan_id: int = 0,
    ) -> list[Installment]:
        principal = to_decimal(principal)
        n = int(installment_count)

        violations = self.input_violations(principal, n)
        if violations:
            raise ValidationFailed(violations)

        base = self.base_amount(principal, n)
        last = principal - base * (n - 1)

        installments = [
            Installment(
                loan_id=int(loan_id),
                installment_no=no,
                due_date=add_months(first_due_date, no - 1),
                amount=base if no < n else last,
            )
            for no in range(1, n + 1)
        ]

        total = sum_amounts(i.amount for i in installments)
        if total != principal:
            raise RoundingInvariantViolation(f"Schedule sums to {total}, expected {principal}")
        return installments

    @staticmethod
    def remaining_balance(installments: Sequence[Installment]) -> Decimal:
        return sum_amounts(i.amount for i in installments if i.status != InstallmentStatus.PAID)

    @staticmethod
    def mark_overdue(installments: Sequence[Installment], *, today: date) -> list[Installment]:
        # A postponed installment falls due on its postponed_to date.
        unpaid = (InstallmentStatus.PENDING, InstallmentStatus.POSTPONED)
        return [
            replace(i, status=InstallmentStatus.OVERDUE) if i.status in unpaid and i.effective_due_date < today else i
            for i in installments
        ]

    @staticmethod
    def postpone(
        installments: Sequence[Installment],
        *,
        installment_no: int,
        new_due_date: date,
    ) -> list[Installment]:
        target = next((i for i in installments if i.installment_no == int(installment_no)), None)
        if target is None:
            raise InvalidInstallmentState(f"Installment {installment_no} does not exist")
        if not target.is_open:
            raise InvalidInstallmentState(
                f"Installment {installment_no} is {target.status.value} and cannot be postponed"
            )
        if new_due_date <= target.effective_due_date:
            raise InvalidInstallmentState("The new due date must be after the current due date")

        postponed = replace(target, status=InstallmentStatus.POSTPONED, postponed_to=new_due_date)
        return [postponed if i is target else i for i in installments]

    @staticmethod
    def postpone_month(
        installments: Sequence[Installment],
        *,
        from_month: str,
        to_month: str,
    ) -> list[Installment]:
        """Postpone every open installment due in ``from_month`` (YYYY-MM) into ``to_month``."""
        source = parse_month(from_month)
        shift = months_between(source, parse_month(to_month))
        if shift <= 0:
            raise InvalidInstallmentState("The target month must be after the source month")

        out: list[Installment] = []
        for i in installments:
            if i.is_open and same_month(i.effective_due_date, source):
                i = replace(i, status=InstallmentStatus.POSTPONED, postponed_to=add_months(i.effective_due_date, shift))
            out.append(i)
        return out
