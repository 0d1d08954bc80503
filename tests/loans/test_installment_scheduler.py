from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from finance_approvals.core.enums import InstallmentStatus, ViolationCode
from finance_approvals.core.exceptions import InvalidInstallmentState, ValidationFailed
from finance_approvals.loans.scheduler import InstallmentScheduler


def test_last_installment_absorbs_rounding_residue():
    schedule = InstallmentScheduler().generate_schedule(Decimal("1000"), 3, date(2025, 3, 1), loan_id=5)

    assert [i.amount for i in schedule] == [Decimal("333.33"), Decimal("333.33"), Decimal("333.34")]
    assert sum(i.amount for i in schedule) == Decimal("1000")
    assert all(i.loan_id == 5 and i.status == InstallmentStatus.PENDING for i in schedule)


@pytest.mark.parametrize(
    "principal,count",
    [("100", 7), ("10.01", 2), ("99999.99", 60), ("1234.56", 11)],
)
def test_schedule_sums_exactly_to_principal(principal, count):
    schedule = InstallmentScheduler().generate_schedule(principal, count, date(2025, 1, 31))

    assert len(schedule) == count
    assert sum(i.amount for i in schedule) == Decimal(principal)
    assert all(i.amount > 0 for i in schedule)
    assert [i.installment_no for i in schedule] == list(range(1, count + 1))


def test_base_amount_rounds_half_up():
    assert InstallmentScheduler().base_amount(Decimal("10.01"), 2) == Decimal("5.01")


def test_due_dates_clamp_to_month_end_and_stay_anchored():
    schedule = InstallmentScheduler().generate_schedule(Decimal("400"), 4, date(2025, 1, 31))

    assert [i.due_date for i in schedule] == [
        date(2025, 1, 31),
        date(2025, 2, 28),
        date(2025, 3, 31),
        date(2025, 4, 30),
    ]


def test_leap_year_february():
    schedule = InstallmentScheduler().generate_schedule(Decimal("200"), 2, date(2024, 1, 31))
    assert schedule[1].due_date == date(2024, 2, 29)


def test_invalid_inputs_raise_validation_failed():
    scheduler = InstallmentScheduler()

    with pytest.raises(ValidationFailed) as exc:
        scheduler.generate_schedule(Decimal("100.005"), 3, date(2025, 1, 1))
    assert exc.value.violations == [ViolationCode.PRINCIPAL_NOT_IN_CENTS]

    with pytest.raises(ValidationFailed) as exc:
        scheduler.generate_schedule(Decimal("-5"), 0, date(2025, 1, 1))
    assert exc.value.violations == [ViolationCode.PRINCIPAL_NOT_POSITIVE, ViolationCode.INSTALLMENT_COUNT_TOO_LOW]


def test_principal_too_small_for_count():
    with pytest.raises(ValidationFailed) as exc:
        InstallmentScheduler().generate_schedule(Decimal("0.05"), 6, date(2025, 1, 1))
    assert exc.value.violations == [ViolationCode.PRINCIPAL_TOO_SMALL]


def test_remaining_balance_and_overdue():
    scheduler = InstallmentScheduler()
    schedule = scheduler.generate_schedule(Decimal("300"), 3, date(2025, 1, 10))
    schedule[0] = replace(schedule[0], status=InstallmentStatus.PAID, paid_date=date(2025, 1, 9))

    assert scheduler.remaining_balance(schedule) == Decimal("200")

    marked = scheduler.mark_overdue(schedule, today=date(2025, 2, 20))
    assert [i.status for i in marked] == [
        InstallmentStatus.PAID,
        InstallmentStatus.OVERDUE,
        InstallmentStatus.PENDING,
    ]


def test_postpone_single_installment():
    scheduler = InstallmentScheduler()
    schedule = scheduler.generate_schedule(Decimal("300"), 3, date(2025, 1, 10))

    updated = scheduler.postpone(schedule, installment_no=2, new_due_date=date(2025, 5, 10))

    assert updated[1].status == InstallmentStatus.POSTPONED
    assert updated[1].postponed_to == date(2025, 5, 10)
    assert updated[0] == schedule[0]
    assert schedule[1].status == InstallmentStatus.PENDING


def test_postpone_rejects_bad_targets():
    scheduler = InstallmentScheduler()
    schedule = scheduler.generate_schedule(Decimal("300"), 3, date(2025, 1, 10))
    schedule[0] = replace(schedule[0], status=InstallmentStatus.PAID)

    with pytest.raises(InvalidInstallmentState):
        scheduler.postpone(schedule, installment_no=9, new_due_date=date(2025, 6, 1))
    with pytest.raises(InvalidInstallmentState):
        scheduler.postpone(schedule, installment_no=1, new_due_date=date(2025, 6, 1))
    with pytest.raises(InvalidInstallmentState):
        scheduler.postpone(schedule, installment_no=2, new_due_date=date(2025, 2, 1))


def test_postpone_month_moves_open_installments_only():
    scheduler = InstallmentScheduler()
    schedule = scheduler.generate_schedule(Decimal("300"), 3, date(2025, 1, 28))

    updated = scheduler.postpone_month(schedule, from_month="2025-02", to_month="2025-04")

    assert updated[1].status == InstallmentStatus.POSTPONED
    assert updated[1].postponed_to == date(2025, 4, 28)
    assert updated[0] is schedule[0]
    assert updated[2] is schedule[2]

    with pytest.raises(InvalidInstallmentState):
        scheduler.postpone_month(schedule, from_month="2025-03", to_month="2025-03")


def test_postponed_installment_becomes_overdue_after_new_date():
    scheduler = InstallmentScheduler()
    schedule = scheduler.generate_schedule(Decimal("300"), 3, date(2025, 1, 10))
    schedule = scheduler.postpone(schedule, installment_no=1, new_due_date=date(2025, 3, 5))

    assert scheduler.mark_overdue(schedule, today=date(2025, 3, 5))[0].status == InstallmentStatus.POSTPONED

    marked = scheduler.mark_overdue(schedule, today=date(2025, 3, 6))
    assert marked[0].status == InstallmentStatus.OVERDUE
    assert marked[0].postponed_to == date(2025, 3, 5)


def test_postponing_again_compares_against_postponed_date():
    scheduler = InstallmentScheduler()
    schedule = scheduler.generate_schedule(Decimal("300"), 3, date(2025, 1, 10))
    schedule = scheduler.mark_overdue(
        scheduler.postpone(schedule, installment_no=1, new_due_date=date(2025, 3, 5)), today=date(2025, 3, 6)
    )

    with pytest.raises(InvalidInstallmentState):
        scheduler.postpone(schedule, installment_no=1, new_due_date=date(2025, 3, 1))

    moved = scheduler.postpone(schedule, installment_no=1, new_due_date=date(2025, 4, 5))
    assert moved[0].postponed_to == date(2025, 4, 5)


def test_input_violations_match_generate_schedule():
    scheduler = InstallmentScheduler()

    assert scheduler.input_violations(Decimal("1000"), 3) == []
    assert scheduler.input_violations(Decimal("100.005"), 12) == [ViolationCode.PRINCIPAL_NOT_IN_CENTS]
    assert scheduler.input_violations(Decimal("0.10"), 12) == [ViolationCode.PRINCIPAL_TOO_SMALL]
