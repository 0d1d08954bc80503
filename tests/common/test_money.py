from decimal import Decimal

import pytest

from finance_approvals.common.money import is_whole_cents, round_money, sum_amounts, to_decimal
from finance_approvals.common.validators import require_rejection_reason
from finance_approvals.core.exceptions import InvalidRejectionReason


def test_round_money_is_half_up():
    assert round_money("2.345") == Decimal("2.35")
    assert round_money(Decimal("2.344")) == Decimal("2.34")


def test_floats_go_through_str():
    assert to_decimal(0.1) == Decimal("0.1")
    assert sum_amounts([0.1, 0.2]) == Decimal("0.3")


def test_whole_cents():
    assert is_whole_cents("10.50")
    assert not is_whole_cents("10.505")


def test_rejection_reason_is_kept_verbatim():
    assert require_rejection_reason(" Over budget ") == " Over budget "
    for blank in ("", "   ", None):
        with pytest.raises(InvalidRejectionReason):
            require_rejection_reason(blank)
