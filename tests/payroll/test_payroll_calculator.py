from datetime import date
from decimal import Decimal

import pytest

from hr_system.common.datetime_utils import month_bounds, overlap_days
from hr_system.core.enums import LeaveType
from hr_system.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hr_system.payroll.model import SalaryComponents


def test_overlap_splits_leave_across_months():
    jan = month_bounds("January", 2024)
    feb = month_bounds("February", 2024)

    assert overlap_days(date(2024, 1, 30), date(2024, 2, 2), *jan) == 2
    assert overlap_days(date(2024, 1, 30), date(2024, 2, 2), *feb) == 2
    assert overlap_days(date(2024, 3, 1), date(2024, 3, 5), *feb) == 0


def test_month_bounds_handles_leap_year():
    assert month_bounds("february", 2024) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds("February", 2023)[1] == date(2023, 2, 28)


def test_unpaid_leave_days_sums_each_overlap(world):
    world.leaves.add_approved(4, LeaveType.UNPAID, date(2024, 1, 30), date(2024, 2, 2))
    world.leaves.add_approved(4, LeaveType.UNPAID, date(2024, 1, 10), date(2024, 1, 10))
    calc = StandardPayrollCalculator()

    days = calc.unpaid_leave_days(world.leaves.items.values(), *month_bounds("January", 2024))

    assert days == 3


def test_leave_deduction_uses_thirty_day_month():
    calc = StandardPayrollCalculator()
    assert calc.leave_deduction(Decimal("30000"), 3) == Decimal("3000.00")
    assert calc.leave_deduction(Decimal("30000"), 0) == Decimal("0.00")


def test_leave_deduction_rounds_to_cents():
    calc = StandardPayrollCalculator()
    assert calc.leave_deduction(Decimal("10000"), 1) == Decimal("333.33")
    assert calc.leave_deduction(Decimal("10000"), 2) == Decimal("666.67")


def test_custom_daily_divisor():
    calc = StandardPayrollCalculator(daily_divisor=26)
    assert calc.leave_deduction(Decimal("26000"), 2) == Decimal("2000.00")


def test_daily_divisor_must_be_positive():
    with pytest.raises(ValueError):
        StandardPayrollCalculator(daily_divisor=0)


def test_gross_and_net():
    calc = StandardPayrollCalculator()
    c = SalaryComponents(
        basic=Decimal("30000"),
        hra=Decimal("5000"),
        da=Decimal("2000"),
        allowances=Decimal("1000"),
        pf=Decimal("1800"),
        tax=Decimal("2500"),
        other_deductions=Decimal("200"),
    )

    assert calc.gross(c) == Decimal("38000")
    assert calc.net(c, Decimal("3000.00")) == Decimal("30500.00")


def test_net_may_go_negative():
    calc = StandardPayrollCalculator()
    c = SalaryComponents(basic=Decimal("1000"), tax=Decimal("900"))

    assert calc.net(c, Decimal("500")) == Decimal("-400")
