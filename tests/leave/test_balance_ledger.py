from dataclasses import replace
from datetime import date

import pytest

from fakes import actor_for, build_world
from hr_system.core.enums import LeaveType
from hr_system.core.exceptions import InsufficientBalanceError, NotFoundError, ValidationError
from hr_system.employees.model import LeaveBalance
from hr_system.leave.ledger import LeavePolicy, deduct


def test_deduct_clamps_at_zero():
    balance = LeaveBalance(casual=7, sick=10, paid=15)

    after = deduct(balance, LeaveType.CASUAL, 10)

    assert after.casual == 0
    assert after.sick == 10
    assert after.paid == 15


def test_deduct_ignores_unpaid_leave():
    balance = LeaveBalance(casual=12, sick=10, paid=15)
    assert deduct(balance, LeaveType.UNPAID, 5) == balance


def test_policy_from_config_overrides_only_given_types():
    policy = LeavePolicy.from_config({"casual": 20})

    assert policy.grant_for(LeaveType.CASUAL) == 20
    assert policy.grant_for(LeaveType.SICK) == 10
    assert policy.default_balance() == LeaveBalance(casual=20, sick=10, paid=15)


def test_available_is_grant_minus_approved_days(world):
    world.leaves.add_approved(4, LeaveType.SICK, date(2024, 2, 5), date(2024, 2, 7))
    world.leaves.add_approved(4, LeaveType.SICK, date(2024, 3, 1), date(2024, 3, 1))
    world.leaves.add_approved(5, LeaveType.SICK, date(2024, 3, 1), date(2024, 3, 4))

    assert world.container.ledger.compute_available(4, LeaveType.SICK) == 6
    assert world.container.ledger.compute_available(4, LeaveType.CASUAL) == 12


def test_available_has_no_meaning_for_unpaid(world):
    with pytest.raises(ValidationError):
        world.container.ledger.compute_available(4, LeaveType.UNPAID)


def test_get_balance_falls_back_to_policy_default(world):
    emp = world.employees.get_by_id(4)
    world.employees.add(replace(emp, leave_balance=None))

    assert world.container.ledger.get_balance(4) == LeaveBalance(casual=12, sick=10, paid=15)


def test_get_balance_unknown_employee(world):
    with pytest.raises(NotFoundError):
        world.container.ledger.get_balance(999)


def test_summary_lists_every_ledger_type(world):
    world.leaves.add_approved(4, LeaveType.PAID, date(2024, 4, 1), date(2024, 4, 2))
    world.leaves.add_approved(4, LeaveType.UNPAID, date(2024, 4, 8), date(2024, 4, 9))

    assert world.container.ledger.summary(4) == {"casual": 12.0, "sick": 10.0, "paid": 13.0}


def test_configured_grant_drives_filing_check():
    container, employees, *_ = build_world(policy=LeavePolicy.from_config({"casual": 3}))
    alice = actor_for(employees.get_by_id(4))

    with pytest.raises(InsufficientBalanceError) as exc:
        container.leave_service.submit(
            actor=alice,
            leave_type="casual",
            start_date=date(2024, 5, 6),
            end_date=date(2024, 5, 9),
            reason="Trip",
        )

    assert exc.value.available == 3
    assert exc.value.requested == 4
