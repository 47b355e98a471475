from datetime import date

from hr_system.core.enums import NotificationType


def test_every_notification_type_is_emitted_and_cancel_stays_silent(world):
    leave = world.container.leave_service
    payroll = world.container.payroll_service

    def file(day):
        return leave.submit(actor=world.alice, leave_type="sick", start_date=day, end_date=day, reason="Doctor")

    first = file(date(2024, 5, 6))
    leave.approve(actor=world.manager, request_id=first.request_id)
    second = file(date(2024, 5, 7))
    leave.reject(actor=world.hr, request_id=second.request_id, reason="Audit week")
    record = payroll.create_salary_record(
        actor=world.hr, emp_code="EMP004", month="May", year=2024, amounts={"basic": 1000}
    )
    payroll.generate_payslip(actor=world.hr, salary_id=record.salary_id)

    assert {n["type"] for n in world.sink.sent} == set(NotificationType)

    third = file(date(2024, 5, 8))
    before = len(world.sink.sent)
    leave.cancel(actor=world.alice, request_id=third.request_id)
    assert len(world.sink.sent) == before
