from __future__ import annotations

import pytest

from fakes import actor_for, build_world
from hr_system.main import create_app
from hr_system.payroll.payslip import HtmlPayslipGenerator


@pytest.fixture
def app(world):
    return create_app(world.container)


def login(client, actor):
    with client.session_transaction() as sess:
        sess["user_id"] = actor.employee_id
        sess["role"] = actor.role.value
        sess["emp_code"] = actor.emp_code


def file_leave(client, **overrides):
    payload = {
        "leave_type": "casual",
        "start_date": "2024-03-04",
        "end_date": "2024-03-08",
        "reason": "Family",
    }
    payload.update(overrides)
    return client.post("/api/leave", json=payload)


def test_requires_login(app):
    res = app.test_client().get("/api/leave")

    assert res.status_code == 401
    assert res.get_json()["success"] is False


def test_submit_and_two_stage_approval(app, world):
    employee = app.test_client()
    login(employee, world.alice)
    res = file_leave(employee)
    assert res.status_code == 201
    leave = res.get_json()["leave"]
    assert leave["total_days"] == 5
    assert leave["status"] == "pending"

    manager = app.test_client()
    login(manager, world.manager)
    res = manager.post(f"/api/leave/{leave['request_id']}/approve")
    assert res.status_code == 200
    assert res.get_json()["leave"]["stage"] == "AWAITING_HR"

    hr = app.test_client()
    login(hr, world.hr)
    res = hr.post(f"/api/leave/{leave['request_id']}/approve")
    assert res.get_json()["leave"]["status"] == "approved"

    assert employee.get("/api/leave/balance").get_json()["casual"] == 7


def test_submit_validation_errors(app, world):
    client = app.test_client()
    login(client, world.alice)

    res = file_leave(client, reason="")
    assert res.status_code == 400
    assert res.get_json()["error"] == "ValidationError"

    res = file_leave(client, start_date="04/03/2024")
    assert res.status_code == 400


def test_insufficient_balance_response(app, world):
    client = app.test_client()
    login(client, world.alice)

    res = file_leave(client, start_date="2024-03-01", end_date="2024-03-20")

    assert res.status_code == 400
    body = res.get_json()
    assert body["error"] == "InsufficientBalanceError"
    assert "12" in body["message"]


def test_state_conflict_maps_to_409(app, world):
    client = app.test_client()
    login(client, world.alice)
    request_id = file_leave(client).get_json()["leave"]["request_id"]

    assert client.delete(f"/api/leave/{request_id}").status_code == 200
    res = client.delete(f"/api/leave/{request_id}")
    assert res.status_code == 409
    assert res.get_json()["error"] == "InvalidStateError"


def test_forbidden_and_not_found(app, world):
    client = app.test_client()
    login(client, world.alice)
    assert client.get("/api/leave/pending").status_code == 403

    login(client, world.hr)
    assert client.get("/api/leave/999").status_code == 404


def test_reject_and_list_filters(app, world):
    employee = app.test_client()
    login(employee, world.alice)
    request_id = file_leave(employee).get_json()["leave"]["request_id"]

    hr = app.test_client()
    login(hr, world.hr)
    res = hr.post(f"/api/leave/{request_id}/reject", json={"rejection_reason": "Busy"})
    assert res.get_json()["leave"]["rejection_reason"] == "Busy"

    rejected = employee.get("/api/leave?status=rejected").get_json()
    assert [r["request_id"] for r in rejected] == [request_id]
    assert employee.get("/api/leave?status=pending").get_json() == []


def test_dashboard(app, world):
    client = app.test_client()
    login(client, world.manager)

    body = client.get("/api/leave/dashboard").get_json()

    assert set(body) == {"balance", "recent_requests", "pending_count"}


def test_salary_endpoints(app, world):
    hr = app.test_client()
    login(hr, world.hr)
    payload = {"emp_code": "EMP004", "month": "January", "year": 2024, "basic": 30000, "hra": 5000}

    res = hr.post("/api/salary", json=payload)
    assert res.status_code == 201
    salary = res.get_json()
    assert salary["net_salary"] == "35000.00"

    assert hr.post("/api/salary", json=payload).status_code == 409

    res = hr.put(f"/api/salary/{salary['salary_id']}", json={"tax": 1000})
    assert res.get_json()["net_salary"] == "34000.00"

    res = hr.post(f"/api/payslip/generate/{salary['salary_id']}")
    assert res.get_json()["salary"]["status"] == "approved"

    employee = app.test_client()
    login(employee, world.bob)
    assert employee.get(f"/api/salary/{salary['salary_id']}").status_code == 403
    assert employee.get("/api/salary").get_json() == []

    assert hr.delete(f"/api/salary/{salary['salary_id']}").status_code == 200
    assert hr.get(f"/api/salary/{salary['salary_id']}").status_code == 404


@pytest.mark.parametrize("overrides", [{"reason": 42}, {"start_date": 20240304}, {"end_date": ["2024-03-08"]}])
def test_non_string_leave_fields_are_rejected(app, world, overrides):
    client = app.test_client()
    login(client, world.alice)

    res = file_leave(client, **overrides)

    assert res.status_code == 400
    assert res.get_json()["error"] == "ValidationError"


def test_non_string_salary_fields_are_rejected(app, world):
    client = app.test_client()
    login(client, world.hr)

    res = client.post("/api/salary", json={"emp_code": 42, "month": "January", "year": 2024, "basic": 1000})
    assert res.status_code == 400

    res = client.post("/api/salary", json={"emp_code": "EMP004", "month": 1, "year": 2024, "basic": 1000})
    assert res.status_code == 400


def test_salary_list_scoped_without_emp_code_in_session(app, world):
    hr = app.test_client()
    login(hr, world.hr)
    for code in ("EMP004", "EMP005"):
        hr.post("/api/salary", json={"emp_code": code, "month": "January", "year": 2024, "basic": 1000})

    employee = app.test_client()
    with employee.session_transaction() as sess:
        sess["user_id"] = world.alice.employee_id
        sess["role"] = world.alice.role.value

    records = employee.get("/api/salary").get_json()
    assert [r["emp_code"] for r in records] == ["EMP004"]


def test_payslip_info_and_download(tmp_path):
    container, employees, *_ = build_world(documents=HtmlPayslipGenerator(tmp_path))
    app = create_app(container)
    hr = app.test_client()
    login(hr, actor_for(employees.get_by_id(2)))
    salary_id = hr.post(
        "/api/salary", json={"emp_code": "EMP004", "month": "April", "year": 2024, "basic": 30000}
    ).get_json()["salary_id"]

    employee = app.test_client()
    login(employee, actor_for(employees.get_by_id(4)))
    assert employee.get(f"/api/payslip/download/{salary_id}").status_code == 404

    assert hr.post(f"/api/payslip/generate/{salary_id}").status_code == 200

    info = employee.get(f"/api/payslip/{salary_id}").get_json()
    assert info["employee"]["full_name"] == "Employee 4"
    assert info["status"] == "approved"

    res = employee.get(f"/api/payslip/download/{salary_id}")
    assert res.status_code == 200
    assert "attachment" in res.headers["Content-Disposition"]
    assert "Payslip - April 2024" in res.get_data(as_text=True)
    res.close()

    other = app.test_client()
    login(other, actor_for(employees.get_by_id(5)))
    assert other.get(f"/api/payslip/download/{salary_id}").status_code == 403
