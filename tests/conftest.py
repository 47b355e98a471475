from __future__ import annotations

from types import SimpleNamespace

import pytest

from fakes import actor_for, build_world


@pytest.fixture(autouse=True)
def _testing_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")


@pytest.fixture
def world():
    container, employees, leaves, salaries, sink = build_world()
    return SimpleNamespace(
        container=container,
        employees=employees,
        leaves=leaves,
        salaries=salaries,
        sink=sink,
        admin=actor_for(employees.get_by_id(1)),
        hr=actor_for(employees.get_by_id(2)),
        manager=actor_for(employees.get_by_id(3)),
        alice=actor_for(employees.get_by_id(4)),
        bob=actor_for(employees.get_by_id(5)),
        outsider=actor_for(employees.get_by_id(6)),
        other_manager=actor_for(employees.get_by_id(7)),
    )
