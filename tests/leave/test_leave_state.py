import pytest

from hr_system.core.enums import LeaveStatus
from hr_system.core.exceptions import InvalidStateError
from hr_system.leave.state import PENDING_STAGES, LeaveAction, LeaveStage, next_stage


def test_both_awaiting_stages_report_pending():
    assert LeaveStage.AWAITING_MANAGER.status == LeaveStatus.PENDING
    assert LeaveStage.AWAITING_HR.status == LeaveStatus.PENDING
    assert set(LeaveStage.for_status(LeaveStatus.PENDING)) == set(PENDING_STAGES)
    assert LeaveStage.for_status(LeaveStatus.APPROVED) == (LeaveStage.APPROVED,)


def test_manager_sign_moves_to_awaiting_hr():
    assert next_stage(LeaveStage.AWAITING_MANAGER, LeaveAction.MANAGER_SIGN) == LeaveStage.AWAITING_HR
    assert LeaveStage.AWAITING_HR.manager_signed


@pytest.mark.parametrize("stage", PENDING_STAGES)
def test_final_approval_reject_and_cancel_allowed_from_any_pending_stage(stage):
    assert next_stage(stage, LeaveAction.FINAL_APPROVE) == LeaveStage.APPROVED
    assert next_stage(stage, LeaveAction.REJECT) == LeaveStage.REJECTED
    assert next_stage(stage, LeaveAction.CANCEL) == LeaveStage.CANCELLED


def test_manager_cannot_sign_twice():
    with pytest.raises(InvalidStateError):
        next_stage(LeaveStage.AWAITING_HR, LeaveAction.MANAGER_SIGN)


@pytest.mark.parametrize("stage", [LeaveStage.APPROVED, LeaveStage.REJECTED, LeaveStage.CANCELLED])
@pytest.mark.parametrize("action", list(LeaveAction))
def test_terminal_stages_accept_no_action(stage, action):
    assert stage.is_terminal
    with pytest.raises(InvalidStateError):
        next_stage(stage, action)


def test_manager_resign_message_says_request_is_still_pending():
    with pytest.raises(InvalidStateError, match="không thể ký lại") as exc:
        next_stage(LeaveStage.AWAITING_HR, LeaveAction.MANAGER_SIGN)

    assert "chờ HR" in str(exc.value)
    assert "đã được xử lý" not in str(exc.value)
