import logging
from datetime import date, datetime

import pytest

from dayflow.common.pagination import PageRequest
from dayflow.core.enums import AttendanceStatus, LeaveStatus, Role
from dayflow.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError


def _request(container, employee, **overrides):
    payload = {
        "leaveType": "paid",
        "startDate": "2026-01-20",
        "endDate": "2026-01-22",
        "reason": "Family trip out of town",
    }
    payload.update(overrides)
    return container.leave_service.create(employee, payload)


def test_days_are_counted_inclusively(container, employee):
    leave = _request(container, employee)

    assert leave.days == 3
    assert leave.status == LeaveStatus.PENDING
    assert leave.employee_id == "EMP100"


def test_single_day_request(container, employee):
    assert _request(container, employee, endDate="2026-01-20").days == 1


def test_end_before_start_is_rejected(container, employee):
    with pytest.raises(ValidationError, match="End date must be after start date"):
        _request(container, employee, startDate="2026-01-22", endDate="2026-01-20")


def test_short_reason_is_rejected(container, employee):
    with pytest.raises(ValidationError, match="at least 10 characters"):
        _request(container, employee, reason="tired")


def test_unknown_leave_type_is_rejected(container, employee):
    with pytest.raises(ValidationError, match="Leave type must be one of"):
        _request(container, employee, leaveType="vacation")


def test_submission_notifies_requester(container, repos, employee):
    _request(container, employee)

    titles = [n.title for n in repos.notifications.list_for_user(employee.user_id)]
    assert titles == ["Leave Request Submitted"]


def test_approval_writes_leave_days_into_attendance(container, repos, employee, hr):
    leave = container.leave_service.create(
        employee,
        {"leaveType": "sick", "startDate": "2026-02-01", "endDate": "2026-02-02", "reason": "Flu, need rest"},
    )

    decided = container.leave_service.decide(hr, leave.request_id, {"status": "Approved"})

    assert decided.status == LeaveStatus.APPROVED
    assert decided.decided_by == hr.user_id
    assert decided.decided_at == datetime(2026, 1, 15, 9, 0)
    for day in (date(2026, 2, 1), date(2026, 2, 2)):
        record = repos.attendance.get_for_user_and_date(employee.user_id, day)
        assert record.status == AttendanceStatus.LEAVE
        assert record.remarks == "sick leave"
    assert repos.attendance.get_for_user_and_date(employee.user_id, date(2026, 2, 3)) is None

    titles = [n.title for n in repos.notifications.list_for_user(employee.user_id)]
    assert titles[0] == "Leave Request Approved"


def test_approval_overrides_existing_attendance(container, repos, employee, hr):
    container.attendance_service.check_in(employee)
    leave = _request(container, employee, startDate="2026-01-15", endDate="2026-01-16")

    container.leave_service.decide(hr, leave.request_id, {"status": "Approved"})

    record = repos.attendance.get_for_user_and_date(employee.user_id, date(2026, 1, 15))
    assert record.status == AttendanceStatus.LEAVE
    assert record.remarks == "paid leave"
    assert repos.attendance.search(user_id=employee.user_id)[1] == 2


def test_rejection_leaves_attendance_untouched(container, repos, employee, manager):
    leave = _request(container, employee)

    decided = container.leave_service.decide(manager, leave.request_id, {"status": "Rejected", "remarks": "Busy week"})

    assert decided.status == LeaveStatus.REJECTED
    assert decided.remarks == "Busy week"
    assert repos.attendance.search(user_id=employee.user_id)[1] == 0
    assert repos.notifications.list_for_user(employee.user_id)[0].title == "Leave Request Rejected"


def test_decision_is_one_shot(container, employee, hr, manager):
    leave = _request(container, employee)
    container.leave_service.decide(hr, leave.request_id, {"status": "Rejected"})

    with pytest.raises(ConflictError, match="already been processed"):
        container.leave_service.decide(manager, leave.request_id, {"status": "Approved"})


def test_pending_is_not_a_decision(container, employee, hr):
    leave = _request(container, employee)

    with pytest.raises(ValidationError, match="Status must be one of: Approved, Rejected"):
        container.leave_service.decide(hr, leave.request_id, {"status": "Pending"})


def test_employee_cannot_decide(container, employee, make_employee):
    colleague = make_employee("EMP101")
    leave = _request(container, employee)

    with pytest.raises(AuthorizationError):
        container.leave_service.decide(colleague, leave.request_id, {"status": "Approved"})


def test_decide_unknown_request(container, hr):
    with pytest.raises(NotFoundError):
        container.leave_service.decide(hr, 404, {"status": "Approved"})


def test_failed_sync_keeps_earlier_days_and_is_logged(container, repos, employee, hr, monkeypatch, caplog):
    leave = _request(container, employee, startDate="2026-02-01", endDate="2026-02-03")
    original = repos.attendance.set_day_status

    def flaky(**kwargs):
        if kwargs["work_date"] == date(2026, 2, 2):
            raise RuntimeError("storage unavailable")
        original(**kwargs)

    monkeypatch.setattr(repos.attendance, "set_day_status", flaky)

    with caplog.at_level(logging.ERROR, logger="dayflow.leaves.service"):
        with pytest.raises(RuntimeError):
            container.leave_service.decide(hr, leave.request_id, {"status": "Approved"})

    assert repos.attendance.get_for_user_and_date(employee.user_id, date(2026, 2, 1)).status == AttendanceStatus.LEAVE
    assert repos.attendance.get_for_user_and_date(employee.user_id, date(2026, 2, 3)) is None
    assert repos.leaves.get_by_id(leave.request_id).status == LeaveStatus.APPROVED
    assert "days already written: 2026-02-01" in caplog.text
    titles = [n.title for n in repos.notifications.list_for_user(employee.user_id)]
    assert "Leave Request Approved" not in titles


def test_owner_deletes_pending_request(container, repos, employee):
    leave = _request(container, employee)

    container.leave_service.delete(employee, leave.request_id)

    assert repos.leaves.get_by_id(leave.request_id) is None


def test_other_employee_cannot_delete(container, employee, make_employee):
    colleague = make_employee("EMP101")
    leave = _request(container, employee)

    with pytest.raises(AuthorizationError, match="your own leave requests"):
        container.leave_service.delete(colleague, leave.request_id)


def test_decided_request_cannot_be_deleted(container, employee, hr):
    leave = _request(container, employee)
    container.leave_service.decide(hr, leave.request_id, {"status": "Approved"})

    with pytest.raises(ConflictError, match="Only pending leave requests can be deleted"):
        container.leave_service.delete(employee, leave.request_id)


def test_processed_request_conflicts_before_role_check(container, employee, hr, make_employee):
    colleague = make_employee("EMP101")
    leave = _request(container, employee)
    container.leave_service.decide(hr, leave.request_id, {"status": "Approved"})

    with pytest.raises(ConflictError, match="already been processed"):
        container.leave_service.decide(colleague, leave.request_id, {"status": "Rejected"})


def test_processed_request_conflicts_before_ownership_check(container, employee, hr, make_employee):
    colleague = make_employee("EMP101")
    leave = _request(container, employee)
    container.leave_service.decide(hr, leave.request_id, {"status": "Rejected"})

    for actor in (colleague, hr):
        with pytest.raises(ConflictError, match="Only pending leave requests can be deleted"):
            container.leave_service.delete(actor, leave.request_id)


def test_balance_counts_approved_days_this_year(container, employee, hr):
    approved = _request(container, employee)
    _request(container, employee, startDate="2026-03-02", endDate="2026-03-03")
    container.leave_service.decide(hr, approved.request_id, {"status": "Approved"})

    assert container.leave_service.balance(employee.user_id) == {"total": 20, "used": 3.0, "remaining": 17.0}


def test_my_leaves_and_all_leaves(container, employee, hr, make_employee):
    colleague = make_employee("EMP101")
    _request(container, employee)
    _request(container, colleague)

    mine = container.leave_service.my_leaves(employee, page=PageRequest(page=1, limit=10))
    assert [x["employeeId"] for x in mine["leaves"]] == ["EMP100"]
    assert mine["balance"]["remaining"] == 20

    everything = container.leave_service.all_leaves(page=PageRequest(page=1, limit=20), status="Pending")
    assert everything["pagination"]["total"] == 2
    assert everything["stats"] == [{"status": "Pending", "count": 2, "totalDays": 6.0}]


def test_stats_group_approved_by_type_and_month(container, employee, hr):
    first = _request(container, employee, leaveType="sick")
    second = _request(container, employee, leaveType="sick", startDate="2026-03-02", endDate="2026-03-02")
    for leave in (first, second):
        container.leave_service.decide(hr, leave.request_id, {"status": "Approved"})

    stats = container.leave_service.stats()

    assert stats["leaveTypeStats"] == [{"leaveType": "sick", "count": 2, "totalDays": 4.0}]
    assert stats["monthlyStats"] == [
        {"month": 1, "count": 1, "totalDays": 3.0},
        {"month": 3, "count": 1, "totalDays": 1.0},
    ]


def test_manager_role_can_approve():
    assert Role.MANAGER.can_approve
    assert not Role.EMPLOYEE.can_approve
