import pytest

from dayflow.core.enums import NotificationType
from dayflow.core.exceptions import NotFoundError, ValidationError

API = "/api/v1"


def test_list_and_mark_read_over_http(client, container, employee, auth_header):
    container.notification_service.notify(employee.user_id, title="Welcome", message="Hello there")
    container.notification_service.notify(
        employee.user_id, title="Payslip ready", message="January", type=NotificationType.SUCCESS
    )
    headers = auth_header(employee)

    items = client.get(f"{API}/notifications", headers=headers).get_json()["data"]["notifications"]
    assert [n["title"] for n in items] == ["Payslip ready", "Welcome"]
    assert items[0]["type"] == "success"

    resp = client.patch(f"{API}/notifications/{items[1]['id']}/read", headers=headers)
    assert resp.status_code == 200

    unread = client.get(f"{API}/notifications?unread=true", headers=headers).get_json()["data"]["notifications"]
    assert [n["title"] for n in unread] == ["Payslip ready"]


def test_cannot_mark_someone_elses_notification(container, employee, hr):
    notification_id = container.notification_service.notify(hr.user_id, title="HR only", message="secret")

    with pytest.raises(NotFoundError, match="Notification not found"):
        container.notification_service.mark_read(notification_id, employee.user_id)


def test_limit_is_bounded(container, employee):
    with pytest.raises(ValidationError):
        container.notification_service.list_for_user(employee.user_id, limit="101")
