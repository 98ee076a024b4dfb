API = "/api/v1"


def _submit(client, headers, **overrides):
    payload = {
        "leaveType": "casual",
        "startDate": "2026-01-26",
        "endDate": "2026-01-27",
        "reason": "Moving to a new apartment",
    }
    payload.update(overrides)
    return client.post(f"{API}/leaves", headers=headers, json=payload)


def test_leave_lifecycle_over_http(client, employee, hr, auth_header):
    resp = _submit(client, auth_header(employee))
    assert resp.status_code == 201
    leave_id = resp.get_json()["data"]["leave"]["id"]

    resp = client.patch(f"{API}/leaves/{leave_id}/status", headers=auth_header(hr), json={"status": "Approved"})
    assert resp.status_code == 200
    assert resp.get_json()["data"]["leave"]["status"] == "Approved"

    resp = client.patch(f"{API}/leaves/{leave_id}/status", headers=auth_header(hr), json={"status": "Rejected"})
    assert resp.status_code == 409

    resp = client.get(f"{API}/attendance/my-attendance", headers=auth_header(employee))
    assert [r["status"] for r in resp.get_json()["data"]["attendance"]] == ["Leave", "Leave"]


def test_employee_cannot_approve_over_http(client, employee, auth_header):
    leave_id = _submit(client, auth_header(employee)).get_json()["data"]["leave"]["id"]

    resp = client.patch(f"{API}/leaves/{leave_id}/status", headers=auth_header(employee), json={"status": "Approved"})

    assert resp.status_code == 403


def test_delete_by_other_employee_is_forbidden(client, employee, make_employee, auth_header):
    colleague = make_employee("EMP101")
    leave_id = _submit(client, auth_header(employee)).get_json()["data"]["leave"]["id"]

    resp = client.delete(f"{API}/leaves/{leave_id}", headers=auth_header(colleague))
    assert resp.status_code == 403

    resp = client.delete(f"{API}/leaves/{leave_id}", headers=auth_header(employee))
    assert resp.status_code == 200


def test_missing_dates(client, employee, auth_header):
    resp = _submit(client, auth_header(employee), startDate=None)

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Start date and end date are required"


def test_my_leaves_includes_balance(client, employee, auth_header):
    _submit(client, auth_header(employee))

    data = client.get(f"{API}/leaves/my-leaves", headers=auth_header(employee)).get_json()["data"]

    assert len(data["leaves"]) == 1
    assert data["balance"] == {"total": 20, "used": 0.0, "remaining": 20.0}
