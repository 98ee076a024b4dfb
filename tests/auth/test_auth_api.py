API = "/api/v1"


def test_signup_then_login_then_profile(client):
    resp = client.post(
        f"{API}/auth/signup",
        json={"employeeId": "emp300", "name": "Robin Park", "email": "robin@dayflow.test", "password": "secret123"},
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["success"] is True
    assert body["data"]["user"]["employeeId"] == "EMP300"

    resp = client.post(f"{API}/auth/login", json={"email": "robin@dayflow.test", "password": "secret123"})
    assert resp.status_code == 200
    token = resp.get_json()["data"]["accessToken"]

    resp = client.get(f"{API}/auth/profile", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    user = resp.get_json()["data"]["user"]
    assert user["email"] == "robin@dayflow.test"
    assert "password" not in user and "passwordHash" not in user


def test_protected_route_without_token(client):
    resp = client.get(f"{API}/auth/profile")

    assert resp.status_code == 401
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Not authorized, no token provided"


def test_employee_cannot_reach_hr_routes(client, employee, auth_header):
    resp = client.get(f"{API}/employees", headers=auth_header(employee))

    assert resp.status_code == 403
    assert resp.get_json()["message"] == "You do not have permission to perform this action"


def test_refresh_token_endpoint(client, employee):
    login = client.post(f"{API}/auth/login", json={"email": employee.email, "password": "secret123"}).get_json()

    resp = client.post(f"{API}/auth/refresh-token", json={"refreshToken": login["data"]["refreshToken"]})

    assert resp.status_code == 200
    assert resp.get_json()["data"]["accessToken"]


def test_update_profile_changes_only_contact_fields(client, employee, auth_header):
    resp = client.put(
        f"{API}/auth/profile",
        headers=auth_header(employee),
        json={"phone": "555-0100", "role": "hr"},
    )

    assert resp.status_code == 200
    user = resp.get_json()["data"]["user"]
    assert user["phone"] == "555-0100"
    assert user["role"] == "employee"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get(f"{API}/does-not-exist")

    assert resp.status_code == 404
    assert resp.get_json()["success"] is False


def test_health(client):
    resp = client.get(f"{API}/health")

    assert resp.status_code == 200
    assert resp.get_json()["data"]["status"] == "ok"
