def test_register_login_me_logout(client, school):
    register_payload = {
        "name": "Ana Silva",
        "email": "Ana@Example.com ",
        "password": "password123",
        "role": "teacher",
        "professional_id": school.ana.id,
    }

    register_response = client.post("/api/auth/register", json=register_payload)
    assert register_response.status_code == 201
    data = register_response.json()
    assert data["email"] == "ana@example.com"
    assert data["professional_id"] == school.ana.id

    login_response = client.post(
        "/api/auth/login",
        json={"email": "ana@example.com", "password": "password123", "role": "teacher"},
    )
    assert login_response.status_code == 200
    login_data = login_response.json()
    assert login_data["token_type"] == "bearer"
    assert login_data["session_timeout_minutes"] == 60

    headers = {"Authorization": f"Bearer {login_data['access_token']}"}
    me_response = client.get("/api/auth/me", headers=headers)
    assert me_response.status_code == 200
    assert me_response.json()["role"] == "teacher"

    logout_response = client.post("/api/auth/logout", headers=headers)
    assert logout_response.json()["success"] is True


def test_duplicate_email_and_unknown_professional(client):
    payload = {"name": "Staff", "email": "staff@example.com", "password": "password123", "role": "staff"}
    assert client.post("/api/auth/register", json=payload).status_code == 201
    assert client.post("/api/auth/register", json=payload).status_code == 409

    orphan = {**payload, "email": "orphan@example.com", "professional_id": "missing"}
    assert client.post("/api/auth/register", json=orphan).status_code == 404


def test_login_failures(client):
    client.post(
        "/api/auth/register",
        json={"name": "Coord", "email": "coord@example.com", "password": "password123", "role": "coordinator"},
    )

    wrong_password = client.post("/api/auth/login", json={"email": "coord@example.com", "password": "wrongpass1"})
    wrong_role = client.post(
        "/api/auth/login",
        json={"email": "coord@example.com", "password": "password123", "role": "admin"},
    )

    assert wrong_password.status_code == 401
    assert wrong_role.status_code == 403


def test_protected_routes_reject_bad_tokens(client):
    assert client.get("/api/auth/me").status_code in {401, 403}
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"}).status_code == 401


def test_password_change(client, login_as):
    headers = login_as("admin")

    same = client.post(
        "/api/auth/password/change",
        json={"current_password": "password123", "new_password": "password123"},
        headers=headers,
    )
    wrong = client.post(
        "/api/auth/password/change",
        json={"current_password": "password999", "new_password": "newpassword1"},
        headers=headers,
    )
    changed = client.post(
        "/api/auth/password/change",
        json={"current_password": "password123", "new_password": "newpassword1"},
        headers=headers,
    )

    assert [same.status_code, wrong.status_code, changed.status_code] == [400, 400, 200]
    login = client.post("/api/auth/login", json={"email": "admin@example.com", "password": "newpassword1"})
    assert login.status_code == 200
