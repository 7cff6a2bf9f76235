from app.models.time_slot import SlotKind, TimeSlot


def test_branding_is_public(client):
    response = client.get("/api/settings/branding")

    assert response.status_code == 200
    body = response.json()
    assert body["institution_name"] == "O NOME DA ESCOLA AQUI"
    assert body["has_night_shift"] is True


def test_institution_settings_update_requires_admin(client, login_as):
    payload = {"institution_name": "Escola Estadual Centro", "has_night_shift": False, "available_weeks": 3}

    denied = client.put("/api/settings/institution", json=payload, headers=login_as("teacher"))
    assert denied.status_code == 403

    headers = login_as("admin")
    updated = client.put("/api/settings/institution", json=payload, headers=headers)
    assert updated.status_code == 200
    body = updated.json()
    assert body["institution_name"] == "Escola Estadual Centro"
    assert body["available_weeks"] == 3
    assert body["session_timeouts"]["Professor"] == 60
    assert body["academic_config"]["year_config"]["start_date"].endswith("-02-01")


def test_settings_reject_invalid_values(client, login_as):
    headers = login_as("admin")

    bad_color = client.put(
        "/api/settings/institution",
        json={"institution_name": "Escola", "lunch_color": "orange"},
        headers=headers,
    )
    bad_timeout = client.put(
        "/api/settings/institution",
        json={"institution_name": "Escola", "session_timeouts": {"Diretor": 30}},
        headers=headers,
    )

    assert bad_color.status_code == 422
    assert bad_timeout.status_code == 422


def test_login_returns_role_session_timeout(client, login_as):
    admin = login_as("admin")
    client.put(
        "/api/settings/institution",
        json={"institution_name": "Escola", "session_timeouts": {"Professor": 90}},
        headers=admin,
    )
    client.post(
        "/api/auth/register",
        json={"name": "Carla", "email": "carla@example.com", "password": "password123", "role": "teacher"},
    )

    response = client.post("/api/auth/login", json={"email": "carla@example.com", "password": "password123"})

    assert response.json()["session_timeout_minutes"] == 90


def test_time_slots_hide_night_shift_when_disabled(client, db_session, login_as):
    db_session.add_all(
        [
            TimeSlot(label="1ª", start_time="07:00", end_time="07:50", kind=SlotKind.class_, position=1),
            TimeSlot(label="Intervalo", start_time="18:00", end_time="18:20", kind=SlotKind.break_, position=2),
            TimeSlot(label="10ª", start_time="18:30", end_time="19:20", kind=SlotKind.class_, position=3),
        ]
    )
    db_session.commit()
    headers = login_as("admin")

    assert len(client.get("/api/time-slots", headers=headers).json()) == 3

    client.put("/api/settings/institution", json={"institution_name": "Escola", "has_night_shift": False}, headers=headers)

    visible = client.get("/api/time-slots", headers=headers).json()
    assert [slot["label"] for slot in visible] == ["1ª"]
    everything = client.get("/api/time-slots", params={"include_night": True}, headers=headers).json()
    assert len(everything) == 3


def test_default_grid_is_seeded_on_first_read(client, login_as):
    headers = login_as("admin")

    slots = client.get("/api/time-slots", params={"include_night": True}, headers=headers).json()

    assert slots[0]["label"] == "1ª"
    assert slots[0]["start_time"] == "07:00"
    assert [slot["position"] for slot in slots] == sorted(slot["position"] for slot in slots)


def test_time_slot_update_validates_order_and_is_logged(client, login_as):
    headers = login_as("admin", name="Diretora")
    slot = client.post(
        "/api/time-slots",
        json={"label": "1ª", "start_time": "07:00", "end_time": "07:50"},
        headers=headers,
    ).json()
    assert slot["kind"] == "class"

    backwards = client.put(f"/api/time-slots/{slot['id']}", json={"end_time": "06:50"}, headers=headers)
    assert backwards.status_code == 400

    updated = client.put(f"/api/time-slots/{slot['id']}", json={"label": "Entrada", "kind": "break"}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["kind"] == "break"

    logs = client.get("/api/activity/logs", params={"action": "time_slot"}, headers=headers).json()
    assert [(item["action"], item["actor_name"]) for item in logs] == [("time_slot.update", "Diretora")]
    assert logs[0]["details"] == {"label": "Entrada", "kind": "break"}

    assert client.get("/api/activity/logs", headers=login_as("teacher")).status_code == 403
