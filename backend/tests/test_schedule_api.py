from sqlalchemy import func, select

from app.models.activity_log import ActivityLog
from app.models.allocation import ClassAllocation

YEAR = "2024"


def allocation_payload(school, *, class_=None, teacher=None, slot=None, semesters=("1",), day="Monday"):
    return {
        "class_id": (class_ or school.class_7a).id,
        "subject_id": school.math.id,
        "time_slot_id": (slot or school.slot_1).id,
        "day_of_week": day,
        "year": YEAR,
        "semesters": list(semesters),
        "teacher_id": (teacher or school.ana).id,
    }


def allocation_count(db_session):
    return db_session.execute(select(func.count()).select_from(ClassAllocation)).scalar_one()


def test_save_to_both_semesters_and_read_class_grid(client, school, login_as):
    headers = login_as("admin")

    response = client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, semesters=["2", "1", "2"]),
        headers=headers,
    )
    assert response.status_code == 200
    assert [item["semester"] for item in response.json()] == ["1", "2"]

    grid = client.get(
        f"/api/schedule/classes/{school.class_7a.id}",
        params={"year": YEAR, "semesters": ["1", "2"]},
        headers=headers,
    )
    assert grid.status_code == 200
    assert len(grid.json()) == 2
    assert {item["teacher_id"] for item in grid.json()} == {school.ana.id}


def test_teacher_clash_in_other_class_is_rejected_without_write(client, school, db_session, login_as):
    headers = login_as("admin")
    assert client.post(
        "/api/schedule/class-allocations", json=allocation_payload(school), headers=headers
    ).status_code == 200

    response = client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, class_=school.class_7b),
        headers=headers,
    )

    assert response.status_code == 409
    body = response.json()
    assert body["details"]["conflicts"] == [
        {
            "kind": "class",
            "semester": "1",
            "day": "Monday",
            "time": "1ª Aula (08:00 - 08:50)",
            "description": "Ana já está na turma 7A",
        }
    ]
    assert body["message"].startswith("Não é possível salvar este horário na turma 7B")
    assert allocation_count(db_session) == 1


def test_resaving_same_class_cell_is_an_edit(client, school, db_session, login_as):
    headers = login_as("admin")
    client.post("/api/schedule/class-allocations", json=allocation_payload(school), headers=headers)

    response = client.post(
        "/api/schedule/class-allocations",
        json={**allocation_payload(school), "room": "Sala 12"},
        headers=headers,
    )

    assert response.status_code == 200
    assert response.json()[0]["room"] == "Sala 12"
    assert allocation_count(db_session) == 1


def test_conflict_check_endpoint_reports_without_saving(client, school, db_session, login_as):
    headers = login_as("coordinator")
    client.post("/api/schedule/class-allocations", json=allocation_payload(school), headers=headers)

    response = client.post(
        "/api/schedule/conflicts/check",
        json=allocation_payload(school, class_=school.class_7b, semesters=["1", "2"]),
        headers=headers,
    )

    assert response.status_code == 200
    assert [item["semester"] for item in response.json()] == ["1"]
    assert allocation_count(db_session) == 1


def test_teacher_role_cannot_edit_schedule(client, school, login_as):
    headers = login_as("teacher", professional_id=school.ana.id)

    response = client.post("/api/schedule/class-allocations", json=allocation_payload(school), headers=headers)

    assert response.status_code == 403


def test_invalid_day_is_rejected(client, school, login_as):
    headers = login_as("admin")

    response = client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, day="Saturday"),
        headers=headers,
    )

    assert response.status_code == 422


def test_delete_class_allocation(client, school, db_session, login_as):
    headers = login_as("admin")
    saved = client.post("/api/schedule/class-allocations", json=allocation_payload(school), headers=headers).json()

    response = client.delete(f"/api/schedule/class-allocations/{saved[0]['id']}", headers=headers)
    assert response.json() == {"success": True, "removed": True}
    again = client.delete(f"/api/schedule/class-allocations/{saved[0]['id']}", headers=headers)
    assert again.json() == {"success": True, "removed": False}
    assert allocation_count(db_session) == 0


def test_copy_semester_requires_confirmation(client, school, db_session, login_as):
    headers = login_as("admin")
    client.post("/api/schedule/class-allocations", json=allocation_payload(school), headers=headers)
    request = {"class_id": school.class_7a.id, "year": YEAR, "source_semester": "1", "target_semester": "2"}

    refused = client.post("/api/schedule/copy-semester", json=request, headers=headers)
    assert refused.status_code == 400
    assert allocation_count(db_session) == 1

    copied = client.post("/api/schedule/copy-semester", json={**request, "confirm": True}, headers=headers)
    assert copied.status_code == 200
    assert copied.json() == {"copied": 1, "target_had_allocations": False}
    assert allocation_count(db_session) == 2

    actions = db_session.execute(select(ActivityLog.action)).scalars().all()
    assert "schedule.copy_semester" in actions


def test_copy_semester_rejects_same_source_and_target(client, school, login_as):
    headers = login_as("admin")

    response = client.post(
        "/api/schedule/copy-semester",
        json={"class_id": school.class_7a.id, "year": YEAR, "source_semester": "1", "target_semester": "1"},
        headers=headers,
    )

    assert response.status_code == 422


def test_complementary_activity_blocks_teaching_and_duplicates(client, school, login_as):
    headers = login_as("admin")
    activity = {
        "teacher_id": school.ana.id,
        "time_slot_id": school.slot_2.id,
        "day_of_week": "Tuesday",
        "year": YEAR,
        "semester": "1",
        "activity": "Planejamento",
    }
    created = client.post("/api/schedule/complementary", json=activity, headers=headers)
    assert created.status_code == 201

    duplicate = client.post("/api/schedule/complementary", json={**activity, "activity": "HTPC"}, headers=headers)
    assert duplicate.status_code == 409

    teaching = client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, slot=school.slot_2, day="Tuesday"),
        headers=headers,
    )
    assert teaching.status_code == 409
    assert teaching.json()["details"]["conflicts"][0]["description"] == (
        "Ana tem atividade complementar registrada de Planejamento"
    )

    updated = client.put(
        f"/api/schedule/complementary/{created.json()['id']}",
        json={"activity": "Horário livre"},
        headers=headers,
    )
    assert updated.json()["activity"] == "Horário livre"

    listed = client.get("/api/schedule/complementary", params={"year": YEAR, "teacher_id": school.ana.id}, headers=headers)
    assert [item["activity"] for item in listed.json()] == ["Horário livre"]


def test_complementary_update_rejects_blank_text_and_checks_the_new_cell(client, school, login_as):
    headers = login_as("admin")
    activity = {
        "teacher_id": school.ana.id,
        "time_slot_id": school.slot_2.id,
        "day_of_week": "Tuesday",
        "year": YEAR,
        "semester": "1",
        "activity": "Planejamento",
    }
    created = client.post("/api/schedule/complementary", json=activity, headers=headers)
    assert created.status_code == 201
    activity_id = created.json()["id"]
    client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, slot=school.slot_1, day="Tuesday"),
        headers=headers,
    )

    blank = client.put(f"/api/schedule/complementary/{activity_id}", json={"activity": "   "}, headers=headers)
    assert blank.status_code == 422

    # Same cell is not a clash with itself.
    kept = client.put(f"/api/schedule/complementary/{activity_id}", json={"activity": " HTPC "}, headers=headers)
    assert kept.status_code == 200
    assert kept.json()["activity"] == "HTPC"

    moved_onto_class = client.put(
        f"/api/schedule/complementary/{activity_id}",
        json={"activity": "HTPC", "time_slot_id": school.slot_1.id},
        headers=headers,
    )
    assert moved_onto_class.status_code == 409
    assert moved_onto_class.json()["details"]["conflicts"][0]["kind"] == "class"

    moved = client.put(
        f"/api/schedule/complementary/{activity_id}",
        json={"activity": "HTPC", "day_of_week": "Friday"},
        headers=headers,
    )
    assert moved.status_code == 200
    assert (moved.json()["day_of_week"], moved.json()["time_slot_id"]) == ("Friday", school.slot_2.id)

    missing = client.put("/api/schedule/complementary/missing", json={"activity": "HTPC"}, headers=headers)
    assert missing.status_code == 404


def test_availability_splits_busy_free_and_other(client, school, login_as):
    headers = login_as("admin")
    client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, day="Wednesday"),
        headers=headers,
    )
    client.post(
        "/api/schedule/complementary",
        json={
            "teacher_id": school.bruno.id,
            "time_slot_id": school.slot_1.id,
            "day_of_week": "Wednesday",
            "year": YEAR,
            "semester": "1",
            "activity": "Livre",
        },
        headers=headers,
    )

    response = client.get(
        "/api/schedule/availability",
        params={"year": YEAR, "day": "Wednesday", "time_slot_id": school.slot_1.id},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert [item["teacher_name"] for item in body["busy"]] == ["Ana"]
    assert [item["teacher_name"] for item in body["free"]] == ["Prof. Bruno"]
    assert body["complementary"] == []


def test_teacher_week_lists_classes_and_activities(client, school, login_as):
    headers = login_as("admin")
    client.post(
        "/api/schedule/class-allocations",
        json=allocation_payload(school, slot=school.slot_3, day="Thursday"),
        headers=headers,
    )
    client.post("/api/schedule/class-allocations", json=allocation_payload(school), headers=headers)
    client.post(
        "/api/schedule/complementary",
        json={
            "teacher_id": school.ana.id,
            "time_slot_id": school.slot_2.id,
            "day_of_week": "Monday",
            "year": YEAR,
            "semester": "1",
            "activity": "Reunião",
        },
        headers=headers,
    )

    response = client.get(f"/api/schedule/teachers/{school.ana.id}/week", params={"year": YEAR}, headers=headers)

    assert response.status_code == 200
    assert [(item["day_of_week"], item["kind"]) for item in response.json()] == [
        ("Monday", "class"),
        ("Monday", "activity"),
        ("Thursday", "class"),
    ]
