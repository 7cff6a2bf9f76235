def student_payload(**overrides):
    payload = {
        "name": "Lucas Souza",
        "enrollment_id": "2024001",
        "status": "Acompanhamento",
        "diagnosis": "TEA",
        "pcd_profile": {
            "quick_access": {"communication_style": "Frases curtas", "avoid": "Barulho"},
            "potential": {"interests": "dinossauros, desenho", "strengths": "Memória visual"},
        },
        "attachments": [{"name": "laudo.pdf", "date": "2024-03-01", "size": "1.2 MB", "type": "pdf"}],
    }
    payload.update(overrides)
    return payload


def test_create_student_records_creator_and_nested_profile(client, school, login_as):
    headers = login_as("teacher", name="Ana Paula")

    response = client.post(
        "/api/students",
        json=student_payload(class_id=school.class_7a.id, pdt_id=school.bruno.id),
        headers=headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["created_by"] == "Ana Paula"
    assert body["updated_by"] is None
    assert body["class_name"] == "7A"
    assert body["pdt_name"] == "Prof. Bruno"
    assert body["attachments_count"] == 1
    assert body["pcd_profile"]["potential"]["interests"] == ["dinossauros", "desenho"]
    assert body["pcd_profile"]["medication"] == {"info": "", "impact": ""}


def test_update_keeps_creation_metadata(client, login_as):
    creator = login_as("coordinator", name="Carla")
    editor = login_as("admin", name="Diego")
    student = client.post("/api/students", json=student_payload(), headers=creator).json()

    response = client.put(
        f"/api/students/{student['id']}",
        json=student_payload(status="Laudo Atualizado", attachments=[]),
        headers=editor,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["created_by"] == "Carla"
    assert body["created_by_id"] == student["created_by_id"]
    assert body["updated_by"] == "Diego"
    assert body["status"] == "Laudo Atualizado"
    assert body["attachments_count"] == 0


def test_duplicate_enrollment_is_rejected(client, login_as):
    headers = login_as("admin")
    client.post("/api/students", json=student_payload(), headers=headers)

    response = client.post("/api/students", json=student_payload(name="Outro Aluno"), headers=headers)

    assert response.status_code == 409


def test_search_matches_name_enrollment_status_and_class(client, school, login_as):
    headers = login_as("admin")
    client.post("/api/students", json=student_payload(class_id=school.class_7a.id), headers=headers)
    client.post(
        "/api/students",
        json=student_payload(name="Marina Costa", enrollment_id="2024002", status="Pendente Revisão"),
        headers=headers,
    )

    def names(query):
        response = client.get("/api/students", params={"q": query}, headers=headers)
        return [item["name"] for item in response.json()]

    assert names("lucas") == ["Lucas Souza"]
    assert names("2024002") == ["Marina Costa"]
    assert names("pendente") == ["Marina Costa"]
    assert names("7A") == ["Lucas Souza"]
    assert names("") == ["Lucas Souza", "Marina Costa"]


def test_listing_follows_saved_student_order(client, login_as):
    headers = login_as("admin")
    lucas = client.post("/api/students", json=student_payload(), headers=headers).json()
    marina = client.post(
        "/api/students", json=student_payload(name="Marina Costa", enrollment_id="2024002"), headers=headers
    ).json()

    client.put("/api/preferences", json={"student_order": [marina["id"], "gone"]}, headers=headers)

    listed = client.get("/api/students", headers=headers).json()
    assert [item["id"] for item in listed] == [marina["id"], lucas["id"]]


def test_only_admin_or_coordinator_delete_students(client, login_as):
    admin = login_as("admin")
    teacher = login_as("teacher")
    student = client.post("/api/students", json=student_payload(), headers=admin).json()

    assert client.delete(f"/api/students/{student['id']}", headers=teacher).status_code == 403
    assert client.delete(f"/api/students/{student['id']}", headers=admin).status_code == 200
    assert client.get(f"/api/students/{student['id']}", headers=admin).status_code == 404


def test_unknown_class_is_rejected(client, login_as):
    headers = login_as("admin")

    response = client.post("/api/students", json=student_payload(class_id="missing"), headers=headers)

    assert response.status_code == 404
