from app.services.resources import slugify_type


def test_class_and_professional_display_names(client, login_as):
    headers = login_as("admin")

    school_class = client.post("/api/classes", json={"series": "1º Ano", "name": "A"}, headers=headers)
    no_series = client.post("/api/classes", json={"name": "Multisseriada"}, headers=headers)
    teacher = client.post("/api/professionals", json={"name": "Roberto Alves", "alias": "Beto"}, headers=headers)
    coordinator = client.post("/api/professionals", json={"name": "Sônia", "kind": "Coordenação"}, headers=headers)

    assert school_class.json()["display_name"] == "1º Ano A"
    assert no_series.json()["display_name"] == "Multisseriada"
    assert teacher.json()["display_name"] == "Beto"
    assert coordinator.json()["display_name"] == "Sônia"
    assert [item["name"] for item in client.get("/api/teachers", headers=headers).json()] == ["Roberto Alves"]


def test_matrix_edits_need_admin(client, login_as):
    headers = login_as("teacher")

    assert client.post("/api/subjects", json={"name": "História"}, headers=headers).status_code == 403
    assert client.get("/api/subjects", headers=headers).status_code == 200


def test_duplicate_subject_conflicts(client, login_as):
    headers = login_as("coordinator")
    assert client.post("/api/subjects", json={"name": "Geografia"}, headers=headers).status_code == 201

    assert client.post("/api/subjects", json={"name": "Geografia"}, headers=headers).status_code == 409


def test_resource_crud(client, login_as):
    headers = login_as("admin")
    created = client.post(
        "/api/resources",
        json={"name": "Projetor 2", "type": "projector", "details": "Sala 5"},
        headers=headers,
    )
    assert created.status_code == 201

    duplicate = client.post("/api/resources", json={"name": "Projetor 2", "type": "projector"}, headers=headers)
    assert duplicate.status_code == 409

    resource_id = created.json()["id"]
    updated = client.put(f"/api/resources/{resource_id}", json={"details": "Sala 6"}, headers=headers)
    assert updated.json()["details"] == "Sala 6"
    assert updated.json()["name"] == "Projetor 2"

    assert client.delete(f"/api/resources/{resource_id}", headers=headers).status_code == 200
    assert client.get(f"/api/resources/{resource_id}", headers=headers).status_code == 404


def test_resource_types_are_seeded_and_extendable(client, login_as):
    headers = login_as("admin")

    defaults = client.get("/api/resource-types", headers=headers).json()
    assert {"value": "lab", "label": "Laboratório"} in defaults

    created = client.post("/api/resource-types", json={"label": "Sala de Música"}, headers=headers)
    again = client.post("/api/resource-types", json={"label": "sala de música"}, headers=headers)

    assert created.json() == {"value": "sala_de_musica", "label": "Sala de Música"}
    assert again.json() == created.json()
    assert len(client.get("/api/resource-types", headers=headers).json()) == len(defaults) + 1


def test_slugify_type_strips_accents():
    assert slugify_type("  Auditório Principal ") == "auditorio_principal"
