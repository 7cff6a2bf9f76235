from app.services.ordering import apply_saved_order


def test_apply_saved_order_puts_known_ids_first():
    items = ["a", "b", "c", "d"]

    assert apply_saved_order(items, ["c", "x", "a"], key=lambda item: item) == ["c", "a", "b", "d"]
    assert apply_saved_order(items, None, key=lambda item: item) == items


def test_preferences_default_to_empty(client, login_as):
    headers = login_as("teacher")

    response = client.get("/api/preferences", headers=headers)

    assert response.json() == {"link_order": [], "student_order": []}


def test_preferences_are_per_user_and_deduplicated(client, login_as):
    first = login_as("teacher", email="first@example.com")
    second = login_as("teacher", email="second@example.com")

    saved = client.put("/api/preferences", json={"link_order": ["b", "a", "b"]}, headers=first)

    assert saved.json() == {"link_order": ["b", "a"], "student_order": []}
    assert client.get("/api/preferences", headers=second).json()["link_order"] == []


def test_links_crud_and_personal_order(client, login_as):
    admin = login_as("admin")
    teacher = login_as("teacher")
    drive = client.post(
        "/api/links",
        json={"title": "A Drive", "category": "drive", "url": "https://drive.example.com"},
        headers=admin,
    ).json()
    diary = client.post(
        "/api/links",
        json={"title": "B Diário", "category": "system", "url": "https://diario.example.com"},
        headers=admin,
    ).json()

    assert client.post("/api/links", json={"title": "X", "url": "https://x"}, headers=teacher).status_code == 403
    assert [item["id"] for item in client.get("/api/links", headers=teacher).json()] == [drive["id"], diary["id"]]

    client.put("/api/preferences", json={"link_order": [diary["id"]]}, headers=teacher)
    assert [item["id"] for item in client.get("/api/links", headers=teacher).json()] == [diary["id"], drive["id"]]
    assert [item["id"] for item in client.get("/api/links", headers=admin).json()] == [drive["id"], diary["id"]]

    renamed = client.put(
        f"/api/links/{drive['id']}",
        json={"title": "Drive da Escola", "category": "drive", "url": "https://drive.example.com"},
        headers=admin,
    )
    assert renamed.json()["title"] == "Drive da Escola"
    assert client.delete(f"/api/links/{drive['id']}", headers=admin).status_code == 200
    assert client.delete(f"/api/links/{drive['id']}", headers=admin).status_code == 404
