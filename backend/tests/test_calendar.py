from datetime import date

from app.services.academic_calendar import (
    RESET_CONFIRMATION_PHRASE,
    default_academic_config,
    merged_events,
    system_events,
)

ACADEMIC_CONFIG_2024 = {
    "year_config": {
        "year": "2024",
        "start_date": "2024-02-05",
        "end_date": "2024-12-13",
        "next_year_start_date": "2025-02-03",
        "recovery_start_date": "2024-12-16",
        "recovery_end_date": "2024-12-20",
    },
    "terms": [
        {"id": 1, "label": "1º Bimestre", "start": "2024-02-05", "end": "2024-04-19"},
        {"id": 2, "label": "2º Bimestre", "start": "2024-04-22", "end": "2024-07-05"},
    ],
}


def test_system_events_cover_year_and_term_boundaries():
    events = system_events(default_academic_config(2024))

    ids = [event.id for event in events]
    assert ids[:5] == ["sys-start", "sys-end", "sys-next-start", "sys-rec-start", "sys-rec-end"]
    assert "sys-term-4-end" in ids
    assert all(event.is_system for event in events)
    assert events[0].date == date(2024, 2, 1)
    assert events[0].title == "Início Ano Letivo"


def test_merged_events_filters_system_markers_by_range():
    config = default_academic_config(2024)

    entries = merged_events(config, [], start=date(2024, 4, 1), end=date(2024, 4, 30))

    assert [entry.id for entry in entries] == ["sys-term-1-end", "sys-term-2-start"]


def test_events_endpoint_merges_configuration_and_manual_events(client, login_as):
    headers = login_as("coordinator")
    assert client.put("/api/settings/academic-config", json=ACADEMIC_CONFIG_2024, headers=headers).status_code == 200
    created = client.post(
        "/api/calendar/events",
        json={"date": "2024-02-05", "title": "Acolhida", "type": "evento"},
        headers=headers,
    )
    assert created.status_code == 201

    response = client.get(
        "/api/calendar/events",
        params={"start": "2024-02-01", "end": "2024-02-29"},
        headers=headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert [(item["id"], item["is_system"]) for item in body] == [
        ("sys-start", True),
        ("sys-term-1-start", True),
        (created.json()["id"], False),
    ]


def test_system_events_cannot_be_edited_or_deleted(client, login_as):
    headers = login_as("admin")

    edit = client.put("/api/calendar/events/sys-start", json={"title": "Outro"}, headers=headers)
    remove = client.delete("/api/calendar/events/sys-term-1-start", headers=headers)

    assert edit.status_code == 400
    assert remove.status_code == 400


def test_manual_event_update_and_delete(client, login_as):
    headers = login_as("admin")
    event = client.post(
        "/api/calendar/events",
        json={"date": "2024-05-01", "title": "Dia do Trabalho", "type": "feriado", "description": "Nacional"},
        headers=headers,
    ).json()

    updated = client.put(f"/api/calendar/events/{event['id']}", json={"description": None}, headers=headers)
    assert updated.status_code == 200
    assert updated.json()["description"] is None
    assert updated.json()["title"] == "Dia do Trabalho"

    assert client.delete(f"/api/calendar/events/{event['id']}", headers=headers).status_code == 200
    assert client.delete(f"/api/calendar/events/{event['id']}", headers=headers).status_code == 404


def test_reset_requires_exact_phrase(client, login_as):
    headers = login_as("admin")
    client.post("/api/calendar/events", json={"date": "2024-06-01", "title": "Festa Junina"}, headers=headers)

    refused = client.post("/api/calendar/reset", json={"confirmation_phrase": "apagar"}, headers=headers)
    assert refused.status_code == 400

    reset = client.post(
        "/api/calendar/reset",
        json={"confirmation_phrase": RESET_CONFIRMATION_PHRASE},
        headers=headers,
    )
    assert reset.json() == {"success": True, "removed": 1}
    remaining = client.get("/api/calendar/events", params={"include_system": False}, headers=headers)
    assert remaining.json() == []


def test_teacher_cannot_create_events(client, login_as):
    headers = login_as("teacher")

    response = client.post("/api/calendar/events", json={"date": "2024-06-01", "title": "Prova"}, headers=headers)

    assert response.status_code == 403
