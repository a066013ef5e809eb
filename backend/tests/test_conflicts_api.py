import pytest


@pytest.fixture()
def seeded(builder):
    room = builder.room("RM-101", capacity=40)
    existing = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", room=room, year_level=3)
    other_subject = builder.subject("ITS 310")
    link = builder.curriculum_subject(other_subject, 3, "2nd")
    return {
        "academic_year_id": builder.academic_year.id,
        "room_id": room.id,
        "existing_id": existing.id,
        "existing_subject_id": existing.subject_id,
        "subject_id": other_subject.id,
        "curriculum_subject_id": link.id,
    }


def probe(seeded, **overrides):
    payload = {
        "academic_year_id": seeded["academic_year_id"],
        "semester": "2nd",
        "subject_id": seeded["subject_id"],
        "room_id": seeded["room_id"],
        "curriculum_subject_id": seeded["curriculum_subject_id"],
        "section": "A",
        "day_pattern": "M-T-TH-F",
        "start_time": "08:00",
        "end_time": "09:00",
        "enrolled_students": 30,
    }
    payload.update(overrides)
    return payload


def test_check_reports_room_and_block_conflicts(client, seeded):
    response = client.post("/api/conflicts/check", json=probe(seeded))

    assert response.status_code == 200
    body = response.json()
    assert body["has_conflicts"] is True
    assert body["blocking"] is True
    assert {item["conflict_type"] for item in body["conflicts"]} == {
        "room_time_conflict",
        "block_sectioning_conflict",
    }
    assert all(item["schedule_id"] == seeded["existing_id"] for item in body["conflicts"])
    assert {item["days"] for item in body["conflicts"]} == {"Tuesday-Thursday"}
    assert body["summary"].startswith("2 conflict(s) detected:")
    assert body["warnings"] == []


def test_check_clear_slot_with_capacity_warning(client, seeded):
    response = client.post(
        "/api/conflicts/check",
        json=probe(seeded, day_pattern="m-w-f", enrolled_students=50),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["has_conflicts"] is False
    assert body["blocking"] is False
    assert body["conflicts"] == []
    assert body["warnings"] == ["Enrolled students (50) exceeds room capacity (40)."]
    assert body["summary"] == "No conflicts detected."


def test_check_reports_duplicate_subject_section(client, seeded):
    response = client.post(
        "/api/conflicts/check",
        json=probe(seeded, subject_id=seeded["existing_subject_id"], section=" a", day_pattern="SAT"),
    )

    assert response.status_code == 200
    types = [item["conflict_type"] for item in response.json()["conflicts"]]
    assert types == ["duplicate_subject_section"]


def test_check_editing_existing_schedule_excludes_itself(client, seeded):
    response = client.post(
        "/api/conflicts/check",
        json=probe(
            seeded,
            schedule_id=seeded["existing_id"],
            subject_id=seeded["existing_subject_id"],
            day_pattern="T-TH",
            start_time="07:30",
            end_time="09:00",
        ),
    )

    assert response.status_code == 200
    assert response.json()["conflicts"] == []


def test_check_rejects_invalid_time_range(client, seeded):
    response = client.post("/api/conflicts/check", json=probe(seeded, start_time="09:00", end_time="08:00"))

    assert response.status_code == 422
    assert response.json()["details"]["errors"] == ["End time must be after start time."]


def test_check_rejects_non_canonical_day_pattern(client, seeded):
    response = client.post("/api/conflicts/check", json=probe(seeded, day_pattern="MWF"))

    assert response.status_code == 422


def test_check_unknown_room_is_not_found(client, seeded):
    response = client.post("/api/conflicts/check", json=probe(seeded, room_id="missing-room"))

    assert response.status_code == 404
    assert response.json()["message"] == "Room with id missing-room not found"


def test_stored_schedule_check(client, seeded):
    response = client.get(f"/api/conflicts/schedules/{seeded['existing_id']}")

    assert response.status_code == 200
    assert response.json()["conflicts"] == []

    missing = client.get("/api/conflicts/schedules/does-not-exist")
    assert missing.status_code == 404


def test_scan_and_refresh_endpoints(client, builder):
    builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", year_level=3)
    builder.schedule("ITS 310", "A", "M-T-TH-F", "07:00", "08:30", year_level=3)

    scan = client.get("/api/conflicts/scan", params={"semester": "2nd"})
    assert scan.status_code == 200
    body = scan.json()
    assert body["total_scanned"] == 2
    assert body["conflict_count"] == 2
    assert [group["label"] for group in body["groups"]] == ["Year 3 - Section A"]
    assert len(body["groups"][0]["findings"]) == 2

    refresh = client.post("/api/conflicts/refresh")
    assert refresh.status_code == 200
    assert refresh.json() == {"total_scanned": 2, "conflicts_found": 2, "schedules_updated": 2}


def test_conflicted_schedule_details(client, builder):
    first = builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", year_level=3)
    second = builder.schedule("ITS 310", "A", "M-T-TH-F", "07:00", "08:30", year_level=3)
    builder.schedule("ITS 312", "B", "SAT", "07:00", "08:30", year_level=3)

    response = client.get("/api/conflicts/details", params={"semester": "2nd"})

    assert response.status_code == 200
    body = response.json()
    assert {item["schedule_id"] for item in body} == {first.id, second.id}
    by_id = {item["schedule_id"]: item for item in body}
    assert by_id[first.id]["days"] == "Tuesday-Thursday"
    assert by_id[first.id]["conflict_count"] == 1
    assert by_id[first.id]["conflicts"][0]["schedule_id"] == second.id
    assert by_id[first.id]["conflicts"][0]["conflict_type"] == "block_sectioning_conflict"


def test_conflicted_schedule_details_filter_by_type(client, builder):
    builder.schedule("ITS 308", "A", "T-TH", "07:00", "08:30", year_level=3)
    builder.schedule("ITS 310", "A", "M-T-TH-F", "07:00", "08:30", year_level=3)

    legacy_name = client.get("/api/conflicts/details", params={"conflict_type": "section_conflict"})
    assert legacy_name.status_code == 200
    assert len(legacy_name.json()) == 2

    rooms_only = client.get("/api/conflicts/details", params={"conflict_type": "room_time_conflict"})
    assert rooms_only.status_code == 200
    assert rooms_only.json() == []

    unknown = client.get("/api/conflicts/details", params={"conflict_type": "capacity"})
    assert unknown.status_code == 422


def test_health_endpoints(client):
    live = client.get("/api/health/live")
    assert live.status_code == 200
    assert live.json()["status"] == "ok"

    ready = client.get("/api/health/ready")
    assert ready.status_code == 200
    payload = ready.json()
    assert payload["database"]["schema_ok"] is True
