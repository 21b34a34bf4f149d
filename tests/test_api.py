"""HTTP tests for the walkbook API routers."""

from sqlmodel import Session

from walkbook.services import SlotBooked, SlotCancelled


SLOT = {
    "date": "2025-04-21",
    "time": "1400",
    "name": "TestUser",
    "phone": "+19876543210",
    "notes": "Test booking",
}


def _cancel(client, body):
    return client.request("DELETE", "/api/slot", json=body)


class TestSystem:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"ok": True}


class TestSchedule:
    def test_default_week_has_seven_days(self, client):
        response = client.get("/api/schedule")
        assert response.status_code == 200
        assert len(response.json()) == 7

    def test_week_for_start_date(self, client):
        client.post("/api/slot", json=SLOT)

        response = client.get("/api/schedule", params={"start": "2025-04-20"})
        body = response.json()
        assert list(body)[0] == "2025-04-20"
        assert len(body) == 7
        assert [slot["name"] for slot in body["2025-04-21"]] == ["TestUser"]
        assert body["2025-04-20"] == []

    def test_invalid_start_is_rejected(self, client):
        response = client.get("/api/schedule", params={"start": "20-04-2025"})
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_available_times(self, client):
        client.post("/api/slot", json=SLOT)
        response = client.get("/api/schedule/available", params={"date": "2025-04-21"})
        values = [entry["value"] for entry in response.json()]
        assert "1400" not in values
        assert "1430" in values


class TestBookSlot:
    def test_creates_slot(self, client, notifier):
        response = client.post("/api/slot", json=SLOT)

        assert response.status_code == 201
        body = response.json()
        assert body["date"] == SLOT["date"]
        assert body["time"] == SLOT["time"]
        assert body["name"] == SLOT["name"]
        assert body["contact"] == SLOT["phone"]
        assert body["note"] == SLOT["notes"]
        assert isinstance(body["createdAt"], int)
        assert [type(event) for event in notifier.events] == [SlotBooked]

    def test_missing_time_is_bad_request(self, client):
        response = client.post("/api/slot", json={"date": "2025-04-21", "name": "TestUser"})
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"
        assert "error" in response.json()

    def test_non_object_body_is_bad_request(self, client):
        response = client.post("/api/slot", json=["2025-04-21", "1400"])
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_duplicate_is_conflict(self, client, notifier):
        client.post("/api/slot", json=SLOT)
        response = client.post("/api/slot", json={**SLOT, "name": "TestUser2"})

        assert response.status_code == 409
        assert response.json()["code"] == "slot_taken"
        assert len(notifier.events) == 1

    def test_get_slot(self, client):
        client.post("/api/slot", json=SLOT)
        response = client.get("/api/slot", params={"date": "2025-04-21", "time": "1400"})
        assert response.status_code == 200
        assert response.json()["name"] == "TestUser"

    def test_get_missing_slot(self, client):
        response = client.get("/api/slot", params={"date": "2025-04-21", "time": "1500"})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


class TestCancelSlot:
    def test_owner_deletes_slot(self, client, notifier):
        client.post("/api/slot", json=SLOT)

        response = _cancel(client, {"date": SLOT["date"], "time": SLOT["time"], "name": "TestUser"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        week = client.get("/api/schedule", params={"start": SLOT["date"]}).json()
        assert week[SLOT["date"]] == []
        assert isinstance(notifier.events[-1], SlotCancelled)

    def test_missing_slot_is_not_found(self, client):
        response = _cancel(client, {"date": "2025-04-21", "time": "1700", "name": "Nobody"})
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_other_walker_is_forbidden(self, client):
        client.post("/api/slot", json=SLOT)

        response = _cancel(client, {"date": SLOT["date"], "time": SLOT["time"], "name": "DifferentUser"})
        assert response.status_code == 403
        assert response.json()["code"] == "forbidden"
        assert "TestUser" not in response.json()["error"]

        still_there = client.get("/api/slot", params={"date": SLOT["date"], "time": SLOT["time"]})
        assert still_there.status_code == 200


class TestWalkers:
    def test_color_is_consistent(self, client):
        first = client.get("/api/walker-color/TestWalker")
        second = client.get("/api/walker-color/TestWalker")
        assert first.status_code == 200
        assert first.json() == {"colorIndex": 0}
        assert second.json() == first.json()

    def test_blank_name_color_is_bad_request(self, client):
        response = client.get("/api/walker-color/%20%20")
        assert response.status_code == 400

    def test_search(self, client):
        for name in ("SearchTest1", "SearchTest2", "DifferentName"):
            client.post("/api/walkers/update", json={"name": name})

        response = client.get("/api/walkers/search", params={"q": "Search"})
        assert response.status_code == 200
        assert [walker["name"] for walker in response.json()] == ["SearchTest1", "SearchTest2"]

        assert client.get("/api/walkers/search", params={"q": "NonExistentName"}).json() == []
        assert len(client.get("/api/walkers").json()) == 3

    def test_update_keeps_color(self, client):
        created = client.post("/api/walkers/update", json={"name": "UpdateTest", "phone": "+19876543210"})
        assert created.status_code == 200
        assert created.json() == {"name": "UpdateTest", "colorIndex": 0, "contact": "+19876543210"}

        updated = client.post("/api/walkers/update", json={"name": "UpdateTest", "contact": "+18765432109"})
        assert updated.json()["contact"] == "+18765432109"
        assert updated.json()["colorIndex"] == created.json()["colorIndex"]

    def test_update_requires_name(self, client):
        response = client.post("/api/walkers/update", json={"phone": "+19876543210"})
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

    def test_get_walker(self, client):
        client.post("/api/slot", json=SLOT)
        assert client.get("/api/walkers/TestUser").json()["contact"] == SLOT["phone"]
        assert client.get("/api/walkers/Nobody").status_code == 404


class TestLeaderboard:
    def test_all_time(self, client):
        for date, name in (("2025-04-20", "Alice"), ("2025-04-21", "Alice"), ("2025-04-22", "Bob")):
            client.post("/api/slot", json={"date": date, "time": "1200", "name": name})

        response = client.get("/api/leaderboard/all-time")
        assert response.status_code == 200
        assert response.json() == [
            {"name": "Alice", "totalWalks": 2, "colorIndex": 0},
            {"name": "Bob", "totalWalks": 1, "colorIndex": 1},
        ]

    def test_next_week_window(self, client):
        client.post("/api/slot", json={"date": "2025-04-20", "time": "1200", "name": "Alice"})
        client.post("/api/slot", json={"date": "2025-04-28", "time": "1200", "name": "Bob"})

        response = client.get("/api/leaderboard/next-week", params={"start": "2025-04-21"})
        assert response.status_code == 200
        assert [entry["name"] for entry in response.json()] == ["Bob"]

    def test_next_week_default_start(self, client):
        response = client.get("/api/leaderboard/next-week")
        assert response.status_code == 200
        assert response.json() == []


def test_store_outage_is_service_unavailable(client, tmp_path):
    from walkbook.app import app
    from walkbook.core import get_session
    from walkbook.core.database import make_engine

    broken = make_engine(f"sqlite:///{tmp_path / 'missing' / 'walkbook.db'}")

    def _broken_session():
        with Session(broken) as session:
            yield session

    app.dependency_overrides[get_session] = _broken_session
    response = client.get("/api/leaderboard/all-time")
    assert response.status_code == 503
    assert response.json()["code"] == "store_unavailable"
