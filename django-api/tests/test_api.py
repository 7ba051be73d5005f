"""Integration tests for the HTTP handlers.

Run with: pytest tests/test_api.py -v
"""

from unittest import mock

import pytest
from rest_framework.test import APIClient

from attendance import models as orm
from attendance.stores.django_store import DjangoVenueStore


def _create_venue(api_client: APIClient, name: str) -> dict:
    response = api_client.post("/api/venues", {"name": name}, format="json")
    assert response.status_code == 201
    return response.json()["data"]


@pytest.mark.django_db
class TestVenueEndpoints:
    """Tests for /api/venues"""

    def test_create_and_list(self, api_client: APIClient):
        _create_venue(api_client, "Red Pub")
        _create_venue(api_client, "Blue Bar")

        response = api_client.get("/api/venues")

        assert response.status_code == 200
        assert [v["name"] for v in response.json()["data"]] == ["Blue Bar", "Red Pub"]

    def test_create_validation_error(self, api_client: APIClient):
        response = api_client.post("/api/venues", {"name": "x"}, format="json")
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION"
        assert "Minimum 2" in response.json()["message"]

    def test_create_missing_field(self, api_client: APIClient):
        response = api_client.post("/api/venues", {}, format="json")
        assert response.status_code == 400
        assert "name" in response.json()["errors"]

    def test_duplicate_is_conflict(self, api_client: APIClient):
        _create_venue(api_client, "Blue Bar")
        response = api_client.post("/api/venues", {"name": "BLUE BAR"}, format="json")
        assert response.status_code == 409
        assert response.json()["code"] == "DUPLICATE"

    def test_accent_variant_is_conflict(self, api_client: APIClient):
        _create_venue(api_client, "Salão Principal")
        response = api_client.post("/api/venues", {"name": "SALAO PRINCIPAL"}, format="json")
        assert response.status_code == 409

    def test_search(self, api_client: APIClient):
        for name in ["Blue Bar", "Bar Central", "Red Pub"]:
            _create_venue(api_client, name)
        response = api_client.get("/api/venues", {"q": "bar", "mode": "prefix", "max": "5"})
        assert [v["name"] for v in response.json()["data"]] == ["Bar Central"]

    def test_rename_not_found(self, api_client: APIClient):
        response = api_client.patch("/api/venues/999", {"name": "Green Room"}, format="json")
        assert response.status_code == 404
        assert response.json() == {"code": "NOT_FOUND", "message": "Venue not found"}

    def test_batch_delete_partial(self, api_client: APIClient):
        used = _create_venue(api_client, "Blue Bar")
        unused = _create_venue(api_client, "Red Pub")
        api_client.post(
            "/api/events",
            {"venue_id": used["id"], "date": "2025-07-01", "name": "Night"},
            format="json",
        )

        response = api_client.post("/api/venues/delete", {"ids": [used["id"], unused["id"]]}, format="json")

        body = response.json()
        assert response.status_code == 200
        assert body["data"]["kind"] == "PARTIAL"
        assert body["data"]["deleted"] == [unused["id"]]
        assert body["data"]["blocked"] == [used["id"]]

    def test_storage_failure_is_service_unavailable(self, api_client: APIClient):
        with mock.patch.object(DjangoVenueStore, "list_all", side_effect=RuntimeError("db down")):
            response = api_client.get("/api/venues")
        assert response.status_code == 503
        assert response.json()["code"] == "STORAGE_FAILURE"


@pytest.mark.django_db
class TestEventEndpoints:
    """Tests for /api/events"""

    def test_no_active_event(self, api_client: APIClient):
        response = api_client.get("/api/events/active")
        assert response.status_code == 204

    def test_create_and_activate(self, api_client: APIClient):
        venue = _create_venue(api_client, "Blue Bar")
        created = api_client.post(
            "/api/events",
            {"venue_id": venue["id"], "date": "2025-07-01", "name": "Night"},
            format="json",
        ).json()["data"]

        response = api_client.post(f"/api/events/{created['id']}/activate")

        assert response.status_code == 200
        assert response.json()["data"]["is_active"] is True
        active = api_client.get("/api/events/active").json()["data"]
        assert active["id"] == created["id"]
        assert active["venue"]["name"] == "Blue Bar"

    def test_activate_unknown_event(self, api_client: APIClient):
        response = api_client.post("/api/events/999/activate")
        assert response.status_code == 404


@pytest.mark.django_db
class TestQueueEndpoints:
    """Tests for /api/people and /api/participations"""

    def test_register_person_twice(self, api_client: APIClient):
        payload = {"full_name": "Maria José Silva", "birthday": "22/07"}
        first = api_client.post("/api/people", payload, format="json").json()["data"]
        second = api_client.post("/api/people", {"full_name": "MARIA JOSE SILVA"}, format="json").json()["data"]

        assert first["id"] == second["id"]
        assert first["display_identifier"] == "(22/07)"
        assert first["display_name"] == "Maria José Silva (22/07)"

    def test_register_person_invalid_birthday(self, api_client: APIClient):
        response = api_client.post(
            "/api/people", {"full_name": "Ana Lima", "birthday": "31/04"}, format="json"
        )
        assert response.status_code == 400
        assert orm.Person.objects.count() == 0

    def test_search_people(self, api_client: APIClient):
        api_client.post("/api/people", {"full_name": "José Silva"}, format="json")
        response = api_client.get("/api/people", {"q": "jose", "mode": "prefix"})
        assert [p["full_name"] for p in response.json()["data"]] == ["José Silva"]

    def test_record_participation_provisions_event(self, api_client: APIClient):
        person = api_client.post("/api/people", {"full_name": "Ana Lima"}, format="json").json()["data"]

        response = api_client.post(
            "/api/participations", {"person_id": person["id"], "status": "PRESENT"}, format="json"
        )

        assert response.status_code == 201
        assert response.json()["data"]["status"] == "PRESENT"
        assert api_client.get("/api/events/active").status_code == 200

    def test_record_participation_bad_input(self, api_client: APIClient):
        response = api_client.post(
            "/api/participations", {"person_id": 1, "status": "LATE"}, format="json"
        )
        assert response.status_code == 400

    def test_record_participation_invalid_person(self, api_client: APIClient):
        response = api_client.post(
            "/api/participations", {"person_id": 0, "status": "ABSENT"}, format="json"
        )
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ARGUMENT"
