"""
Integration tests for the Case API routes.
The app runs in-process against an in-memory store.
"""
import pytest

from tests.examples.case_loader import case_examples


def add_cases(api_client, payload, headers=None):
    return api_client.post("/api/cases", json=payload, headers=headers or {})


def test_health_reports_store_backend(api_client):
    response = api_client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "case-api"
    assert data["store_backend"] == "memory"


def test_example_scenario(api_client):
    """Insert, list, patch and assign a link to one case."""
    payload = {"id": 1, "title": "X", "status": "Offen", "contacts": []}

    response = add_cases(api_client, payload)
    assert response.status_code == 200
    assert response.json() == {"ok": True, "count": 1}

    cases = api_client.get("/api/cases").json()["cases"]
    assert len(cases) == 1
    assert cases[0]["id"] == 1
    assert cases[0]["title"] == "X"

    response = api_client.patch("/api/cases/1", json={"status": "Closed"})
    assert response.status_code == 200
    patched = response.json()["case"]
    assert patched["status"] == "Closed"
    assert patched["title"] == "X"
    assert patched["contacts"] == []

    response = api_client.post("/api/caselink", json={"caseId": "1", "link": "https://x/y"})
    assert response.status_code == 200
    assert response.json()["message"] == "Case link updated successfully."
    assert response.json()["case"]["confirm_url"] == "https://x/y"

    response = api_client.get("/api/caselink", params={"caseId": 1})
    assert response.status_code == 200
    assert response.json() == {"id": 1, "confirm_url": "https://x/y"}


class TestBulkInsert:
    def test_accepts_array(self, api_client):
        response = add_cases(api_client, case_examples.create_multiple_cases(3))

        assert response.json() == {"ok": True, "count": 3}
        assert len(api_client.get("/api/cases").json()["cases"]) == 3

    def test_invalid_json(self, api_client):
        response = api_client.post(
            "/api/cases", content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_json"}

    def test_array_of_non_objects(self, api_client):
        response = add_cases(api_client, [1, 2])

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_json"}

    def test_case_without_id_stores_nothing(self, api_client, memory_repository):
        response = add_cases(api_client, [case_examples.create_case_with_id(1), {"title": "no id"}])

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_case"}
        assert memory_repository.list() == []

    @pytest.mark.parametrize("headers", [{}, {"x-cases-token": "wrong"}])
    def test_requires_shared_secret_when_configured(self, api_client, memory_repository, monkeypatch, headers):
        monkeypatch.setenv("CASES_TOKEN", "s3cret")

        response = add_cases(api_client, case_examples.create_case_with_id(1), headers)

        assert response.status_code == 401
        assert response.json() == {"error": "unauthorized"}
        assert memory_repository.list() == []

    def test_correct_shared_secret(self, api_client, monkeypatch):
        monkeypatch.setenv("CASES_TOKEN", "s3cret")

        response = add_cases(api_client, case_examples.create_case_with_id(1), {"x-cases-token": "s3cret"})

        assert response.status_code == 200


class TestPatch:
    @pytest.fixture(autouse=True)
    def seeded(self, api_client):
        add_cases(api_client, case_examples.create_multiple_cases(2))

    def test_invalid_id(self, api_client):
        response = api_client.patch("/api/cases/abc", json={"status": "Closed"})

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_id"}

    def test_invalid_json(self, api_client):
        response = api_client.patch(
            "/api/cases/1", content=b"nope", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json() == {"error": "invalid_json"}

    def test_not_found(self, api_client):
        response = api_client.patch("/api/cases/99", json={"status": "Closed"})

        assert response.status_code == 404
        assert response.json() == {"error": "not_found"}

    def test_requires_shared_secret(self, api_client, monkeypatch):
        monkeypatch.setenv("CASES_TOKEN", "s3cret")

        response = api_client.patch("/api/cases/1", json={"status": "Closed"})

        assert response.status_code == 401

    def test_contacts_cannot_be_replaced(self, api_client):
        response = api_client.patch("/api/cases/1", json={"contacts": [], "status": "Closed"})

        case = response.json()["case"]
        assert case["status"] == "Closed"
        assert len(case["contacts"]) == 3


class TestCaseLink:
    @pytest.fixture(autouse=True)
    def seeded(self, api_client):
        add_cases(api_client, case_examples.create_case_with_id(1))

    def test_unassigned_link_is_empty(self, api_client):
        response = api_client.get("/api/caselink", params={"caseId": "1"})

        assert response.json() == {"id": 1, "confirm_url": ""}

    def test_missing_case_id(self, api_client):
        response = api_client.get("/api/caselink")

        assert response.status_code == 400
        assert "Missing caseId" in response.json()["error"]

    @pytest.mark.parametrize("case_id", ["99", "abc"])
    def test_unknown_case(self, api_client, case_id):
        response = api_client.get("/api/caselink", params={"caseId": case_id})

        assert response.status_code == 404

    @pytest.mark.parametrize("body", [{"caseId": "1"}, {"link": "https://x/y"}, {"caseId": "1", "link": ""}])
    def test_assign_missing_fields(self, api_client, body):
        response = api_client.post("/api/caselink", json=body)

        assert response.status_code == 400

    def test_assign_unknown_case(self, api_client):
        response = api_client.post("/api/caselink", json={"caseId": "42", "link": "https://x/y"})

        assert response.status_code == 404
        assert response.json()["error"] == "Case with ID 42 not found in store."

    def test_assign_malformed_body_is_server_error(self, api_client):
        response = api_client.post(
            "/api/caselink", content=b"{broken", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error"}

    def test_assign_does_not_require_shared_secret(self, api_client, monkeypatch):
        monkeypatch.setenv("CASES_TOKEN", "s3cret")

        response = api_client.post("/api/caselink", json={"caseId": 1, "link": "https://x/y"})

        assert response.status_code == 200
