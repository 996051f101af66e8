"""API tests for the /api/customers endpoints."""

import pytest
from fastapi.testclient import TestClient

from customer_update.api.dependencies import get_external_validator
from customer_update.services.external_validator import (
    ExternalValidationResult,
    ExternalValidator,
    SimulatedLegacyValidator,
)


class ExplodingValidator(ExternalValidator):
    name = "exploding"

    def validate(self, *, name, phone, email, address, tax_id) -> ExternalValidationResult:
        raise RuntimeError("ODBC driver crashed: secret-host:446")


def _create(client: TestClient, body: dict) -> dict:
    response = client.post("/api/customers", json=body)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestListAndGet:
    def test_list_empty(self, client) -> None:
        response = client.get("/api/customers")
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Customers retrieved successfully",
            "data": [],
        }

    def test_list_returns_created_customers(self, client, customer_data) -> None:
        _create(client, customer_data(name="Bob Builder", taxId="10000000001"))
        _create(client, customer_data(name="Alice Smith", taxId="10000000002"))
        data = client.get("/api/customers").json()["data"]
        assert [c["name"] for c in data] == ["Alice Smith", "Bob Builder"]

    def test_get_existing(self, client, customer_data) -> None:
        created = _create(client, customer_data())
        response = client.get(f"/api/customers/{created['id']}")
        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_missing(self, client) -> None:
        response = client.get("/api/customers/4242")
        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "message": "Customer not found",
            "error": "Customer with ID 4242 does not exist",
        }

    def test_get_id_beyond_integer_range(self, client) -> None:
        response = client.get("/api/customers/99999999999999999999")
        assert response.status_code == 404
        assert response.json()["error"] == "Customer with ID 99999999999999999999 does not exist"

    def test_get_non_integer_id(self, client) -> None:
        response = client.get("/api/customers/abc")
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Validation failed"
        assert body["errors"]


class TestCreate:
    def test_create_success(self, client, customer_data) -> None:
        response = client.post("/api/customers", json=customer_data(taxId="12345678901"))
        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Customer created successfully"

        data = body["data"]
        assert isinstance(data["id"], int)
        assert data["taxId"] == "12345678901"
        assert data["status"] == "Active"
        assert data["createdAt"] == data["updatedAt"]
        assert set(data) == {
            "id", "name", "phone", "email", "address", "taxId", "createdAt", "updatedAt", "status",
        }
        assert response.headers["location"].endswith(f"/api/customers/{data['id']}")

    def test_create_without_optional_fields(self, client, customer_data) -> None:
        body = customer_data()
        del body["phone"]
        del body["email"]
        data = _create(client, body)
        assert data["phone"] is None
        assert data["email"] is None

    def test_create_validation_errors(self, client, customer_data) -> None:
        response = client.post(
            "/api/customers", json=customer_data(name="A", taxId="1234567890")
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Validation failed",
            "errors": [
                "Name must be between 2 and 100 characters",
                "Tax ID must be exactly 11 characters",
            ],
        }
        assert client.get("/api/customers").json()["data"] == []

    def test_create_with_missing_body(self, client) -> None:
        response = client.post("/api/customers")
        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_create_with_empty_object_lists_required_fields(self, client) -> None:
        response = client.post("/api/customers", json={})
        assert response.status_code == 400
        assert response.json()["errors"] == [
            "Name is required",
            "Address is required",
            "Tax ID is required",
        ]

    def test_create_external_validation_failure(self, app, client, customer_data) -> None:
        app.dependency_overrides[get_external_validator] = lambda: SimulatedLegacyValidator()
        response = client.post("/api/customers", json=customer_data(taxId="98765432109"))
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "External validation failed",
            "error": "VALIDATION_ERROR: Tax ID already exists in database.",
            "errors": ["Tax ID already exists in database"],
        }
        assert client.get("/api/customers").json()["data"] == []

    def test_second_create_with_same_tax_id_conflicts_in_store(self, client, customer_data) -> None:
        _create(client, customer_data())
        response = client.post("/api/customers", json=customer_data(name="Copy Cat"))
        assert response.status_code == 400
        assert response.json()["message"] == "Tax ID already exists"
        assert len(client.get("/api/customers").json()["data"]) == 1

    def test_external_validator_fault_is_generic_500(self, app, client, customer_data) -> None:
        app.dependency_overrides[get_external_validator] = lambda: ExplodingValidator()
        response = client.post("/api/customers", json=customer_data())
        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "An unexpected error occurred"}
        assert "secret-host" not in response.text


class TestUpdate:
    def test_update_success(self, client, customer_data) -> None:
        created = _create(client, customer_data())
        response = client.put(
            f"/api/customers/{created['id']}",
            json=customer_data(name="Ada King", email="", taxId="12345678901"),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Customer updated successfully"
        data = body["data"]
        assert data["name"] == "Ada King"
        assert data["email"] is None
        assert data["createdAt"] == created["createdAt"]
        assert data["updatedAt"] >= created["updatedAt"]

    def test_update_missing(self, client, customer_data) -> None:
        response = client.put("/api/customers/999", json=customer_data())
        assert response.status_code == 404
        assert response.json()["error"] == "Customer with ID 999 does not exist"
        assert client.get("/api/customers").json()["data"] == []

    def test_update_invalid_payload(self, client, customer_data) -> None:
        created = _create(client, customer_data())
        response = client.put(f"/api/customers/{created['id']}", json=customer_data(email="bad"))
        assert response.status_code == 400
        assert response.json()["errors"] == ["Email must be a valid email address"]

    def test_update_to_taken_tax_id(self, client, customer_data) -> None:
        first = _create(client, customer_data(taxId="11111111111"))
        second = _create(client, customer_data(taxId="22222222222"))

        response = client.put(
            f"/api/customers/{first['id']}", json=customer_data(taxId="22222222222")
        )
        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Tax ID already exists",
            "error": "A customer with this Tax ID already exists in the system",
        }
        assert client.get(f"/api/customers/{first['id']}").json()["data"] == first
        assert client.get(f"/api/customers/{second['id']}").json()["data"] == second


    def test_update_id_beyond_integer_range(self, client, customer_data) -> None:
        response = client.put("/api/customers/99999999999999999999", json=customer_data())
        assert response.status_code == 404
        assert response.json()["error"] == "Customer with ID 99999999999999999999 does not exist"
        assert client.get("/api/customers").json()["data"] == []

class TestDelete:
    def test_delete_twice(self, client, customer_data) -> None:
        created = _create(client, customer_data())

        first = client.delete(f"/api/customers/{created['id']}")
        assert first.status_code == 200
        assert first.json() == {"success": True, "message": "Customer deleted successfully"}

        second = client.delete(f"/api/customers/{created['id']}")
        assert second.status_code == 404
        assert second.json()["success"] is False


    @pytest.mark.parametrize("customer_id", ["0", "-1", "99999999999999999999"])
    def test_delete_id_outside_range(self, client, customer_id: str) -> None:
        response = client.delete(f"/api/customers/{customer_id}")
        assert response.status_code == 404
        assert response.json()["error"] == f"Customer with ID {customer_id} does not exist"

class TestValidateTaxId:
    def test_available(self, client) -> None:
        response = client.get("/api/customers/validate-tax-id/55555555555")
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "message": "Tax ID is available",
            "data": {"isValid": True, "exists": False},
        }

    def test_available_but_malformed(self, client) -> None:
        response = client.get("/api/customers/validate-tax-id/12AB")
        assert response.status_code == 200
        assert response.json()["data"] == {"isValid": False, "exists": False}

    def test_taken(self, client, customer_data) -> None:
        _create(client, customer_data(taxId="12345678901"))
        response = client.get("/api/customers/validate-tax-id/12345678901")
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"].endswith("already exists in the system")
