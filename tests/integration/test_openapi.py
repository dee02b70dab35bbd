"""
Integration tests for OpenAPI documentation.

Verifies OpenAPI schema is correctly generated for all endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from src.api.main import app


@pytest.fixture
def client() -> TestClient:
    """Create test client for the application (schema only, no lifespan)."""
    return TestClient(app)


@pytest.fixture
def schema(client: TestClient) -> dict:
    response = client.get("/openapi.json")
    assert response.status_code == 200
    return response.json()


class TestOpenAPISchema:
    """Tests for OpenAPI schema generation."""

    def test_openapi_schema_sections(self, schema: dict) -> None:
        assert "openapi" in schema
        assert "info" in schema
        assert "paths" in schema

    def test_openapi_title_and_version(self, schema: dict) -> None:
        assert schema["info"]["title"] == "authsvc"
        assert "verification" in schema["info"]["description"]
        assert schema["info"]["version"] == "0.1.0"

    @pytest.mark.parametrize(
        ("path", "method"),
        [
            ("/v1/register", "post"),
            ("/v1/login", "post"),
            ("/v1/verify", "get"),
            ("/v1/resend-verification", "post"),
            ("/v1/me", "get"),
        ],
    )
    def test_endpoint_documented_and_tagged(self, schema: dict, path: str, method: str) -> None:
        assert path in schema["paths"]
        operation = schema["paths"][path][method]
        assert operation["summary"]
        assert "v1" in operation.get("tags", [])

    def test_register_summary(self, schema: dict) -> None:
        assert schema["paths"]["/v1/register"]["post"]["summary"] == "Register a new user"

    def test_verify_takes_token_query_parameter(self, schema: dict) -> None:
        params = schema["paths"]["/v1/verify"]["get"]["parameters"]
        assert {"name": "token", "in": "query"}.items() <= params[0].items()

    def test_register_request_schema(self, schema: dict) -> None:
        props = schema["components"]["schemas"]["RegisterRequest"]["properties"]
        assert "email" in props
        assert "password" in props

    def test_login_response_schema(self, schema: dict) -> None:
        props = schema["components"]["schemas"]["LoginResponse"]["properties"]
        assert "token" in props
        assert "token_type" in props

    def test_bearer_security_scheme(self, schema: dict) -> None:
        schemes = schema["components"]["securitySchemes"]
        assert any(s.get("scheme", "").lower() == "bearer" for s in schemes.values())

    def test_v1_tag_in_schema(self, schema: dict) -> None:
        assert "v1" in [t["name"] for t in schema.get("tags", [])]


class TestSwaggerUI:
    """Tests for Swagger UI availability."""

    def test_docs_endpoint_accessible(self, client: TestClient) -> None:
        response = client.get("/docs")
        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "swagger" in response.text.lower()

    def test_redoc_endpoint_accessible(self, client: TestClient) -> None:
        response = client.get("/redoc")
        assert response.status_code == 200
        assert "redoc" in response.text.lower()
