import pytest
from fastapi.testclient import TestClient
from pydantic import ValidationError

from coupon_site.core.config import Settings


def test_health(client: TestClient):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["database"] == "healthy"


def test_correlation_id_is_echoed(client: TestClient):
    response = client.get("/api/coupons", headers={"X-Correlation-ID": "abc-123"})

    assert response.headers["X-Correlation-ID"] == "abc-123"
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_robots_txt(client: TestClient):
    response = client.get("/robots.txt")

    assert response.status_code == 200
    assert "User-agent" in response.text


def test_sitemap_missing_public_dir(settings: Settings, database, tmp_path):
    from coupon_site.main import create_app

    app = create_app(
        settings=settings.model_copy(update={"PUBLIC_DIR": str(tmp_path)}),
        database=database,
    )
    with TestClient(app) as client:
        response = client.get("/sitemap.xml")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_unknown_route_uses_error_body(client: TestClient):
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert "error" in response.json()


def test_production_requires_strong_secret():
    with pytest.raises(ValidationError):
        Settings(
            DATABASE_URL="sqlite://",
            JWT_SECRET="short",
            ENVIRONMENT="Production",
        )


def test_unexpected_error_keeps_response_headers(settings: Settings, database):
    from coupon_site.main import create_app

    app = create_app(settings=settings, database=database)

    @app.get("/boom")
    def boom():
        raise RuntimeError("internal detail")

    with TestClient(app) as client:
        response = client.get("/boom", headers={"X-Correlation-ID": "err-1"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert "internal detail" not in response.text
    assert response.headers["X-Correlation-ID"] == "err-1"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert "X-Process-Time" in response.headers
