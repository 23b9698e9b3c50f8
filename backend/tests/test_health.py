from sqlalchemy.exc import OperationalError

from tripplanner.main import create_app
from tripplanner.models import City
from conftest import make_settings

from fastapi.testclient import TestClient


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["health"] == "/healthz"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "X-Request-ID" in response.headers
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_healthz_checks_database(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["checks"]["database"]["status"] == "healthy"


def test_healthz_reports_unreachable_database(client, app, monkeypatch):
    class BrokenSession:
        def execute(self, *args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("database is locked"))

        def close(self):
            pass

    monkeypatch.setattr(app.state, "session_factory", BrokenSession)
    response = client.get("/healthz")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_seed_endpoint_repopulates_reference_data(client, db, admin):
    client.post("/cities", json={"name": "Lisbon", "country": "Portugal"}, headers={"Authorization": f"Bearer {admin['token']}"})

    response = client.post("/seed")
    assert response.status_code == 200
    assert response.json() == {"message": "Database seeded successfully", "cities": 6, "activities": 6}
    assert db.query(City).filter(City.name == "Lisbon").count() == 0


def test_seed_endpoint_absent_outside_development():
    app = create_app(make_settings(environment="production", enable_seed_endpoint=None))
    with TestClient(app) as client:
        assert client.post("/seed").status_code == 404


def test_error_details_hidden_unless_debug(client):
    response = client.post("/auth/login", json={"email": "not-an-email"})
    assert response.status_code == 400
    assert "details" not in response.json()


def test_error_details_shown_in_debug():
    app = create_app(make_settings(debug=True))
    with TestClient(app) as client:
        response = client.post("/auth/login", json={"email": "not-an-email"})
        assert response.status_code == 400
        assert response.json()["details"]


def test_unknown_route_uses_error_body(client):
    response = client.get("/no/such/route")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
    assert "X-Request-ID" in response.headers


def test_wrong_method_uses_error_body(client, user):
    response = client.patch("/trips", headers={"Authorization": f"Bearer {user['token']}"})
    assert response.status_code == 405
    assert response.json() == {"error": "Method Not Allowed"}
    assert "GET" in response.headers["allow"]
