import pytest
from fastapi.testclient import TestClient

from tripplanner.core.config import Settings
from tripplanner.core.database import Base, create_db_engine, create_session_factory
from tripplanner.main import create_app
from tripplanner.models import Activity, City, User
from tripplanner.services.seed import reseed_reference_data

# ---------- TEST FIXTURES ----------

TEST_SECRET = "test-secret-key-0123456789abcdef"


def make_settings(**overrides) -> Settings:
    values = {
        "environment": "test",
        "database_url": "sqlite://",
        "jwt_secret_key": TEST_SECRET,
        "bcrypt_rounds": 4,
        "enable_seed_endpoint": True,
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Entering the client runs the lifespan, which creates the tables
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db(app, client):
    """A session on the same in-memory database the app uses."""
    session = app.state.session_factory()
    yield session
    session.close()


@pytest.fixture
def db_session(settings):
    """A standalone database for service-level tests."""
    engine = create_db_engine(settings)
    Base.metadata.create_all(bind=engine)
    session = create_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def seeded(db):
    return reseed_reference_data(db)


# ---------- TEST DATA HELPERS ----------

def signup(client, name="Alice", email="alice@example.com", password="secret123"):
    response = client.post("/auth/signup", json={"name": name, "email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


def create_trip_dict(trip_name="Summer in Europe", start_date="2025-06-01", end_date="2025-06-14"):
    return {
        "trip_name": trip_name,
        "description": "Two weeks of museums and food",
        "start_date": start_date,
        "end_date": end_date
    }


def create_trip(client, token, **kwargs):
    response = client.post("/trips", json=create_trip_dict(**kwargs), headers=auth_headers(token))
    assert response.status_code == 201, response.text
    return response.json()["trip"]


def city_id(db, name):
    return db.query(City).filter(City.name == name).one().id


def activity_id(db, name):
    return db.query(Activity).filter(Activity.name == name).one().id


@pytest.fixture
def user(client):
    data = signup(client)
    return {"id": data["user"]["id"], "token": data["token"]}


@pytest.fixture
def other_user(client):
    data = signup(client, name="Bob", email="bob@example.com")
    return {"id": data["user"]["id"], "token": data["token"]}


@pytest.fixture
def admin(client, db):
    data = signup(client, name="Admin", email="admin@example.com", password="admin123")
    db.query(User).filter(User.id == data["user"]["id"]).update({"role": "admin"})
    db.commit()
    # Role travels in the token, so log in again to pick it up
    response = client.post("/auth/login", json={"email": "admin@example.com", "password": "admin123"})
    assert response.status_code == 200, response.text
    return {"id": data["user"]["id"], "token": response.json()["token"]}
