import pytest
from fastapi.testclient import TestClient

from app.core.auth import create_access_token
from app.core.config import get_settings


@pytest.fixture(autouse=True)
def settings_env(tmp_path, monkeypatch):
    """
    Point every test at its own SQLite file and a known JWT secret.
    bcrypt runs at its minimum work factor to keep the suite fast.
    """
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'school.db'}")
    monkeypatch.setenv("JWT_SECRET_KEY", "test-secret")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def client(settings_env):
    from app.main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client


@pytest.fixture
def db(client):
    return client.app.state.db


@pytest.fixture
def auth_headers():
    token = create_access_token(
        {"id": 1, "email": "admin@example.com", "name": "Admin", "role": "student"}
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_registration():
    """Factory for valid registration payloads; `n` keeps unique fields unique."""
    def _make(n=1, **overrides):
        payload = {
            "firstName": "John",
            "lastName": f"Doe{n:02d}",
            "middleName": "Ray",
            "admissioNo": f"SCH-{n:03d}",
            "form": "JSS1",
            "section": "A",
            "address": "123 Main St, Anytown",
            "bloodgroup": "O+",
            "genotype": "AA",
            "religion": "Christianity",
            "tribe": "Yoruba",
            "gender": "male",
            "dob": "2010-01-15",
            "phone": "08012345678",
            "studentImg": "http://example.com/student.jpg",
            "email": f"student{n}@example.com",
            "password": "password123",
            "guardianName": "Jane Doe",
            "guardianPhone": "08087654321",
            "guardianStatus": "mother",
            "guardianEmail": f"guardian{n}@example.com",
            "guardianImg": "",
        }
        payload.update(overrides)
        return payload

    return _make


@pytest.fixture
def register(client, make_registration):
    """Register a student and return the created record."""
    def _register(n=1, **overrides):
        response = client.post("/auth/register", json=make_registration(n, **overrides))
        assert response.status_code == 201, response.text
        return response.json()

    return _register
