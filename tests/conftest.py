import pytest
from fastapi.testclient import TestClient

from farmlink.auth.security import PasswordHasher, SessionManager
from farmlink.config import Config
from farmlink.crud.listings import ListingStore
from farmlink.crud.users import CredentialStore
from farmlink.db.init import init_db
from farmlink.db.session import build_engine, build_session_factory
from farmlink.main import create_app

TEST_SECRET = "test-secret"


@pytest.fixture
def config(tmp_path):
    return Config(
        DATABASE_URL=f"sqlite:///{tmp_path / 'farmlink.db'}",
        JWT_SECRET=TEST_SECRET,
        BCRYPT_ROUNDS=10,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture
def app(config):
    return create_app(config)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="session")
def hasher():
    return PasswordHasher(rounds=10)


@pytest.fixture
def sessions():
    return SessionManager(TEST_SECRET)


@pytest.fixture
def db(config):
    engine = build_engine(config.DATABASE_URL)
    init_db(engine)
    session = build_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def users(db, hasher):
    return CredentialStore(db, hasher)


@pytest.fixture
def listings(db):
    return ListingStore(db)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_and_login(client):
    """Register an account over HTTP and return (user, auth headers)."""

    def _register_and_login(phone, role="farmer", full_name="Test User", location="Pune", password="secret1"):
        resp = client.post(
            "/api/register",
            json={
                "full_name": full_name,
                "phone": phone,
                "location": location,
                "role": role,
                "password": password,
            },
        )
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/login", json={"phone": phone, "password": password})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        return body["user"], auth_header(body["token"])

    return _register_and_login


@pytest.fixture
def farmer(register_and_login):
    return register_and_login("9876543210", role="farmer", full_name="Ramesh Patil")


@pytest.fixture
def vendor(register_and_login):
    return register_and_login("9123456780", role="vendor", full_name="Agro Supplies", location="Nashik")
