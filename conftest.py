# file: conftest.py

import os  # env
import tempfile  # scratch db

_tmpdir = tempfile.mkdtemp(prefix="tapgas-test-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_tmpdir, 'tapgas_test.db')}"  # before config import
os.environ["LOGIN_CODE_IN_RESPONSE"] = "true"
os.environ["MAIL_API_URL"] = ""
os.environ["SESSION_COOKIE_SECURE"] = "false"
os.environ["SESSION_COOKIE_SAMESITE"] = "lax"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import select  # noqa: E402

import database  # noqa: E402
import main  # noqa: E402
from models import UserTable  # noqa: E402


@pytest.fixture(scope="session")
def app_client():
    with TestClient(main.app) as c:  # runs lifespan: tables + connect
        yield c


@pytest.fixture
def client(app_client):
    with database.engine.begin() as conn:
        for table in reversed(database.Base.metadata.sorted_tables):
            conn.execute(table.delete())
    app_client.cookies.clear()
    yield app_client
    app_client.cookies.clear()


@pytest.fixture
def rows():
    """Read a table straight from storage: rows("orders")."""
    def _rows(table_name):
        table = database.Base.metadata.tables[table_name]
        with database.engine.connect() as conn:
            return [dict(r._mapping) for r in conn.execute(select(table))]
    return _rows


@pytest.fixture
def set_role():
    users = UserTable.__table__

    def _set_role(email, role):
        with database.engine.begin() as conn:
            found = conn.execute(select(users.c.id).where(users.c.email == email)).first()
            if found is None:
                conn.execute(users.insert().values(email=email, role=role))
            else:
                conn.execute(users.update().where(users.c.email == email).values(role=role))
    return _set_role


@pytest.fixture
def login(client, set_role):
    """Log the shared client in as `email`, optionally forcing a stored role first."""
    def _login(email, role=None):
        if role is not None:
            set_role(email, role)
        sent = client.post("/auth/send-code", json={"email": email})
        assert sent.status_code == 200
        resp = client.post("/auth/verify-code", json={"email": email, "code": sent.json()["code"]})
        assert resp.status_code == 200
        return resp.json()["user"]
    return _login


@pytest.fixture
def place_order(client):
    def _place(**overrides):
        body = {"address": "12 Ring Road", "cylinderType": "12kg", "payment": "cash"}
        body.update(overrides)
        resp = client.post("/order", json=body)
        assert resp.status_code == 200, resp.text
        return resp.json()["order"]
    return _place
