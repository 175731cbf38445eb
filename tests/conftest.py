from types import SimpleNamespace

import pytest


CONNECTION_ENV_VARS = (
    "DB_ENGINE",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_USER",
    "DB_PASSWORD",
    "DB_READ_ONLY",
    "FIRESTORE_PROJECT_ID",
    "GOOGLE_APPLICATION_CREDENTIALS",
    "LOG_LEVEL",
)

RELATIONAL_PARAMS = {"host": "db.internal", "database": "app", "user": "explorer", "password": "secret"}
FIRESTORE_PARAMS = {"projectId": "demo-project", "keyFilename": "/keys/service-account.json"}


class FakeCursor:
    def __init__(self, driver):
        self.driver = driver
        self.executed = []
        self.description = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, query, params=None):
        self.executed.append((query, params))
        if self.driver.error is not None:
            raise self.driver.error
        rows = self.driver.results.pop(0) if self.driver.results else []
        # None models a statement without a result set (INSERT, SET ...).
        self.description = None if rows is None else [("column",)]
        self._rows = rows or []

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self, driver):
        self.cursor_obj = FakeCursor(driver)
        self.closed = False

    def cursor(self):
        return self.cursor_obj

    def close(self):
        self.closed = True


class FakeDriver:
    """Replaces psycopg.connect / pymysql.connect and records every connection it hands out."""

    def __init__(self):
        self.results = []
        self.error = None
        self.connect_error = None
        self.calls = []
        self.connections = []

    def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakeConnection(self)
        self.connections.append(conn)
        return conn

    @property
    def executed(self):
        return self.connections[-1].cursor_obj.executed


class FakeFirestoreClient:
    def __init__(self, collection_ids):
        self.collection_ids = list(collection_ids)
        self.built_with = []

    def collections(self):
        return iter([SimpleNamespace(id=name) for name in self.collection_ids])


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in CONNECTION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keeps a developer's .env out of the tests
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def pg_driver(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr("adapters.postgres.psycopg.connect", driver)
    return driver


@pytest.fixture
def mysql_driver(monkeypatch):
    driver = FakeDriver()
    monkeypatch.setattr("adapters.mysql.pymysql.connect", driver)
    return driver


@pytest.fixture
def firestore_client(monkeypatch):
    client = FakeFirestoreClient(["users", "orders"])

    def fake_build_client(key_filename, project_id):
        client.built_with.append((key_filename, project_id))
        return client

    monkeypatch.setattr("adapters.firestore._build_client", fake_build_client)
    return client


@pytest.fixture
def relational_params():
    return dict(RELATIONAL_PARAMS)


@pytest.fixture
def firestore_params():
    return dict(FIRESTORE_PARAMS)
