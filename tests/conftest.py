import sqlite3

import pytest

from app.app import create_app


@pytest.fixture()
def app_client(tmp_path, monkeypatch):
    """Create an isolated Flask test client backed by a temporary sqlite DB."""
    db_path = tmp_path / "test.db"
    monkeypatch.setenv("CATALOG_DB_PATH", str(db_path))
    monkeypatch.setenv("FLASK_SECRET_KEY", "test-secret-key-0123456789")
    monkeypatch.delenv("CATALOG_BOOTSTRAP_ADMIN", raising=False)
    monkeypatch.delenv("RECOMMENDATION_CACHE_TTL_SEC", raising=False)

    app = create_app({"TESTING": True})

    with app.test_client() as client:
        yield app, client, db_path


@pytest.fixture()
def db_conn(app_client):
    _, _, db_path = app_client
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    yield conn
    conn.close()


def insert_user(conn, username, is_admin=0):
    cur = conn.execute(
        "INSERT INTO users (username, password_hash, is_admin) VALUES (?, NULL, ?)",
        (username, 1 if is_admin else 0),
    )
    conn.commit()
    return cur.lastrowid


def login_as(client, user_id, username):
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["username"] = username


@pytest.fixture()
def admin_client(app_client, db_conn):
    """Test client logged in as an admin account."""
    app, client, db_path = app_client
    admin_id = insert_user(db_conn, "admin", is_admin=1)
    login_as(client, admin_id, "admin")
    return app, client, db_path, admin_id
