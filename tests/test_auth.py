def _register(client, username, password="secret-pass"):
    return client.post("/api/auth/register", json={"username": username, "password": password})


def test_first_user_becomes_admin(app_client):
    _, client, _ = app_client
    res = _register(client, "Founder")
    assert res.status_code == 201
    user = res.get_json()["user"]
    assert user["username"] == "founder"
    assert user["is_admin"] is True

    second = _register(client, "newcomer").get_json()["user"]
    assert second["is_admin"] is False


def test_bootstrap_admin_restricts_first_admin(app_client):
    app, client, _ = app_client
    app.config["BOOTSTRAP_ADMIN"] = "chosen"

    assert _register(client, "early").get_json()["user"]["is_admin"] is False
    assert _register(client, "chosen").get_json()["user"]["is_admin"] is True


def test_register_validation(app_client):
    _, client, _ = app_client
    assert client.post("/api/auth/register", json={"username": "x"}).status_code == 400
    assert _register(client, "shorty", password="abc").status_code == 400
    _register(client, "taken")
    dup = _register(client, "TAKEN")
    assert dup.status_code == 400
    assert dup.get_json()["error"] == "Username already exists"


def test_login_and_session(app_client):
    _, client, _ = app_client
    _register(client, "member")
    client.post("/api/auth/logout")
    assert client.get("/api/auth/session").get_json()["logged_in"] is False

    bad = client.post("/api/auth/login", json={"username": "member", "password": "wrong-pass"})
    assert bad.status_code == 401

    ok = client.post("/api/auth/login", json={"username": "MEMBER", "password": "secret-pass"})
    assert ok.status_code == 200
    session_info = client.get("/api/auth/session").get_json()
    assert session_info["logged_in"] is True
    assert session_info["username"] == "member"


def test_change_password(app_client):
    _, client, _ = app_client
    _register(client, "changer")

    wrong = client.post(
        "/api/auth/change-password",
        json={"current_password": "nope-nope", "new_password": "fresh-pass"},
    )
    assert wrong.status_code == 400

    res = client.post(
        "/api/auth/change-password",
        json={"current_password": "secret-pass", "new_password": "fresh-pass"},
    )
    assert res.status_code == 200
    client.post("/api/auth/logout")
    login = client.post("/api/auth/login", json={"username": "changer", "password": "fresh-pass"})
    assert login.status_code == 200


def test_delete_account_removes_collection(app_client, db_conn):
    _, client, _ = app_client
    user_id = _register(client, "leaver").get_json()["user"]["id"]
    db_conn.execute(
        "INSERT INTO collection_entries (user_id, content_type, content_id, status) VALUES (?, 'anime', 1, 1)",
        (user_id,),
    )
    db_conn.commit()

    assert client.post("/api/auth/delete-account").status_code == 200
    remaining = db_conn.execute(
        "SELECT COUNT(*) FROM collection_entries WHERE user_id = ?", (user_id,)
    ).fetchone()[0]
    assert remaining == 0
    assert client.post("/api/auth/delete-account").status_code == 401
