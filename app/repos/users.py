"""Data-access helpers for user account rows."""

from app.db import get_db


def get_by_username(username):
    # Case-insensitive fetch so login normalization is resilient.
    db = get_db()
    cur = db.execute("SELECT * FROM users WHERE unicode_lower(username) = unicode_lower(?)", (username,))
    return cur.fetchone()


def get_by_id(user_id):
    db = get_db()
    return db.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()


def has_any_admin():
    # Used for first-admin bootstrap gating.
    db = get_db()
    row = db.execute("SELECT 1 FROM users WHERE COALESCE(is_admin, 0) = 1 LIMIT 1").fetchone()
    return bool(row)


def create_user(username, password_hash, is_admin=0):
    username = (username or "").strip().lower()
    db = get_db()
    cur = db.execute(
        "INSERT INTO users (username, password_hash, is_admin) VALUES (?, ?, ?)",
        (username, password_hash, 1 if is_admin else 0),
    )
    db.commit()
    return cur.lastrowid


def set_password_hash(username, password_hash):
    db = get_db()
    db.execute("UPDATE users SET password_hash = ? WHERE unicode_lower(username) = unicode_lower(?)", (password_hash, username))
    db.commit()


def set_admin(username, is_admin_flag=True):
    db = get_db()
    db.execute(
        "UPDATE users SET is_admin = ? WHERE unicode_lower(username) = unicode_lower(?)",
        (1 if is_admin_flag else 0, username),
    )
    db.commit()


def delete_user(user_id):
    # Collection rows are owned by the user and go with the account.
    db = get_db()
    db.execute("DELETE FROM collection_entries WHERE user_id = ?", (user_id,))
    db.execute("DELETE FROM users WHERE id = ?", (user_id,))
    db.commit()
