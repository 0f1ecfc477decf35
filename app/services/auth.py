"""Account registration, login and password changes."""

import logging

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from app.repos import users as users_repo

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def _normalize(username):
    return (username or "").strip().lower()


def _public(user):
    return {"id": user["id"], "username": user["username"], "is_admin": bool(user["is_admin"])}


def _bootstrap_first_admin(username):
    # The first account becomes admin unless CATALOG_BOOTSTRAP_ADMIN names someone else.
    if users_repo.has_any_admin():
        return False
    bootstrap_username = _normalize(current_app.config.get("BOOTSTRAP_ADMIN"))
    if bootstrap_username and username != bootstrap_username:
        return False
    users_repo.set_admin(username, True)
    logger.info("Granted admin rights to %s", username)
    return True


def register(username, password):
    username = _normalize(username)
    if len(password or "") < MIN_PASSWORD_LENGTH:
        return None, f"password must be at least {MIN_PASSWORD_LENGTH} characters"
    existing = users_repo.get_by_username(username)
    if existing:
        # Accounts created without a password can be claimed once
        if existing["password_hash"]:
            return None, "Username already exists"
        users_repo.set_password_hash(username, generate_password_hash(password))
    else:
        users_repo.create_user(username, generate_password_hash(password))
    _bootstrap_first_admin(username)
    return _public(users_repo.get_by_username(username)), None


def login(username, password):
    username = _normalize(username)
    user = users_repo.get_by_username(username)
    if not user:
        return None, "Invalid username or password"
    if not user["password_hash"]:
        return None, "Password not set for this user"
    if not check_password_hash(user["password_hash"], password):
        return None, "Invalid username or password"
    return _public(user), None


def change_password(username, current_password, new_password):
    """Returns an error message, or None on success."""
    user = users_repo.get_by_username(_normalize(username))
    if not user:
        return "User not found"
    if not user["password_hash"]:
        return "Password not set for this user"
    if not check_password_hash(user["password_hash"], current_password):
        return "Current password is incorrect"
    if len(new_password) < MIN_PASSWORD_LENGTH:
        return f"password must be at least {MIN_PASSWORD_LENGTH} characters"
    users_repo.set_password_hash(user["username"], generate_password_hash(new_password))
    return None


def delete_account(user_id):
    if users_repo.get_by_id(user_id) is None:
        return "User not found"
    users_repo.delete_user(user_id)
    return None
