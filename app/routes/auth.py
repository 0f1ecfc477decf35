"""Authentication API routes for register, login, and account actions."""

from flask import Blueprint, current_app, jsonify, request, session

from app.cache import get_cache
from app.services import auth as auth_service
from app.services import recommendations as rec_service


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _json_error(message, status=400):
    return jsonify({"error": message}), status


def _credentials():
    data = request.get_json(silent=True) or {}
    return (data.get("username") or "").strip(), data.get("password") or ""


def _start_session(user):
    session.clear()
    session["user_id"] = user["id"]
    session["username"] = user["username"]


@auth_bp.post("/register")
def register():
    username, password = _credentials()
    if not username or not password:
        return _json_error("username and password required")

    user, error = auth_service.register(username, password)
    if error:
        return _json_error(error)

    _start_session(user)
    return jsonify({"ok": True, "user": user}), 201


@auth_bp.post("/login")
def login():
    username, password = _credentials()
    if not username or not password:
        return _json_error("username and password required")

    user, error = auth_service.login(username, password)
    if error:
        return _json_error(error, status=401)

    _start_session(user)
    return jsonify({"ok": True, "user": user})


@auth_bp.post("/logout")
def logout():
    session.clear()
    return jsonify({"ok": True})


@auth_bp.get("/session")
def get_session():
    user_id = session.get("user_id")
    return jsonify({"logged_in": bool(user_id), "user_id": user_id, "username": session.get("username")})


@auth_bp.post("/change-password")
def change_password():
    if not session.get("user_id"):
        return _json_error("auth required", status=401)

    data = request.get_json(silent=True) or {}
    current_password = data.get("current_password") or ""
    new_password = data.get("new_password") or ""
    if not current_password or not new_password:
        return _json_error("current_password and new_password required")

    error = auth_service.change_password(session["username"], current_password, new_password)
    if error:
        return _json_error(error)
    return jsonify({"ok": True})


@auth_bp.post("/delete-account")
def delete_account():
    user_id = session.get("user_id")
    if not user_id:
        return _json_error("auth required", status=401)

    error = auth_service.delete_account(user_id)
    if error:
        return _json_error(error)

    rec_service.invalidate_user_recommendations(get_cache(current_app), user_id)
    session.clear()
    return jsonify({"ok": True})
