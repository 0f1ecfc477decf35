from functools import wraps

from flask import Blueprint, current_app, jsonify, request, session

from app.cache import get_cache
from app.content_types import ContentType
from app.repos import users as users_repo
from app.services import collections as collections_service
from app.services import recommendations as rec_service
from recommender.constants import DEFAULT_LIMIT, MAX_LIMIT
from utils.parsing import parse_int

api_bp = Blueprint("api", __name__, url_prefix="/api")


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not session.get("user_id"):
            return jsonify({"error": "auth required"}), 401
        return fn(*args, **kwargs)

    return wrapper


def _current_is_admin():
    user = users_repo.get_by_id(session.get("user_id"))
    return bool(user and user["is_admin"])


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if not session.get("user_id"):
            return jsonify({"error": "auth required"}), 401
        if not _current_is_admin():
            return jsonify({"error": "admin only"}), 403
        return fn(*args, **kwargs)

    return wrapper


def respond(result, error, status=200, not_found="not found"):
    """Turn a service (result, error) pair into a JSON response."""
    if error:
        return jsonify({"error": error}), 400
    if result is None:
        return jsonify({"error": not_found}), 404
    return jsonify(result), status


def invalid_type(raw):
    return jsonify({"error": f"invalid content type {raw!r}"}), 400


def _target_user(requested):
    """User whose collection is addressed; others need admin rights."""
    if requested is None or requested == session["user_id"]:
        return session["user_id"], None
    if not _current_is_admin():
        return None, (jsonify({"error": "forbidden"}), 403)
    return requested, None


@api_bp.get("/recommendations/<int:user_id>")
@login_required
def get_recommendations(user_id):
    _, denied = _target_user(user_id)
    if denied:
        return denied

    limit = DEFAULT_LIMIT
    raw_limit = request.args.get("limit")
    if raw_limit not in (None, ""):
        limit = parse_int(raw_limit)
        if limit is None or not 1 <= limit <= MAX_LIMIT:
            return jsonify({"error": f"limit must be between 1 and {MAX_LIMIT}"}), 400

    # Anything other than anime/manga means every type
    media_type = ContentType.parse(request.args.get("type"))
    payload = rec_service.get_recommendations_for_user(
        get_cache(current_app), user_id, limit=limit, media_type=media_type
    )
    return jsonify(payload)


@api_bp.get("/collections/<content_type>")
@login_required
def list_collection(content_type):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    user_id, denied = _target_user(parse_int(request.args.get("user_id")))
    if denied:
        return denied
    result, error = collections_service.list_entries(
        user_id,
        ct,
        status=request.args.get("status") or None,
        sort=(request.args.get("sort") or "recent").strip(),
    )
    return respond(result, error)


@api_bp.post("/collections/<content_type>")
@login_required
def add_to_collection(content_type):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    data = request.get_json(silent=True) or {}
    content_id = parse_int(data.get("content_id"))
    if content_id is None:
        return jsonify({"error": "content_id is required"}), 400
    result, error = collections_service.add_entry(
        get_cache(current_app),
        session["user_id"],
        ct,
        content_id,
        status=data.get("status", 3),
        rating=data.get("rating"),
        notes=data.get("notes"),
    )
    return respond(result, error, not_found=f"{ct.value} with ID {content_id} not found")


@api_bp.put("/collections/<content_type>/<int:content_id>/rating")
@login_required
def rate_collection_entry(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    data = request.get_json(silent=True) or {}
    result, error = collections_service.update_rating(
        get_cache(current_app), session["user_id"], ct, content_id, data.get("rating")
    )
    return respond(result, error, not_found="collection entry not found")


@api_bp.delete("/collections/<content_type>/<int:content_id>")
@login_required
def remove_from_collection(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = collections_service.remove_entry(
        get_cache(current_app), session["user_id"], ct, content_id
    )
    return respond(result, error, not_found="collection entry not found")


@api_bp.delete("/recommendations/<int:user_id>/cache")
@admin_required
def clear_recommendations(user_id):
    removed = rec_service.invalidate_user_recommendations(get_cache(current_app), user_id)
    return jsonify({"ok": True, "removed": removed})
