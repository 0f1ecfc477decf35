"""Admin API: catalog CRUD, tags, staff, relations, activity log, dashboard."""

from flask import Blueprint, current_app, jsonify, request, session

from app.cache import get_cache
from app.content_types import ContentType
from app.routes.api import admin_required, invalid_type, respond
from app.services import admin_logs as admin_logs_service
from app.services import business as business_service
from app.services import content as content_service
from app.services import dashboard as dashboard_service
from app.services import relations as relations_service
from app.services import tags as tags_service
from utils.parsing import parse_bool, parse_int

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.before_request
@admin_required
def _guard():
    return None


def _username():
    return session.get("username")


def _payload():
    return request.get_json(silent=True) or {}


def _not_found(ct, content_id):
    return f"{ct.label} with ID {content_id} not found"


@admin_bp.get("/dashboard")
def dashboard():
    return jsonify(dashboard_service.get_dashboard(get_cache(current_app)))


@admin_bp.get("/logs")
def recent_logs():
    limit = max(1, min(parse_int(request.args.get("limit"), 50), 500))
    return jsonify({"logs": admin_logs_service.recent_logs(limit)})


# Business entities
@admin_bp.get("/business")
def list_business():
    return jsonify(business_service.list_items(request.args))


@admin_bp.post("/business")
def create_business():
    result, error = business_service.create_item(_payload(), _username())
    return respond(result, error, status=201)


@admin_bp.get("/business/<int:business_id>")
def get_business(business_id):
    return respond(business_service.get_item(business_id), None, not_found="Business not found")


@admin_bp.put("/business/<int:business_id>")
def update_business(business_id):
    result, error = business_service.update_item(business_id, _payload(), _username())
    return respond(result, error, not_found="Business not found")


@admin_bp.put("/business/<int:business_id>/status")
def update_business_status(business_id):
    result, error = business_service.update_status(business_id, _payload().get("status"), _username())
    return respond(result, error, not_found="Business not found")


@admin_bp.delete("/business/<int:business_id>")
def delete_business(business_id):
    result, error = business_service.delete_item(business_id)
    return respond(result, error, not_found="Business not found")


@admin_bp.get("/business/<int:business_id>/logs")
def business_logs(business_id):
    return jsonify({"logs": admin_logs_service.get_logs("business", business_id)})


# Tags
@admin_bp.get("/tags")
def list_tags():
    return jsonify(tags_service.list_tags(request.args.get("category"), request.args.get("search")))


@admin_bp.get("/tags/search")
def search_tags():
    limit = max(1, min(parse_int(request.args.get("limit"), 10), 50))
    return jsonify({"tags": tags_service.search_tags(request.args.get("q"), limit, request.args.get("category"))})


@admin_bp.post("/tags")
def create_tag():
    result, error = tags_service.create_tag(_payload())
    return respond(result, error, status=201)


@admin_bp.get("/tags/<int:tag_id>")
def get_tag(tag_id):
    return respond(tags_service.get_tag(tag_id), None, not_found="Tag not found")


@admin_bp.put("/tags/<int:tag_id>")
def update_tag(tag_id):
    result, error = tags_service.update_tag(tag_id, _payload())
    return respond(result, error, not_found="Tag not found")


@admin_bp.delete("/tags/<int:tag_id>")
def delete_tag(tag_id):
    result, error = tags_service.delete_tag(tag_id)
    return respond(result, error, not_found="Tag not found")


@admin_bp.delete("/relations/<int:relation_id>")
def delete_relation(relation_id):
    return respond(relations_service.delete_relation(relation_id), None, not_found="Relationship not found")


# Anime / manga records
@admin_bp.get("/<content_type>")
def list_content(content_type):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    return jsonify(content_service.list_items(ct, request.args))


@admin_bp.get("/<content_type>/search")
def search_content(content_type):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    limit = max(1, min(parse_int(request.args.get("limit"), 10), 50))
    return jsonify({"items": content_service.search_by_name(ct, request.args.get("q"), limit)})


@admin_bp.post("/<content_type>")
def create_content(content_type):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = content_service.create_item(ct, _payload(), _username())
    return respond(result, error, status=201)


@admin_bp.get("/<content_type>/<int:content_id>")
def get_content(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    return respond(content_service.get_item(ct, content_id), None, not_found=_not_found(ct, content_id))


@admin_bp.put("/<content_type>/<int:content_id>")
def update_content(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    data = _payload()
    attribution = parse_bool(data.pop("add_synopsis_attribution", None), default=True)
    result, error = content_service.update_item(
        ct, content_id, data, _username(), add_synopsis_attribution=attribution
    )
    return respond(result, error, not_found=_not_found(ct, content_id))


@admin_bp.put("/<content_type>/<int:content_id>/status")
def update_content_status(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = content_service.update_status(ct, content_id, _payload().get("status"), _username())
    return respond(result, error, not_found=_not_found(ct, content_id))


@admin_bp.delete("/<content_type>/<int:content_id>")
def delete_content(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = content_service.delete_item(ct, content_id)
    return respond(result, error, not_found=_not_found(ct, content_id))


@admin_bp.get("/<content_type>/<int:content_id>/logs")
def content_logs(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    return jsonify({"logs": admin_logs_service.get_logs(ct.value, content_id)})


@admin_bp.get("/<content_type>/<int:content_id>/tags")
def content_tags(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    return jsonify({"tags": tags_service.content_tags(ct, content_id)})


@admin_bp.post("/<content_type>/<int:content_id>/tags")
def attach_tag(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = tags_service.attach_tag(ct, content_id, _payload().get("tag_id"), _username())
    return respond(result, error, not_found="Content or tag not found")


@admin_bp.delete("/<content_type>/<int:content_id>/tags/<int:tag_id>")
def detach_tag(content_type, content_id, tag_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = tags_service.detach_tag(ct, content_id, tag_id, _username())
    return respond(result, error)


@admin_bp.get("/<content_type>/<int:content_id>/staff")
def list_staff(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    return jsonify({"staff": business_service.list_staff(ct, content_id)})


@admin_bp.post("/<content_type>/<int:content_id>/staff")
def add_staff(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    data = _payload()
    if data.get("business_id") is not None:
        result, error = business_service.add_staff(
            ct, content_id, data["business_id"], data.get("role"), _username()
        )
    else:
        result, error = business_service.add_staff_by_name(
            ct, content_id, data.get("name"), data.get("role"), _username()
        )
    return respond(result, error, status=201, not_found="Content or business not found")


@admin_bp.delete("/<content_type>/<int:content_id>/staff/<int:business_id>")
def remove_staff(content_type, content_id, business_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error = business_service.remove_staff(
        ct, content_id, business_id, request.args.get("role") or None, _username()
    )
    return respond(result, error, not_found="Staff link not found")


@admin_bp.get("/<content_type>/<int:content_id>/relations")
def list_relations(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    return jsonify({"relations": relations_service.list_relations(ct, content_id)})


@admin_bp.post("/<content_type>/<int:content_id>/relations")
def create_relation(content_type, content_id):
    ct = ContentType.parse(content_type)
    if ct is None:
        return invalid_type(content_type)
    result, error, missing = relations_service.create_relation(ct, content_id, _payload())
    if missing:
        return jsonify({"error": missing}), 404
    return respond(result, error, status=201)
