"""Business entities (studios, publishers, people) and their staff links."""

import logging

from app.content_types import ContentType
from app.db import row_to_dict
from app.repos import business as business_repo
from app.repos import content as content_repo
from app.services import admin_logs as admin_logs_service
from utils.parsing import parse_int, parse_page
from utils.text import slugify

logger = logging.getLogger(__name__)

PAGE_SIZE = 20

# Staff role -> business type for records created on the fly
ROLE_TYPES = {
    "Studio d'animation": "Studio",
    "Studio d'animation (sous-traitance)": "Studio",
    "Éditeur": "Éditeur",
}
DEFAULT_ROLE_TYPE = "Personne"


def business_type_for_role(role):
    return ROLE_TYPES.get((role or "").strip(), DEFAULT_ROLE_TYPE)


def _clean(data):
    record = {}
    for key in business_repo.FIELDS:
        if key not in (data or {}):
            continue
        value = data[key]
        if isinstance(value, str):
            value = value.strip()
        record[key] = value
    if "status" in record and record["status"] is not None:
        status = parse_int(record["status"])
        if status is None:
            return None, "status must be a number"
        record["status"] = status
    return record, None


def list_items(args):
    page, _, offset = parse_page(args.get("page"), PAGE_SIZE, default_limit=PAGE_SIZE)
    rows, total = business_repo.list_items(
        search=(args.get("search") or "").strip() or None,
        type_filter=(args.get("type") or "").strip() or None,
        status=parse_int(args.get("status")),
        limit=PAGE_SIZE,
        offset=offset,
    )
    return {
        "items": [dict(row) for row in rows],
        "pagination": {
            "page": page,
            "limit": PAGE_SIZE,
            "total": total,
            "total_pages": (total + PAGE_SIZE - 1) // PAGE_SIZE,
        },
    }


def get_item(business_id):
    return row_to_dict(business_repo.get(business_id))


def create_item(data, username=None):
    record, error = _clean(data)
    if error:
        return None, error
    name = record.get("name") or ""
    if not name:
        return None, "name is required"
    if business_repo.find_by_name(name):
        return None, "A business with this name already exists"
    record["nice_url"] = record.get("nice_url") or slugify(name)
    new_id = business_repo.insert(record)
    if username:
        admin_logs_service.add_log("business", new_id, username, "Création fiche")
    return get_item(new_id), None


def update_item(business_id, data, username=None):
    if business_repo.get(business_id) is None:
        return None, None
    record, error = _clean(data)
    if error:
        return None, error
    if "name" in record:
        if not record["name"]:
            return None, "name cannot be empty"
        if business_repo.find_by_name(record["name"], exclude_id=business_id):
            return None, "A business with this name already exists"
        if not record.get("nice_url"):
            record["nice_url"] = slugify(record["name"])
    business_repo.update(business_id, record)
    if username:
        admin_logs_service.add_log("business", business_id, username, "Modification infos principales")
    return get_item(business_id), None


def update_status(business_id, status, username=None):
    status = parse_int(status)
    if status is None:
        return None, "status must be a number"
    if business_repo.get(business_id) is None:
        return None, None
    business_repo.update(business_id, {"status": status})
    if username:
        admin_logs_service.add_log("business", business_id, username, f"Modification statut ({status})")
    return get_item(business_id), None


def delete_item(business_id):
    if business_repo.get(business_id) is None:
        return None, None
    business_repo.delete(business_id)
    admin_logs_service.delete_logs("business", business_id)
    return {"message": "Business deleted"}, None


def list_staff(content_type, content_id):
    return [dict(row) for row in business_repo.list_staff(content_type.value, content_id)]


def add_staff(content_type, content_id, business_id, role, username=None):
    """Link an existing business to a content row; returns (result, error)."""
    if not content_repo.exists(content_type, content_id):
        return None, None
    business_id = parse_int(business_id)
    if business_id is None or business_repo.get(business_id) is None:
        return None, None
    role = (role or "").strip() or None
    if business_repo.find_relation(business_id, content_type.value, content_id, role):
        return {"message": "Staff member already linked"}, None
    business_repo.add_relation(business_id, content_type.value, content_id, role)
    if username:
        admin_logs_service.add_log(content_type.value, content_id, username, f"Ajout staff ({role or '?'})")
    return {"message": "Staff member added"}, None


def add_staff_by_name(content_type, content_id, name, role, username=None):
    """Link a business by name, creating it when unknown."""
    name = (name or "").strip()
    role = (role or "").strip()
    if not name or not role:
        return None, "name and role are required"
    if not content_repo.exists(content_type, content_id):
        return None, None
    business = business_repo.find_by_name(name)
    if business is None:
        business_id = business_repo.insert(
            {"name": name, "nice_url": slugify(name), "type": business_type_for_role(role), "status": 1}
        )
        logger.info("Created business %s (%s) from staff import", business_id, name)
    else:
        business_id = business["id"]
    return add_staff(content_type, content_id, business_id, role, username=username)


def remove_staff(content_type, content_id, business_id, role=None, username=None):
    removed = business_repo.remove_relation(business_id, content_type.value, content_id, role)
    if not removed:
        return None, None
    if username:
        admin_logs_service.add_log(content_type.value, content_id, username, f"Suppression staff ({role or '?'})")
    return {"message": "Staff member removed"}, None
