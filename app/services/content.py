"""Admin CRUD for anime and manga records."""

import logging

from app.content_types import CONTENT_STATUSES, ContentType
from app.db import row_to_dict
from app.repos import content as content_repo
from app.services import admin_logs as admin_logs_service
from utils.parsing import first_number, parse_float, parse_int, parse_list, parse_page
from utils.text import attribute_synopsis, normalize_format, slugify, strip_attribution

logger = logging.getLogger(__name__)

INT_FIELDS = {"year", "episodes", "status", "complete", "review_count"}


def _clean_payload(content_type, data):
    """Keep known columns and coerce their types; returns (record, error)."""
    data = data or {}
    record = {}
    for key, value in data.items():
        if key not in content_type.fields:
            continue
        if isinstance(value, str):
            value = value.strip()
            if value == "" and key != "title":
                value = None
        record[key] = value

    for key in INT_FIELDS & set(record):
        raw = record[key]
        if raw is None:
            continue
        parsed = parse_int(raw)
        if parsed is None:
            return None, f"{key} must be a number"
        record[key] = parsed

    if record.get("average_rating") is not None:
        rating = parse_float(record["average_rating"])
        if rating is None:
            return None, "average_rating must be a number"
        record["average_rating"] = rating

    if record.get("status") is not None and record["status"] not in CONTENT_STATUSES:
        return None, "status must be 0, 1 or 2"
    if record.get("complete") is not None:
        record["complete"] = 1 if record["complete"] else 0

    if content_type is ContentType.ANIME:
        if "format" in record:
            record["format"] = normalize_format(record["format"])
        if record.get("episodes") is None and record.get("episode_duration"):
            record["episodes"] = first_number(record["episode_duration"])
    if content_type.has_tag_column and isinstance(data.get("tags"), (list, tuple)):
        record["tags"] = ", ".join(parse_list(data["tags"]))
    return record, None


def list_items(content_type, args):
    page, limit, offset = parse_page(args.get("page"), args.get("limit"))
    status = parse_int(args.get("status"))
    rows, total = content_repo.list_items(
        content_type,
        search=(args.get("search") or "").strip() or None,
        year=parse_int(args.get("year")),
        status=status,
        complete=parse_int(args.get("complete")),
        sort_by=(args.get("sort_by") or "created_at").strip(),
        sort_order=(args.get("sort_order") or "desc").strip(),
        limit=limit,
        offset=offset,
    )
    return {
        "items": [dict(row) for row in rows],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": (total + limit - 1) // limit,
        },
    }


def get_item(content_type, content_id):
    return row_to_dict(content_repo.get(content_type, content_id))


def create_item(content_type, data, username=None):
    record, error = _clean_payload(content_type, data)
    if error:
        return None, error
    title = record.get("title") or ""
    if not title:
        return None, "title is required"
    if content_repo.find_by_title(content_type, title):
        return None, f"{content_type.label} with this title already exists"

    record["nice_url"] = record.get("nice_url") or slugify(title)
    record.setdefault("status", 0)
    if record["status"] is None:
        record["status"] = 0

    new_id = content_repo.insert(content_type, record)
    logger.info("Created %s %s (%s)", content_type.value, new_id, title)
    if username:
        admin_logs_service.add_log(content_type.value, new_id, username, "Création fiche")
    return get_item(content_type, new_id), None


def update_item(content_type, content_id, data, username=None, add_synopsis_attribution=True):
    existing = content_repo.get(content_type, content_id)
    if existing is None:
        return None, None

    record, error = _clean_payload(content_type, data)
    if error:
        return None, error

    if "title" in record:
        title = record["title"] or ""
        if not title:
            return None, "title cannot be empty"
        if content_repo.find_by_title(content_type, title, exclude_id=content_id):
            return None, f"{content_type.label} with this title already exists"
        if not record.get("nice_url"):
            record["nice_url"] = slugify(title)

    synopsis = record.get("synopsis")
    if synopsis and username and synopsis != existing["synopsis"]:
        if add_synopsis_attribution:
            record["synopsis"] = attribute_synopsis(synopsis, username)
        else:
            record["synopsis"] = strip_attribution(synopsis)

    content_repo.update(content_type, content_id, record)
    if username:
        admin_logs_service.add_log(
            content_type.value, content_id, username, "Modification infos principales"
        )
    return get_item(content_type, content_id), None


def update_status(content_type, content_id, status, username=None):
    status = parse_int(status)
    if status not in CONTENT_STATUSES:
        return None, "status must be 0, 1 or 2"
    existing = content_repo.get(content_type, content_id)
    if existing is None:
        return None, None
    content_repo.update_status(content_type, content_id, status)
    if username:
        admin_logs_service.add_log(
            content_type.value, content_id, username, f"Modification statut ({status})"
        )
    if status == 1 and existing["status"] != 1:
        logger.info("%s %s published", content_type.label, content_id)
    return get_item(content_type, content_id), None


def delete_item(content_type, content_id):
    if not content_repo.exists(content_type, content_id):
        return None, None
    content_repo.delete(content_type, content_id)
    admin_logs_service.delete_logs(content_type.value, content_id)
    logger.info("Deleted %s %s", content_type.value, content_id)
    return {"message": f"{content_type.label} deleted"}, None


def search_by_name(content_type, query, limit=10):
    query = (query or "").strip()
    if not query:
        return []
    return [dict(row) for row in content_repo.search_by_name(content_type, query, limit)]
