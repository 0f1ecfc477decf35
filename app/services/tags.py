"""Tag catalogue and tag attachment for anime/manga rows."""

from app.db import row_to_dict
from app.repos import content as content_repo
from app.repos import tags as tags_repo
from app.services import admin_logs as admin_logs_service
from utils.parsing import parse_int

DUPLICATE_ERROR = "A tag with this name already exists"


def _fields(data):
    data = data or {}
    name = (data.get("name") or "").strip()
    description = (data.get("description") or "").strip() or None
    category = (data.get("category") or "").strip() or None
    return name, description, category


def list_tags(category=None, search=None):
    return {
        "tags": [dict(row) for row in tags_repo.list_tags(category or None, search or None)],
        "categories": tags_repo.list_categories(),
    }


def get_tag(tag_id):
    return row_to_dict(tags_repo.get(tag_id))


def create_tag(data):
    name, description, category = _fields(data)
    if not name:
        return None, "name is required"
    if tags_repo.find_by_name(name):
        return None, DUPLICATE_ERROR
    tag_id = tags_repo.insert(name, description, category)
    return get_tag(tag_id), None


def update_tag(tag_id, data):
    if tags_repo.get(tag_id) is None:
        return None, None
    name, description, category = _fields(data)
    if not name:
        return None, "name is required"
    if tags_repo.find_by_name(name, exclude_id=tag_id):
        return None, DUPLICATE_ERROR
    tags_repo.update(tag_id, name, description, category)
    return get_tag(tag_id), None


def delete_tag(tag_id):
    if tags_repo.get(tag_id) is None:
        return None, None
    count = tags_repo.usage_count(tag_id)
    if count > 0:
        return None, f"Cannot delete: this tag is used by {count} anime/manga"
    tags_repo.delete(tag_id)
    return {"message": "Tag deleted"}, None


def search_tags(query, limit=10, category=None):
    query = (query or "").strip()
    if not query:
        return []
    return [dict(row) for row in tags_repo.search(query, limit, category or None)]


def content_tags(content_type, content_id):
    return [dict(row) for row in tags_repo.list_for_content(content_type.value, content_id)]


def attach_tag(content_type, content_id, tag_id, username):
    tag_id = parse_int(tag_id)
    if tag_id is None:
        return None, "tag_id is required"
    if not content_repo.exists(content_type, content_id) or tags_repo.get(tag_id) is None:
        return None, None
    if tags_repo.is_linked(tag_id, content_type.value, content_id):
        return {"message": "Tag already attached"}, None
    tags_repo.link(tag_id, content_type.value, content_id)
    admin_logs_service.add_log(content_type.value, content_id, username, "Modification des tags")
    return {"message": "Tag added"}, None


def detach_tag(content_type, content_id, tag_id, username):
    tags_repo.unlink(tag_id, content_type.value, content_id)
    admin_logs_service.add_log(content_type.value, content_id, username, "Modification des tags")
    return {"message": "Tag removed"}, None
