"""Links between catalog rows, readable from either end."""

from app.content_types import ContentType
from app.repos import content as content_repo
from app.repos import relations as relations_repo
from utils.parsing import parse_int


def list_relations(content_type, content_id):
    return [dict(row) for row in relations_repo.list_for(content_type.value, content_id)]


def create_relation(content_type, content_id, data):
    """Returns (result, error, missing) where missing names an absent end."""
    data = data or {}
    related_type = ContentType.parse(data.get("related_type"))
    related_id = parse_int(data.get("related_id"))
    if related_type is None or related_id is None:
        return None, "related_type and related_id are required", None
    if related_type is content_type and related_id == content_id:
        return None, "content cannot be related to itself", None

    if not content_repo.exists(content_type, content_id):
        return None, None, f"{content_type.value} with ID {content_id} not found"
    if not content_repo.exists(related_type, related_id):
        return None, None, f"{related_type.value} with ID {related_id} not found"

    source = (content_type.value, content_id)
    target = (related_type.value, related_id)
    if relations_repo.find(*source, *target) or relations_repo.find(*target, *source):
        return {"message": "Relationship already exists"}, None, None
    relation_id = relations_repo.insert(*source, *target)
    return {"message": "Relationship created", "id": relation_id}, None, None


def delete_relation(relation_id):
    if not relations_repo.delete(relation_id):
        return None
    return {"message": "Relationship deleted"}
