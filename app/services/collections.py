"""User collections: what each user has watched, read, planned or dropped."""

import logging

from app.content_types import COLLECTION_STATUS_NAMES, COLLECTION_STATUSES
from app.repos import collections as collections_repo
from app.repos import content as content_repo
from app.services import recommendations as rec_service
from utils.parsing import parse_float, parse_int

logger = logging.getLogger(__name__)

MIN_RATING = 0.0
MAX_RATING = 5.0


def parse_status(value):
    """Accept a numeric code or a status name; returns None when unknown."""
    code = parse_int(value)
    if code is None:
        code = COLLECTION_STATUS_NAMES.get(str(value or "").strip().lower())
    return code if code in COLLECTION_STATUSES else None


def clamp_rating(value):
    rating = parse_float(value)
    if rating is None:
        return None
    rating = min(max(rating, MIN_RATING), MAX_RATING)
    return round(rating * 2) / 2


def _serialize(row):
    item = dict(row)
    item["status_name"] = COLLECTION_STATUSES.get(item["status"])
    return item


def _invalidate(cache, user_id):
    if cache is not None:
        rec_service.invalidate_user_recommendations(cache, user_id)


def list_entries(user_id, content_type, status=None, sort="recent"):
    if status is not None:
        status = parse_status(status)
        if status is None:
            return None, "unknown status"
    rows = collections_repo.list_by_user(user_id, content_type.value, status=status, sort=sort)
    return {
        "items": [_serialize(row) for row in rows],
        "counts": collections_repo.status_counts(user_id, content_type.value),
    }, None


def add_entry(cache, user_id, content_type, content_id, status=3, rating=None, notes=None):
    status_code = parse_status(status)
    if status_code is None:
        return None, f"unknown status {status!r}"
    if rating not in (None, "") and parse_float(rating) is None:
        return None, "rating must be a number"
    if not content_repo.exists(content_type, content_id):
        return None, None

    collections_repo.upsert(
        user_id, content_type.value, content_id, status_code, clamp_rating(rating), notes or None
    )
    _invalidate(cache, user_id)
    return _serialize(collections_repo.get_entry(user_id, content_type.value, content_id)), None


def update_rating(cache, user_id, content_type, content_id, rating):
    value = parse_float(rating)
    if value is None or not MIN_RATING <= value <= MAX_RATING:
        return None, "rating must be between 0 and 5"
    if value * 2 != int(value * 2):
        return None, "rating must be a multiple of 0.5"
    if not collections_repo.update_rating(user_id, content_type.value, content_id, value):
        return None, None
    _invalidate(cache, user_id)
    return _serialize(collections_repo.get_entry(user_id, content_type.value, content_id)), None


def remove_entry(cache, user_id, content_type, content_id):
    if not collections_repo.delete(user_id, content_type.value, content_id):
        return None, None
    _invalidate(cache, user_id)
    logger.debug("Removed %s %s from user %s collection", content_type.value, content_id, user_id)
    return {"message": "Entry removed"}, None
