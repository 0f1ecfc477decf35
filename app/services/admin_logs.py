"""Admin activity log: who changed which catalog row, and how."""

import logging
import sqlite3
import time

from app.content_types import LOG_TARGETS
from app.repos import admin_logs as admin_logs_repo

logger = logging.getLogger(__name__)


def add_log(content_type, content_id, username, action):
    """Record one admin action. Failures are logged and never raised."""
    if content_type not in LOG_TARGETS:
        logger.warning("Ignoring admin log for unknown content type %r", content_type)
        return False
    try:
        admin_logs_repo.append(content_type, content_id, username or "admin", action, time.time())
    except sqlite3.Error:
        logger.exception("Failed to add admin log for %s %s", content_type, content_id)
        return False
    return True


def _serialize(row):
    item = dict(row)
    item["created_at"] = float(item["created_at"])
    return item


def get_logs(content_type, content_id):
    return [_serialize(row) for row in admin_logs_repo.list_for(content_type, content_id)]


def recent_logs(limit=50):
    return [_serialize(row) for row in admin_logs_repo.recent(limit)]


def delete_logs(content_type, content_id):
    try:
        admin_logs_repo.delete_for(content_type, content_id)
    except sqlite3.Error:
        logger.exception("Failed to delete admin logs for %s %s", content_type, content_id)
