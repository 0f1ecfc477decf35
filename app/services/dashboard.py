"""Admin dashboard counters and a health report that never raises."""

import logging
import sqlite3

from app.content_types import ContentType
from app.db import get_db
from app.repos import business as business_repo
from app.repos import content as content_repo
from app.repos import tags as tags_repo

logger = logging.getLogger(__name__)

PENDING_STATUS = 2


def _status_block(counts):
    return {
        "total": sum(counts.values()),
        "published": counts.get(1, 0),
        "pending": counts.get(PENDING_STATUS, 0),
        "refused": counts.get(0, 0),
    }


def get_counts():
    counts = {ct.value: _status_block(content_repo.count_by_status(ct)) for ct in ContentType}
    business = business_repo.count_by_status()
    counts["business"] = {"total": sum(business.values()), "by_status": business}
    counts["tags"] = {"total": tags_repo.count()}
    counts["pending_total"] = sum(counts[ct.value]["pending"] for ct in ContentType)
    return counts


def _check_database():
    try:
        get_db().execute("SELECT 1").fetchone()
    except sqlite3.Error as exc:
        logger.warning("Database health check failed: %s", exc)
        return {"status": "error", "error": str(exc)}
    return {"status": "ok"}


def _check_cache(cache):
    if cache is None:
        return {"status": "error", "error": "cache not configured"}
    try:
        ok = cache.ping()
    except Exception as exc:
        logger.warning("Cache health check failed: %s", exc)
        return {"status": "error", "error": str(exc)}
    return {"status": "ok", "entries": len(cache)} if ok else {"status": "error", "error": "ping failed"}


def health(cache):
    checks = {"database": _check_database(), "cache": _check_cache(cache)}
    status = "ok" if all(c["status"] == "ok" for c in checks.values()) else "degraded"
    return {"status": status, "checks": checks}


def get_dashboard(cache):
    report = health(cache)
    counts = {}
    if report["checks"]["database"]["status"] == "ok":
        try:
            counts = get_counts()
        except sqlite3.Error as exc:
            logger.warning("Dashboard counts unavailable: %s", exc)
            report["status"] = "degraded"
    return {"counts": counts, "health": report}
