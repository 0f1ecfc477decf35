"""Data-access helpers for user collection entries."""

from app.db import get_db

SORTS = {
    "recent": "ce.updated_at DESC, ce.content_id DESC",
    "rating": "(ce.rating IS NULL), ce.rating DESC, ce.content_id",
    "title": "title COLLATE NOCASE ASC",
}


def get_entry(user_id, content_type, content_id):
    db = get_db()
    return db.execute(
        """
        SELECT * FROM collection_entries
        WHERE user_id = ? AND content_type = ? AND content_id = ?
        """,
        (user_id, content_type, content_id),
    ).fetchone()


def upsert(user_id, content_type, content_id, status, rating, notes=None):
    # One entry per user/content; re-adding moves it between statuses.
    db = get_db()
    db.execute(
        """
        INSERT INTO collection_entries (user_id, content_type, content_id, status, rating, notes)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT(user_id, content_type, content_id) DO UPDATE SET
            status = excluded.status,
            rating = excluded.rating,
            notes = excluded.notes,
            updated_at = CURRENT_TIMESTAMP
        """,
        (user_id, content_type, content_id, status, rating, notes),
    )
    db.commit()


def update_rating(user_id, content_type, content_id, rating):
    db = get_db()
    cur = db.execute(
        """
        UPDATE collection_entries
        SET rating = ?, updated_at = CURRENT_TIMESTAMP
        WHERE user_id = ? AND content_type = ? AND content_id = ?
        """,
        (rating, user_id, content_type, content_id),
    )
    db.commit()
    return cur.rowcount


def delete(user_id, content_type, content_id):
    db = get_db()
    cur = db.execute(
        "DELETE FROM collection_entries WHERE user_id = ? AND content_type = ? AND content_id = ?",
        (user_id, content_type, content_id),
    )
    db.commit()
    return cur.rowcount


def list_by_user(user_id, content_type, status=None, sort="recent"):
    order_sql = SORTS.get(sort, SORTS["recent"])
    table = "anime" if content_type == "anime" else "manga"
    sql = f"""
        SELECT ce.user_id, ce.content_type, ce.content_id, ce.status, ce.rating, ce.notes,
               ce.created_at, ce.updated_at, c.title, c.image
        FROM collection_entries ce
        LEFT JOIN {table} c ON c.id = ce.content_id
        WHERE ce.user_id = ? AND ce.content_type = ?
    """
    params = [user_id, content_type]
    if status is not None:
        sql += " AND ce.status = ?"
        params.append(status)
    db = get_db()
    return db.execute(f"{sql} ORDER BY {order_sql}", params).fetchall()


def list_keys(user_id):
    """Every (content_type, content_id) the user holds, whatever the status."""
    db = get_db()
    rows = db.execute(
        "SELECT content_type, content_id FROM collection_entries WHERE user_id = ?",
        (user_id,),
    ).fetchall()
    return {(row["content_type"], int(row["content_id"])) for row in rows}


def status_counts(user_id, content_type):
    db = get_db()
    rows = db.execute(
        """
        SELECT status, COUNT(*) AS total FROM collection_entries
        WHERE user_id = ? AND content_type = ?
        GROUP BY status
        """,
        (user_id, content_type),
    ).fetchall()
    return {int(row["status"]): int(row["total"]) for row in rows}
