"""Append-only storage for admin activity on catalog rows."""

from app.db import get_db


def append(content_type, content_id, username, action, created_at):
    db = get_db()
    db.execute(
        """
        INSERT INTO admin_logs (content_type, content_id, username, action, created_at)
        VALUES (?, ?, ?, ?, ?)
        """,
        (content_type, content_id, username, action, created_at),
    )
    db.commit()


def list_for(content_type, content_id):
    db = get_db()
    return db.execute(
        """
        SELECT id, content_type, content_id, username, action, created_at
        FROM admin_logs
        WHERE content_type = ? AND content_id = ?
        ORDER BY created_at DESC, id DESC
        """,
        (content_type, content_id),
    ).fetchall()


def recent(limit=50):
    db = get_db()
    return db.execute(
        """
        SELECT l.id, l.content_type, l.content_id, l.username, l.action, l.created_at,
               COALESCE(a.title, m.title, b.name) AS content_title
        FROM admin_logs l
        LEFT JOIN anime a ON l.content_type = 'anime' AND a.id = l.content_id
        LEFT JOIN manga m ON l.content_type = 'manga' AND m.id = l.content_id
        LEFT JOIN business b ON l.content_type = 'business' AND b.id = l.content_id
        ORDER BY l.created_at DESC, l.id DESC
        LIMIT ?
        """,
        (limit,),
    ).fetchall()


def delete_for(content_type, content_id):
    db = get_db()
    db.execute(
        "DELETE FROM admin_logs WHERE content_type = ? AND content_id = ?",
        (content_type, content_id),
    )
    db.commit()
