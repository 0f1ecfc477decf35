"""Data-access helpers for links between catalog rows (sequels, adaptations)."""

from app.db import get_db


def find(source_type, source_id, target_type, target_id):
    db = get_db()
    return db.execute(
        """
        SELECT id FROM content_relations
        WHERE source_type = ? AND source_id = ? AND target_type = ? AND target_id = ?
        LIMIT 1
        """,
        (source_type, source_id, target_type, target_id),
    ).fetchone()


def insert(source_type, source_id, target_type, target_id):
    db = get_db()
    cur = db.execute(
        """
        INSERT INTO content_relations (source_type, source_id, target_type, target_id)
        VALUES (?, ?, ?, ?)
        """,
        (source_type, source_id, target_type, target_id),
    )
    db.commit()
    return cur.lastrowid


def list_for(content_type, content_id):
    # Query both directions so a link shows up from either end.
    db = get_db()
    return db.execute(
        """
        SELECT base.id AS relation_id,
               base.related_type,
               base.related_id,
               COALESCE(a.title, m.title) AS related_title
        FROM (
            SELECT id, target_type AS related_type, target_id AS related_id
            FROM content_relations
            WHERE source_type = ? AND source_id = ?
            UNION ALL
            SELECT id, source_type AS related_type, source_id AS related_id
            FROM content_relations
            WHERE target_type = ? AND target_id = ?
        ) AS base
        LEFT JOIN anime a ON base.related_type = 'anime' AND a.id = base.related_id
        LEFT JOIN manga m ON base.related_type = 'manga' AND m.id = base.related_id
        ORDER BY base.id
        """,
        (content_type, content_id, content_type, content_id),
    ).fetchall()


def delete(relation_id):
    db = get_db()
    cur = db.execute("DELETE FROM content_relations WHERE id = ?", (relation_id,))
    db.commit()
    return cur.rowcount
