"""Read-only catalog queries backing the recommendation pipeline."""

from app.db import get_db

CHUNK_SIZE = 200


def business_names(content_type, content_ids):
    """Map content id -> list of linked business names (one per relation)."""
    ids = sorted({int(cid) for cid in content_ids})
    results = {cid: [] for cid in ids}
    if not ids:
        return results
    db = get_db()
    for i in range(0, len(ids), CHUNK_SIZE):
        chunk = ids[i : i + CHUNK_SIZE]
        placeholders = ",".join(["?"] * len(chunk))
        rows = db.execute(
            f"""
            SELECT r.content_id, b.name
            FROM business_relations r
            JOIN business b ON b.id = r.business_id
            WHERE r.content_type = ? AND r.content_id IN ({placeholders})
            ORDER BY r.content_id, r.id
            """,
            [content_type, *chunk],
        ).fetchall()
        for row in rows:
            if row["name"]:
                results[int(row["content_id"])].append(row["name"])
    return results


def taste_rows(user_id, content_types, statuses):
    """Collection rows that define a user's taste, with the manga tag column."""
    if not content_types or not statuses:
        return []
    type_marks = ",".join(["?"] * len(content_types))
    status_marks = ",".join(["?"] * len(statuses))
    db = get_db()
    return db.execute(
        f"""
        SELECT ce.user_id, ce.content_type, ce.content_id, ce.status, ce.rating,
               CASE WHEN ce.content_type = 'manga' THEN m.tags END AS tags
        FROM collection_entries ce
        LEFT JOIN manga m ON ce.content_type = 'manga' AND m.id = ce.content_id
        WHERE ce.user_id = ?
          AND ce.content_type IN ({type_marks})
          AND ce.status IN ({status_marks})
        ORDER BY ce.content_type, ce.content_id
        """,
        [user_id, *content_types, *statuses],
    ).fetchall()


def _escape_like(text):
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _top_tag_clause(top_tags, with_tag_column):
    marks = ",".join(["?"] * len(top_tags))
    clause = f"""
        EXISTS (
            SELECT 1 FROM business_relations r
            JOIN business b ON b.id = r.business_id
            WHERE r.content_type = ? AND r.content_id = c.id
              AND tag_key(b.name) IN ({marks})
        )
    """
    params = list(top_tags)
    if with_tag_column:
        # Substring match narrows the set; exact tag matching happens in scoring.
        likes = " OR ".join(["unicode_lower(c.tags) LIKE ? ESCAPE '\\'"] * len(top_tags))
        clause = f"({clause} OR {likes})"
        params.extend(f"%{_escape_like(tag)}%" for tag in top_tags)
    return clause, params


def candidate_rows(content_type, user_id, top_tags):
    """Complete catalog rows outside the user's collection sharing a top tag."""
    if not top_tags:
        return []
    kind = content_type.value
    clause, tag_params = _top_tag_clause(top_tags, content_type.has_tag_column)
    tag_column = "c.tags" if content_type.has_tag_column else "NULL"
    db = get_db()
    return db.execute(
        f"""
        SELECT c.id, c.title, c.french_title, c.image, c.synopsis, c.year,
               c.average_rating, c.review_count, {tag_column} AS tags
        FROM {content_type.table} c
        WHERE c.complete = 1
          AND NOT EXISTS (
              SELECT 1 FROM collection_entries ce
              WHERE ce.user_id = ? AND ce.content_type = ? AND ce.content_id = c.id
          )
          AND {clause}
        ORDER BY c.id
        """,
        [user_id, kind, kind, *tag_params],
    ).fetchall()
