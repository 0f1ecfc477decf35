"""Data-access helpers for anime and manga catalog rows."""

from app.db import get_db

SORTABLE = {"created_at", "title", "year", "id", "status", "average_rating", "review_count"}


def _where(search=None, year=None, status=None, complete=None):
    clauses = []
    params = []
    if search:
        like = f"%{search}%"
        clauses.append(
            "(title LIKE ? OR original_title LIKE ? OR french_title LIKE ? OR alt_titles LIKE ?)"
        )
        params.extend([like, like, like, like])
    if year is not None:
        clauses.append("year = ?")
        params.append(year)
    if status is not None:
        clauses.append("status = ?")
        params.append(status)
    if complete is not None:
        clauses.append("complete = ?")
        params.append(complete)
    sql = ("WHERE " + " AND ".join(clauses)) if clauses else ""
    return sql, params


def list_items(content_type, search=None, year=None, status=None, complete=None,
               sort_by="created_at", sort_order="desc", limit=20, offset=0):
    # Sorting uses fixed SQL fragments selected from known columns.
    if sort_by not in SORTABLE:
        sort_by = "created_at"
    direction = "ASC" if str(sort_order).lower() == "asc" else "DESC"
    order = []
    if status is None:
        # Pending (2) before published (1) before refused (0)
        order.append("status DESC")
    order.append(f"({sort_by} IS NULL), {sort_by} {direction}")
    order.append("id DESC")

    where_sql, params = _where(search, year, status, complete)
    db = get_db()
    table = content_type.table
    rows = db.execute(
        f"SELECT * FROM {table} {where_sql} ORDER BY {', '.join(order)} LIMIT ? OFFSET ?",
        (*params, limit, offset),
    ).fetchall()
    total = db.execute(f"SELECT COUNT(*) FROM {table} {where_sql}", params).fetchone()[0]
    return rows, int(total)


def get(content_type, content_id):
    db = get_db()
    return db.execute(
        f"SELECT * FROM {content_type.table} WHERE id = ?", (content_id,)
    ).fetchone()


def exists(content_type, content_id):
    db = get_db()
    row = db.execute(
        f"SELECT 1 FROM {content_type.table} WHERE id = ? LIMIT 1", (content_id,)
    ).fetchone()
    return row is not None


def find_by_title(content_type, title, exclude_id=None):
    # Duplicate-name check is case-insensitive on the main title.
    db = get_db()
    sql = f"SELECT id, title FROM {content_type.table} WHERE unicode_lower(title) = unicode_lower(?)"
    params = [title]
    if exclude_id is not None:
        sql += " AND id != ?"
        params.append(exclude_id)
    return db.execute(sql + " LIMIT 1", params).fetchone()


def insert(content_type, data):
    columns = [key for key in data if key in content_type.fields]
    placeholders = ", ".join(["?"] * len(columns))
    db = get_db()
    cur = db.execute(
        f"INSERT INTO {content_type.table} ({', '.join(columns)}) VALUES ({placeholders})",
        [data[key] for key in columns],
    )
    db.commit()
    return cur.lastrowid


def update(content_type, content_id, data):
    columns = [key for key in data if key in content_type.fields]
    if not columns:
        return
    assignments = ", ".join(f"{key} = ?" for key in columns)
    db = get_db()
    db.execute(
        f"UPDATE {content_type.table} SET {assignments} WHERE id = ?",
        [data[key] for key in columns] + [content_id],
    )
    db.commit()


def update_status(content_type, content_id, status):
    db = get_db()
    db.execute(f"UPDATE {content_type.table} SET status = ? WHERE id = ?", (status, content_id))
    db.commit()


def delete(content_type, content_id):
    # Remove the row together with every link pointing at it.
    kind = content_type.value
    db = get_db()
    db.execute(f"DELETE FROM {content_type.table} WHERE id = ?", (content_id,))
    db.execute(
        "DELETE FROM tag_links WHERE content_type = ? AND content_id = ?", (kind, content_id)
    )
    db.execute(
        "DELETE FROM business_relations WHERE content_type = ? AND content_id = ?",
        (kind, content_id),
    )
    db.execute(
        """
        DELETE FROM content_relations
        WHERE (source_type = ? AND source_id = ?) OR (target_type = ? AND target_id = ?)
        """,
        (kind, content_id, kind, content_id),
    )
    db.commit()


def search_by_name(content_type, query, limit=10):
    db = get_db()
    like = f"%{query}%"
    return db.execute(
        f"""
        SELECT id, title, original_title, status
        FROM {content_type.table}
        WHERE title LIKE ? OR original_title LIKE ?
        ORDER BY title COLLATE NOCASE
        LIMIT ?
        """,
        (like, like, limit),
    ).fetchall()


def count_by_status(content_type):
    db = get_db()
    rows = db.execute(
        f"SELECT status, COUNT(*) AS total FROM {content_type.table} GROUP BY status"
    ).fetchall()
    return {int(row["status"] or 0): int(row["total"]) for row in rows}
