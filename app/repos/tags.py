"""Data-access helpers for tags and their attachment to catalog rows."""

from app.db import get_db


def list_tags(category=None, search=None):
    clauses = []
    params = []
    if category:
        clauses.append("category = ?")
        params.append(category)
    if search:
        clauses.append("name LIKE ?")
        params.append(f"%{search}%")
    where_sql = ("WHERE " + " AND ".join(clauses)) if clauses else ""
    db = get_db()
    return db.execute(
        f"SELECT id, name, description, category FROM tags {where_sql} ORDER BY category, name",
        params,
    ).fetchall()


def list_categories():
    db = get_db()
    rows = db.execute(
        "SELECT DISTINCT category FROM tags WHERE category IS NOT NULL ORDER BY category"
    ).fetchall()
    return [row[0] for row in rows]


def get(tag_id):
    db = get_db()
    return db.execute(
        "SELECT id, name, description, category FROM tags WHERE id = ?", (tag_id,)
    ).fetchone()


def find_by_name(name, exclude_id=None):
    db = get_db()
    sql = "SELECT id FROM tags WHERE unicode_lower(name) = unicode_lower(?)"
    params = [name]
    if exclude_id is not None:
        sql += " AND id != ?"
        params.append(exclude_id)
    return db.execute(sql + " LIMIT 1", params).fetchone()


def insert(name, description=None, category=None):
    db = get_db()
    cur = db.execute(
        "INSERT INTO tags (name, description, category) VALUES (?, ?, ?)",
        (name, description, category),
    )
    db.commit()
    return cur.lastrowid


def update(tag_id, name, description=None, category=None):
    db = get_db()
    db.execute(
        "UPDATE tags SET name = ?, description = ?, category = ? WHERE id = ?",
        (name, description, category, tag_id),
    )
    db.commit()


def delete(tag_id):
    db = get_db()
    db.execute("DELETE FROM tags WHERE id = ?", (tag_id,))
    db.commit()


def usage_count(tag_id):
    db = get_db()
    row = db.execute("SELECT COUNT(*) FROM tag_links WHERE tag_id = ?", (tag_id,)).fetchone()
    return int(row[0])


def count():
    db = get_db()
    return int(db.execute("SELECT COUNT(*) FROM tags").fetchone()[0])


def search(query, limit=10, category=None):
    db = get_db()
    sql = "SELECT id, name, category FROM tags WHERE name LIKE ?"
    params = [f"%{query}%"]
    if category:
        sql += " AND category LIKE ?"
        params.append(category)
    sql += " ORDER BY name LIMIT ?"
    params.append(limit)
    return db.execute(sql, params).fetchall()


def list_for_content(content_type, content_id):
    db = get_db()
    return db.execute(
        """
        SELECT t.id, t.name, t.description, t.category
        FROM tag_links l
        JOIN tags t ON t.id = l.tag_id
        WHERE l.content_type = ? AND l.content_id = ?
        ORDER BY t.name
        """,
        (content_type, content_id),
    ).fetchall()


def is_linked(tag_id, content_type, content_id):
    db = get_db()
    row = db.execute(
        "SELECT 1 FROM tag_links WHERE tag_id = ? AND content_type = ? AND content_id = ? LIMIT 1",
        (tag_id, content_type, content_id),
    ).fetchone()
    return row is not None


def link(tag_id, content_type, content_id):
    db = get_db()
    db.execute(
        "INSERT OR IGNORE INTO tag_links (tag_id, content_type, content_id) VALUES (?, ?, ?)",
        (tag_id, content_type, content_id),
    )
    db.commit()


def unlink(tag_id, content_type, content_id):
    db = get_db()
    db.execute(
        "DELETE FROM tag_links WHERE tag_id = ? AND content_type = ? AND content_id = ?",
        (tag_id, content_type, content_id),
    )
    db.commit()
