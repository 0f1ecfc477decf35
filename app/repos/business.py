"""Data-access helpers for business entities and their content links."""

from app.db import get_db

FIELDS = ("name", "nice_url", "type", "origin", "notes", "status")


def list_items(search=None, type_filter=None, status=None, limit=20, offset=0):
    clauses = []
    params = []
    if status is not None:
        clauses.append("status = ?")
        params.append(status)
    if type_filter:
        clauses.append("type LIKE ?")
        params.append(f"%{type_filter}%")
    if search:
        clauses.append("name LIKE ?")
        params.append(f"%{search}%")
    where_sql = ("WHERE " + " AND ".join(clauses)) if clauses else ""
    db = get_db()
    rows = db.execute(
        f"SELECT * FROM business {where_sql} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
        (*params, limit, offset),
    ).fetchall()
    total = db.execute(f"SELECT COUNT(*) FROM business {where_sql}", params).fetchone()[0]
    return rows, int(total)


def get(business_id):
    db = get_db()
    return db.execute("SELECT * FROM business WHERE id = ?", (business_id,)).fetchone()


def find_by_name(name, exclude_id=None):
    db = get_db()
    sql = "SELECT * FROM business WHERE unicode_lower(name) = unicode_lower(?)"
    params = [name]
    if exclude_id is not None:
        sql += " AND id != ?"
        params.append(exclude_id)
    return db.execute(sql + " LIMIT 1", params).fetchone()


def insert(data):
    columns = [key for key in data if key in FIELDS]
    db = get_db()
    cur = db.execute(
        f"INSERT INTO business ({', '.join(columns)}) VALUES ({', '.join(['?'] * len(columns))})",
        [data[key] for key in columns],
    )
    db.commit()
    return cur.lastrowid


def update(business_id, data):
    columns = [key for key in data if key in FIELDS]
    if not columns:
        return
    db = get_db()
    db.execute(
        f"UPDATE business SET {', '.join(f'{key} = ?' for key in columns)} WHERE id = ?",
        [data[key] for key in columns] + [business_id],
    )
    db.commit()


def delete(business_id):
    db = get_db()
    db.execute("DELETE FROM business_relations WHERE business_id = ?", (business_id,))
    db.execute("DELETE FROM business WHERE id = ?", (business_id,))
    db.commit()


def count_by_status():
    db = get_db()
    rows = db.execute("SELECT status, COUNT(*) AS total FROM business GROUP BY status").fetchall()
    return {int(row["status"] or 0): int(row["total"]) for row in rows}


# Business <-> content links ("staff" of an anime/manga).
def find_relation(business_id, content_type, content_id, role):
    db = get_db()
    return db.execute(
        """
        SELECT * FROM business_relations
        WHERE business_id = ? AND content_type = ? AND content_id = ? AND COALESCE(role, '') = ?
        LIMIT 1
        """,
        (business_id, content_type, content_id, role or ""),
    ).fetchone()


def add_relation(business_id, content_type, content_id, role):
    db = get_db()
    cur = db.execute(
        "INSERT INTO business_relations (business_id, content_type, content_id, role) VALUES (?, ?, ?, ?)",
        (business_id, content_type, content_id, role),
    )
    db.commit()
    return cur.lastrowid


def remove_relation(business_id, content_type, content_id, role=None):
    db = get_db()
    sql = "DELETE FROM business_relations WHERE business_id = ? AND content_type = ? AND content_id = ?"
    params = [business_id, content_type, content_id]
    if role:
        sql += " AND role = ?"
        params.append(role)
    cur = db.execute(sql, params)
    db.commit()
    return cur.rowcount


def list_staff(content_type, content_id):
    db = get_db()
    return db.execute(
        """
        SELECT r.id AS relation_id, r.role, b.id AS business_id, b.name, b.type
        FROM business_relations r
        JOIN business b ON b.id = r.business_id
        WHERE r.content_type = ? AND r.content_id = ?
        ORDER BY b.name COLLATE NOCASE, r.role
        """,
        (content_type, content_id),
    ).fetchall()
