"""Per-request SQLite connection helpers and schema bootstrap."""

import sqlite3

from flask import current_app, g

from recommender.weights import normalize_tag


SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT NOT NULL UNIQUE,
    password_hash TEXT,
    is_admin INTEGER DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS anime (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    nice_url TEXT,
    original_title TEXT,
    french_title TEXT,
    alt_titles TEXT,
    year INTEGER,
    format TEXT,
    episodes INTEGER,
    episode_duration TEXT,
    studio TEXT,
    director TEXT,
    synopsis TEXT,
    image TEXT,
    official_site TEXT,
    sources TEXT,
    comment TEXT,
    status INTEGER DEFAULT 0,
    complete INTEGER DEFAULT 0,
    average_rating REAL DEFAULT 0,
    review_count INTEGER DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS manga (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    nice_url TEXT,
    original_title TEXT,
    french_title TEXT,
    alt_titles TEXT,
    year INTEGER,
    author TEXT,
    publisher TEXT,
    volumes TEXT,
    isbn TEXT,
    tags TEXT,
    synopsis TEXT,
    image TEXT,
    sources TEXT,
    comment TEXT,
    status INTEGER DEFAULT 0,
    complete INTEGER DEFAULT 0,
    average_rating REAL DEFAULT 0,
    review_count INTEGER DEFAULT 0,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS business (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    nice_url TEXT,
    type TEXT,
    origin TEXT,
    notes TEXT,
    status INTEGER DEFAULT 1,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS business_relations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    business_id INTEGER NOT NULL,
    content_type TEXT NOT NULL,
    content_id INTEGER NOT NULL,
    role TEXT,
    UNIQUE (business_id, content_type, content_id, role)
);

CREATE TABLE IF NOT EXISTS tags (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL UNIQUE,
    description TEXT,
    category TEXT
);

CREATE TABLE IF NOT EXISTS tag_links (
    tag_id INTEGER NOT NULL,
    content_type TEXT NOT NULL,
    content_id INTEGER NOT NULL,
    PRIMARY KEY (tag_id, content_type, content_id)
);

CREATE TABLE IF NOT EXISTS content_relations (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    source_type TEXT NOT NULL,
    source_id INTEGER NOT NULL,
    target_type TEXT NOT NULL,
    target_id INTEGER NOT NULL,
    UNIQUE (source_type, source_id, target_type, target_id)
);

CREATE TABLE IF NOT EXISTS collection_entries (
    user_id INTEGER NOT NULL,
    content_type TEXT NOT NULL,
    content_id INTEGER NOT NULL,
    status INTEGER NOT NULL DEFAULT 3,
    rating REAL,
    notes TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (user_id, content_type, content_id)
);

CREATE TABLE IF NOT EXISTS admin_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    content_type TEXT NOT NULL,
    content_id INTEGER NOT NULL,
    username TEXT NOT NULL,
    action TEXT NOT NULL,
    created_at REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_business_relations_content
    ON business_relations (content_type, content_id);
CREATE INDEX IF NOT EXISTS idx_tag_links_content ON tag_links (content_type, content_id);
CREATE INDEX IF NOT EXISTS idx_collection_user ON collection_entries (user_id, status);
CREATE INDEX IF NOT EXISTS idx_admin_logs_content
    ON admin_logs (content_type, content_id, created_at);
"""


def unicode_lower(value):
    # SQLite lower() only folds ASCII; "École" must compare equal to "école"
    if value is None:
        return None
    return str(value).lower()


def connect(db_path):
    db = sqlite3.connect(db_path)
    db.row_factory = sqlite3.Row
    db.create_function("unicode_lower", 1, unicode_lower, deterministic=True)
    db.create_function("tag_key", 1, normalize_tag, deterministic=True)
    return db


def init_db(db_path):
    """Create any missing tables; safe to run on every start."""
    db = connect(db_path)
    try:
        db.executescript(SCHEMA)
        db.commit()
    finally:
        db.close()


def get_db():
    """Return the request-scoped connection, opening it on first use."""
    if "db" not in g:
        g.db = connect(current_app.config["DATABASE"])
    return g.db


def close_db(_error=None):
    db = g.pop("db", None)
    if db is not None:
        db.close()


def row_to_dict(row):
    return dict(row) if row is not None else None
