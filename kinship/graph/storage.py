"""SQLite connection helpers and the shared graph schema.

The type registry and the edge store share one database file so the
foreign key from edges to types is enforced by SQLite itself.
"""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

GRAPH_SCHEMA = """
CREATE TABLE IF NOT EXISTS relationship_types (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    slug TEXT UNIQUE NOT NULL,
    label TEXT NOT NULL,
    category TEXT NOT NULL,
    inverse_slug TEXT,
    is_system INTEGER DEFAULT 0,
    sort_order INTEGER DEFAULT 0,
    tenant_id INTEGER,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_type_tenant_category ON relationship_types(tenant_id, category);

CREATE TABLE IF NOT EXISTS relationship_edges (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    tenant_id INTEGER NOT NULL,
    from_member_id INTEGER NOT NULL,
    to_member_id INTEGER NOT NULL,
    type_slug TEXT NOT NULL,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP,

    UNIQUE (from_member_id, to_member_id, type_slug),
    CHECK (from_member_id <> to_member_id),
    FOREIGN KEY (type_slug) REFERENCES relationship_types(slug)
);
CREATE INDEX IF NOT EXISTS idx_edge_from ON relationship_edges(from_member_id);
CREATE INDEX IF NOT EXISTS idx_edge_to ON relationship_edges(to_member_id);
CREATE INDEX IF NOT EXISTS idx_edge_type ON relationship_edges(type_slug);
"""


@contextmanager
def connect(db_path: str, timeout: float = 5.0) -> Iterator[sqlite3.Connection]:
    """Open a connection; commit on success, roll back on error, always close."""
    conn = sqlite3.connect(db_path, timeout=timeout)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        with conn:
            yield conn
    finally:
        conn.close()


@contextmanager
def write_transaction(db_path: str, timeout: float = 5.0) -> Iterator[sqlite3.Connection]:
    """Connection holding SQLite's write lock from the first statement."""
    with connect(db_path, timeout) as conn:
        conn.execute("BEGIN IMMEDIATE")
        yield conn


def ensure_schema(db_path: str, timeout: float = 5.0) -> None:
    """Create the graph tables if needed."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    with connect(db_path, timeout) as conn:
        conn.execute("PRAGMA journal_mode = WAL")
        conn.executescript(GRAPH_SCHEMA)
