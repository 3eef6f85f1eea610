"""Database initialization and connection management."""
import sqlite3
from pathlib import Path

DEFAULT_DB_PATH = str(Path.home() / ".flashdeck" / "reviews.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS review_state (
    item_id INTEGER PRIMARY KEY,
    interval_days INTEGER NOT NULL DEFAULT 0,
    ease REAL NOT NULL,
    step INTEGER NOT NULL DEFAULT 0,
    due_at INTEGER NOT NULL,
    last_grade INTEGER,
    suspended INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_review_state_due_at ON review_state(due_at);

CREATE TABLE IF NOT EXISTS review_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    item_id INTEGER NOT NULL,
    reviewed_at INTEGER NOT NULL,
    grade INTEGER NOT NULL,
    interval_days INTEGER NOT NULL,
    ease REAL NOT NULL,
    step INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_review_log_item_id ON review_log(item_id);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()
