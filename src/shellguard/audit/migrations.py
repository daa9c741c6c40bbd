"""SQLite CREATE TABLE statements."""

from __future__ import annotations

TABLES: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS decisions (
        id TEXT PRIMARY KEY,
        action TEXT NOT NULL,
        command TEXT NOT NULL,
        working_directory TEXT NOT NULL,
        reason TEXT DEFAULT '',
        risk_level TEXT,
        category TEXT,
        matched_pattern TEXT,
        user_response TEXT,
        bypassed INTEGER DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE INDEX IF NOT EXISTS idx_decisions_created_at
    ON decisions (created_at)
    """,
]
