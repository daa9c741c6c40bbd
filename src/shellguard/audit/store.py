"""SQLite-backed history of guard decisions."""

from __future__ import annotations

import uuid
from pathlib import Path

import aiosqlite

from shellguard.audit.migrations import TABLES
from shellguard.audit.records import DecisionRecord
from shellguard.audit.security_log import decision_label
from shellguard.models.decision import GuardDecision

_COLUMNS = (
    "id, action, command, working_directory, reason, risk_level, category, "
    "matched_pattern, user_response, bypassed, created_at"
)


class DecisionStore:
    def __init__(self, db_path: Path | str = ":memory:") -> None:
        self.db_path = str(db_path)
        self._db: aiosqlite.Connection | None = None

    async def initialize(self) -> None:
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self.db_path)
        for table_sql in TABLES:
            await self._db.execute(table_sql)
        await self._db.commit()

    async def close(self) -> None:
        if self._db:
            await self._db.close()
            self._db = None

    def _get_db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("DecisionStore not initialized — call initialize() first")
        return self._db

    async def log_decision(self, decision: GuardDecision) -> DecisionRecord:
        result = decision.result
        record = DecisionRecord(
            id=uuid.uuid4().hex,
            action=decision_label(decision),
            command=decision.command,
            working_directory=decision.working_directory,
            reason=result.reason,
            risk_level=None if decision.bypassed else result.risk_level.value,
            category=result.category,
            matched_pattern=result.matched_pattern,
            user_response=decision.user_response,
            bypassed=decision.bypassed,
            created_at=decision.decided_at,
        )
        db = self._get_db()
        await db.execute(
            f"INSERT INTO decisions ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                record.id,
                record.action,
                record.command,
                record.working_directory,
                record.reason,
                record.risk_level,
                record.category,
                record.matched_pattern,
                record.user_response,
                int(record.bypassed),
                record.created_at.isoformat(),
            ),
        )
        await db.commit()
        return record

    async def get_decision(self, decision_id: str) -> DecisionRecord | None:
        db = self._get_db()
        cursor = await db.execute(
            f"SELECT {_COLUMNS} FROM decisions WHERE id = ?",
            (decision_id,),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return _to_record(row)

    async def get_history(self, limit: int = 20, action: str | None = None) -> list[DecisionRecord]:
        db = self._get_db()
        if action is None:
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM decisions ORDER BY created_at DESC LIMIT ?",
                (limit,),
            )
        else:
            cursor = await db.execute(
                f"SELECT {_COLUMNS} FROM decisions WHERE action = ? "
                "ORDER BY created_at DESC LIMIT ?",
                (action, limit),
            )
        rows = await cursor.fetchall()
        return [_to_record(r) for r in rows]


def _to_record(row) -> DecisionRecord:
    return DecisionRecord(
        id=row[0],
        action=row[1],
        command=row[2],
        working_directory=row[3],
        reason=row[4],
        risk_level=row[5],
        category=row[6],
        matched_pattern=row[7],
        user_response=row[8],
        bypassed=bool(row[9]),
        created_at=row[10],
    )
