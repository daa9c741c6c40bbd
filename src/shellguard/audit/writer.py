"""Append-only JSON-lines writer shared by every log file."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


def append_line(path: Path, line: str) -> None:
    # One write call per record; hook processes may append concurrently.
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as fh:
        fh.write(line.rstrip("\n") + "\n")


def append_record(path: Path, record: BaseModel) -> None:
    append_line(path, record.model_dump_json())
