"""Policy file loading.

Configuration errors fail open: a missing, unreadable or invalid policy file
yields a disabled policy and a warning, never an exception.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from shellguard.exceptions import PolicyLoadError
from shellguard.logging import get_logger
from shellguard.models.policy import Policy
from shellguard.policy.defaults import default_policy_document

logger = get_logger(__name__)


def read_policy(path: Path | str) -> Policy:
    """Parse the policy at ``path``; raises ``PolicyLoadError`` on any failure."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PolicyLoadError(f"Cannot read policy: {exc}", path=str(path)) from exc

    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise PolicyLoadError(f"Malformed policy JSON: {exc}", path=str(path)) from exc

    if not isinstance(data, dict):
        raise PolicyLoadError("Policy document must be a JSON object", path=str(path))

    try:
        return Policy.model_validate(data)
    except ValidationError as exc:
        raise PolicyLoadError(f"Invalid policy: {exc}", path=str(path)) from exc


def load_policy(path: Path | str) -> Policy:
    path = Path(path)
    if not path.exists():
        logger.warning("policy_not_found", path=str(path))
        return Policy.disabled()

    try:
        return read_policy(path)
    except PolicyLoadError as exc:
        logger.warning("policy_load_failed", path=exc.path, error=str(exc))
        return Policy.disabled()


def write_default_policy(path: Path | str, overwrite: bool = False) -> Path:
    path = Path(path)
    if path.exists() and not overwrite:
        raise FileExistsError(f"Policy already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(default_policy_document(), indent=2) + "\n", encoding="utf-8")
    return path
