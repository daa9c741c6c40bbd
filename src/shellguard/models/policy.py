"""Policy models — the parsed, immutable rule set consumed by the validator.

Field aliases match the keys of the JSON policy file, so a document can be
loaded with ``Policy.model_validate(data)``. A ``null`` list in the document is
read as an empty one.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FROZEN = ConfigDict(frozen=True, populate_by_name=True)


class Category(BaseModel):
    model_config = _FROZEN

    # A category without an "enabled" key is evaluated.
    enabled: bool = True
    block_patterns: tuple[str, ...] = ()
    confirm_patterns: tuple[str, ...] = Field(default=(), alias="require_confirmation")

    @field_validator("block_patterns", "confirm_patterns", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return () if value is None else value


class PathRestrictions(BaseModel):
    model_config = _FROZEN

    enabled: bool = False
    # Ordered so the reported prefix is deterministic when several match.
    blocked_paths: tuple[str, ...] = ()
    allowed_read_only_ops_outside_cwd: frozenset[str] = Field(
        default=frozenset(), alias="allowed_operations_outside_cwd"
    )
    confirm_ops_outside_cwd: frozenset[str] = Field(
        default=frozenset(), alias="always_require_confirmation_outside_cwd"
    )

    @field_validator(
        "blocked_paths",
        "allowed_read_only_ops_outside_cwd",
        "confirm_ops_outside_cwd",
        mode="before",
    )
    @classmethod
    def _null_as_empty(cls, value):
        return () if value is None else value


class BypassConfig(BaseModel):
    model_config = _FROZEN

    enabled: bool = False
    keyword: str = Field(default="", alias="bypass_keyword")


class LoggingConfig(BaseModel):
    model_config = _FROZEN

    enabled: bool = False


class Policy(BaseModel):
    model_config = _FROZEN

    enabled: bool = False
    # Read-only view; iteration order is the evaluation order.
    categories: Mapping[str, Category] = Field(
        default_factory=lambda: MappingProxyType({}), alias="policies"
    )
    path_restrictions: PathRestrictions = Field(default_factory=PathRestrictions)
    bypass: BypassConfig = Field(default_factory=BypassConfig)
    log_settings: LoggingConfig = Field(default_factory=LoggingConfig, alias="logging")

    @field_validator("categories", mode="before")
    @classmethod
    def _null_categories(cls, value):
        return {} if value is None else value

    @field_validator("categories")
    @classmethod
    def _freeze_categories(cls, value: Mapping[str, Category]) -> Mapping[str, Category]:
        return MappingProxyType(dict(value))

    @field_validator("path_restrictions", "bypass", "log_settings", mode="before")
    @classmethod
    def _null_section(cls, value):
        return {} if value is None else value

    @property
    def logging_enabled(self) -> bool:
        return self.log_settings.enabled

    @classmethod
    def disabled(cls) -> Policy:
        return cls(enabled=False)
