"""Manifest schema — the per-package package.yml document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_constraint(value: object) -> object:
    if isinstance(value, str):
        return value.strip() or None
    return value


class Manifest(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True)

    package: str
    description: str = ""
    requires: dict[str, str | None] = Field(default_factory=dict)
    conflicts: dict[str, str | None] = Field(default_factory=dict)
    perl_ignore: list[str] = Field(default_factory=list)

    @field_validator("package", "description", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str | None) -> str | None:
        if v is None:
            return ""
        return v.strip() if isinstance(v, str) else v

    @field_validator("requires", "conflicts", mode="before")
    @classmethod
    def _normalise_mapping(cls, v: object) -> object:
        if v is None:
            return {}
        if isinstance(v, dict):
            return {k: _as_constraint(c) for k, c in v.items()}
        return v

    @field_validator("perl_ignore", mode="before")
    @classmethod
    def _normalise_ignore(cls, v: object) -> object:
        if v is None:
            return []
        return v
