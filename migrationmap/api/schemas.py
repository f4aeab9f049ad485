"""Pydantic schemas for API response serialization."""

from __future__ import annotations

from pydantic import BaseModel

# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------


class RegionMigrationOut(BaseModel):
    code: str
    name: str | None = None
    immigration: int
    emigration: int
    net_migration: int
    hue: float
    color: str


class MigrationListOut(BaseModel):
    total: int
    from_cache: bool
    data: list[RegionMigrationOut]


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------


class StyleOut(BaseModel):
    color: str
    weight: int


# ---------------------------------------------------------------------------
# Health / cache
# ---------------------------------------------------------------------------


class HealthOut(BaseModel):
    status: str
    cache: str


class CacheClearOut(BaseModel):
    evicted: int
