"""FastAPI REST endpoints for Muuttoliike."""

from __future__ import annotations

import asyncio
import io

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse

from migrationmap import config
from migrationmap.api.schemas import (
    CacheClearOut,
    HealthOut,
    MigrationListOut,
    RegionMigrationOut,
    StyleOut,
)
from migrationmap.models import Acquisition, RegionMigration
from migrationmap.pipeline import acquire
from migrationmap.processing.colors import hue, hue_to_css
from migrationmap.processing.decoder import table_to_frame
from migrationmap.rendering import region_names, style_feature
from migrationmap.storage.session_cache import SessionCache

router = APIRouter(prefix="/api/v1", tags=["Muuttoliike API"])

# One session per API process
_session_cache = SessionCache()

# Serializes cold acquisitions so the cache is filled by a single request
_acquire_lock = asyncio.Lock()


def get_cache() -> SessionCache:
    return _session_cache


async def get_acquisition(cache: SessionCache = Depends(get_cache)) -> Acquisition:
    async with _acquire_lock:
        acquisition = await acquire(cache)
    if acquisition is None:
        raise HTTPException(status_code=503, detail="Migration data is unavailable")
    return acquisition


def _row_out(row: RegionMigration, names: dict[str, str]) -> RegionMigrationOut:
    value = hue(row.immigration, row.emigration)
    return RegionMigrationOut(
        code=row.code,
        name=names.get(row.code),
        immigration=row.immigration,
        emigration=row.emigration,
        net_migration=row.net_migration,
        hue=value,
        color=hue_to_css(value),
    )


# ---------------------------------------------------------------------------
# Migration
# ---------------------------------------------------------------------------


@router.get("/migration", summary="Net migration by region", response_model=MigrationListOut)
def list_migration(
    min_net: int | None = Query(None, description="Keep regions with net migration >= min_net"),
    max_net: int | None = Query(None, description="Keep regions with net migration <= max_net"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    acquisition: Acquisition = Depends(get_acquisition),
) -> MigrationListOut:
    names = region_names(acquisition.geo_features)
    rows = list(acquisition.migration_table.values())
    if min_net is not None:
        rows = [r for r in rows if r.net_migration >= min_net]
    if max_net is not None:
        rows = [r for r in rows if r.net_migration <= max_net]
    return MigrationListOut(
        total=len(rows),
        from_cache=acquisition.from_cache,
        data=[_row_out(r, names) for r in rows[offset:offset + limit]],
    )


@router.get("/migration/{code}", summary="Net migration of one region", response_model=RegionMigrationOut)
def get_region(code: str, acquisition: Acquisition = Depends(get_acquisition)) -> RegionMigrationOut:
    row = acquisition.migration_table.lookup(code)
    if row is None:
        raise HTTPException(status_code=404, detail=f"Unknown region code: {code}")
    return _row_out(row, region_names(acquisition.geo_features))


@router.get("/styles/{code}", summary="Map style of one region", response_model=StyleOut)
def get_style(code: str, acquisition: Acquisition = Depends(get_acquisition)) -> StyleOut:
    feature = {"properties": {config.GEO_CODE_PROPERTY: code}}
    return StyleOut(**style_feature(feature, acquisition.migration_table))


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------


@router.get("/export/migration", summary="Export net migration as CSV")
def export_migration_csv(acquisition: Acquisition = Depends(get_acquisition)):
    df = table_to_frame(acquisition.migration_table, region_names(acquisition.geo_features))
    buf = io.StringIO()
    df.to_csv(buf, index=False)
    buf.seek(0)
    return StreamingResponse(
        iter([buf.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=migration.csv"},
    )


# ---------------------------------------------------------------------------
# Cache management
# ---------------------------------------------------------------------------


@router.post("/cache/clear", summary="Clear the session cache", response_model=CacheClearOut)
def flush_cache(cache: SessionCache = Depends(get_cache)) -> CacheClearOut:
    return CacheClearOut(evicted=cache.clear())


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", summary="Health check", response_model=HealthOut)
def health(cache: SessionCache = Depends(get_cache)) -> HealthOut:
    return HealthOut(status="ok", cache="warm" if cache.is_warm() else "cold")
