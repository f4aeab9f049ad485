"""Acquisition pipeline: cache → fetch (x3, concurrent) → decode → cache → render.

Run with:  python -m migrationmap.pipeline
"""

from __future__ import annotations

import asyncio
import logging
import sys

import httpx

from migrationmap import config
from migrationmap.errors import DecodeShapeError
from migrationmap.ingestion.datasets import SOURCE_REGISTRY
from migrationmap.ingestion.fetcher import fetch_json, make_client
from migrationmap.models import Acquisition
from migrationmap.processing.decoder import check_feature_collection, decode_payloads
from migrationmap.rendering import render
from migrationmap.storage.session_cache import SessionCache

logger = logging.getLogger(__name__)


async def _acquire_remote(cache: SessionCache, client: httpx.AsyncClient) -> Acquisition | None:
    names = ("immigration", "emigration", "geo_features")

    # 1. Fetch all three; gather only returns once every request has settled
    logger.info("=== STEP 1: Fetching %s ===", ", ".join(names))
    payloads = await asyncio.gather(
        *(fetch_json(client, SOURCE_REGISTRY[name].url) for name in names)
    )
    failed = [name for name, payload in zip(names, payloads) if payload is None]
    if failed:
        logger.error("Acquisition failed, no data for: %s", ", ".join(failed))
        return None
    immigration, emigration, geo_features = payloads

    # 2. Decode
    logger.info("=== STEP 2: Decoding migration cubes ===")
    try:
        table = decode_payloads(immigration, emigration)
        geo_features = check_feature_collection(geo_features)
    except DecodeShapeError as exc:
        logger.error("Acquisition failed, malformed payload | DecodeShapeError: %s", exc)
        return None

    # 3. Memoize for the rest of the session
    logger.info("=== STEP 3: Writing session cache ===")
    cache.write(geo_features, table)
    return Acquisition(geo_features=geo_features, migration_table=table)


async def acquire(
    cache: SessionCache,
    client: httpx.AsyncClient | None = None,
) -> Acquisition | None:
    """Return boundaries and migration table, or None when the map cannot be drawn.

    A warm cache short-circuits the network entirely. Nothing is written to
    the cache unless all three sources were fetched and decoded.
    """
    cached = cache.read()
    if cached is not None:
        geo_features, table = cached
        logger.info("Session cache hit: %d regions", len(table))
        return Acquisition(geo_features=geo_features, migration_table=table, from_cache=True)

    if client is not None:
        return await _acquire_remote(cache, client)
    async with make_client() as own_client:
        return await _acquire_remote(cache, own_client)


def run(cache: SessionCache | None = None) -> Acquisition | None:
    """Synchronous entry point around :func:`acquire`."""
    return asyncio.run(acquire(cache if cache is not None else SessionCache()))


def main(output: str | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    acquisition = run()
    if acquisition is None:
        logger.error("Cannot render the migration map")
        return 1

    output = output or config.OUTPUT_HTML
    render(acquisition).save(output)
    logger.info("=== Map written to %s ===", output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
