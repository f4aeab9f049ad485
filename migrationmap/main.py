"""Muuttoliike — FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from migrationmap.api.routes import router

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Muuttoliike API is ready (session cache is cold until the first request).")
    yield
    logger.info("Shutting down Muuttoliike API.")


app = FastAPI(
    title="Muuttoliike",
    description=(
        "Net migration by municipality: immigration and emigration counts "
        "decoded from Statistics Finland cubes, with the colours used on the map."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/", tags=["Root"])
def root():
    return {
        "name": "Muuttoliike",
        "version": "1.0.0",
        "docs": "/docs",
        "description": "Municipal net migration choropleth data",
    }
