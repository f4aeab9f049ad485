"""Registry of the remote sources the pipeline needs."""

from __future__ import annotations

from dataclasses import dataclass

from migrationmap import config


@dataclass
class SourceConfig:
    name: str
    url: str
    description: str
    source: str = "Statistics Finland"


SOURCE_REGISTRY: dict[str, SourceConfig] = {
    "immigration": SourceConfig(
        name="Tulomuutto kunnittain",
        url=config.IMMIGRATION_URL,
        description="Inbound moves by destination municipality (JSON-stat cube).",
    ),
    "emigration": SourceConfig(
        name="Lahtomuutto kunnittain",
        url=config.EMIGRATION_URL,
        description="Outbound moves by departure municipality (JSON-stat cube).",
    ),
    "geo_features": SourceConfig(
        name="Kuntarajat",
        url=config.GEO_URL,
        description="Municipality boundaries as a GeoJSON feature collection.",
    ),
}
