"""Runtime configuration, read from the environment at import time."""

from __future__ import annotations

import os

# Statistics Finland saved JSON-stat queries: in- and out-migration by municipality
IMMIGRATION_URL = os.getenv(
    "MIGRATIONMAP_IMMIGRATION_URL",
    "https://pxdata.stat.fi/PxWeb/sq/muuttoliike-tulomuutto-kunnittain",
)
EMIGRATION_URL = os.getenv(
    "MIGRATIONMAP_EMIGRATION_URL",
    "https://pxdata.stat.fi/PxWeb/sq/muuttoliike-lahtomuutto-kunnittain",
)

# Municipality boundaries served as GeoJSON by the Statistics Finland WFS
GEO_URL = os.getenv(
    "MIGRATIONMAP_GEO_URL",
    "https://geo.stat.fi/geoserver/tilastointialueet/wfs"
    "?service=WFS&version=2.0.0&request=GetFeature"
    "&typeName=tilastointialueet:kunta4500k"
    "&outputFormat=application/json&srsName=EPSG:4326",
)

# Cube dimension holding the municipalities, and the prefix of its keys (KU109)
REGION_DIMENSION = os.getenv("MIGRATIONMAP_REGION_DIMENSION", "Alue")
REGION_PREFIX = os.getenv("MIGRATIONMAP_REGION_PREFIX", "KU")

# Feature properties in the boundary data
GEO_CODE_PROPERTY = os.getenv("MIGRATIONMAP_GEO_CODE_PROPERTY", "kunta")
GEO_NAME_PROPERTY = os.getenv("MIGRATIONMAP_GEO_NAME_PROPERTY", "nimi")

HTTP_TIMEOUT = float(os.getenv("MIGRATIONMAP_HTTP_TIMEOUT", "30"))

OUTPUT_HTML = os.getenv("MIGRATIONMAP_OUTPUT_HTML", "migration_map.html")

# Initial map view (roughly the centre of Finland)
MAP_CENTER = (64.9, 26.0)
MAP_ZOOM = 5
