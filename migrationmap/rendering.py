"""Choropleth rendering through folium.

folium owns tiles, panning and widgets; this module only supplies the
per-feature style and popup content.
"""

from __future__ import annotations

import html
from typing import Any

import folium

from migrationmap import config
from migrationmap.models import Acquisition, MigrationTable
from migrationmap.processing.colors import migration_color

NEUTRAL_GRAY = "#808080"
STROKE_WEIGHT = 1

FALLBACK_STYLE = {"color": NEUTRAL_GRAY, "weight": STROKE_WEIGHT}


def _properties(feature: dict[str, Any]) -> dict[str, Any]:
    return feature.get("properties") or {}


def feature_code(feature: dict[str, Any]) -> str | None:
    """Region code of a boundary feature, or None when it carries none."""
    code = _properties(feature).get(config.GEO_CODE_PROPERTY)
    if code is None or code == "":
        return None
    return str(code)


def feature_name(feature: dict[str, Any]) -> str:
    props = _properties(feature)
    return str(props.get(config.GEO_NAME_PROPERTY) or feature_code(feature) or "")


def style_feature(feature: dict[str, Any], table: MigrationTable) -> dict[str, Any]:
    row = table.lookup(feature_code(feature))
    if row is None:
        return dict(FALLBACK_STYLE)
    return {"color": migration_color(row.immigration, row.emigration), "weight": STROKE_WEIGHT}


def popup_counts(feature: dict[str, Any], table: MigrationTable) -> tuple[int, int]:
    """(immigration, emigration) for a feature; (0, 0) when the table lacks it."""
    row = table.lookup(feature_code(feature))
    if row is None:
        return 0, 0
    return row.immigration, row.emigration


def popup_html(feature: dict[str, Any], table: MigrationTable) -> str:
    immigration, emigration = popup_counts(feature, table)
    return (
        f"<strong>{html.escape(feature_name(feature))}</strong><br>"
        f"Immigration: {immigration}<br>"
        f"Emigration: {emigration}"
    )


def region_names(geo_features: dict[str, Any]) -> dict[str, str]:
    """Map region code to display name for every feature that has a code."""
    names = {}
    for feature in geo_features.get("features", []):
        code = feature_code(feature)
        if code is not None:
            names[code] = feature_name(feature)
    return names


def render(acquisition: Acquisition) -> folium.Map:
    """Build the choropleth; folium receives shallow copies of the features."""
    table = acquisition.migration_table
    fmap = folium.Map(location=list(config.MAP_CENTER), zoom_start=config.MAP_ZOOM, tiles="cartodbpositron")

    layer = folium.FeatureGroup(name="Net migration")
    for feature in acquisition.geo_features.get("features", []):
        style = style_feature(feature, table)
        folium.GeoJson(
            dict(feature),
            style_function=lambda _feat, style=style: style,
            popup=folium.Popup(popup_html(feature, table), max_width=300),
        ).add_to(layer)
    layer.add_to(fmap)
    return fmap
