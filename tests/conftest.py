"""Shared fixtures: JSON-stat cubes and a small boundary collection."""

from __future__ import annotations

from typing import Any

import pytest

from migrationmap.models import Acquisition, MigrationTable, RegionMigration


def make_cube(counts: dict[str, Any], dimension: str = "Alue") -> dict[str, Any]:
    """Build a JSON-stat 2.0 dataset with one region axis and single-category year/measure axes."""
    keys = list(counts)
    return {
        "version": "2.0",
        "class": "dataset",
        "id": [dimension, "Vuosi", "Tiedot"],
        "size": [len(keys), 1, 1],
        "dimension": {
            dimension: {
                "label": "Alue",
                "category": {"index": {key: pos for pos, key in enumerate(keys)}},
            },
            "Vuosi": {"category": {"index": {"2023": 0}}},
            "Tiedot": {"category": {"index": {"muutto": 0}}},
        },
        "value": [counts[key] for key in keys],
    }


def make_feature(code: str | None, name: str) -> dict[str, Any]:
    props: dict[str, Any] = {"nimi": name}
    if code is not None:
        props["kunta"] = code
    return {
        "type": "Feature",
        "properties": props,
        "geometry": {
            "type": "Polygon",
            "coordinates": [[[24.0, 61.0], [24.5, 61.0], [24.5, 61.5], [24.0, 61.5], [24.0, 61.0]]],
        },
    }


@pytest.fixture
def immigration_payload() -> dict[str, Any]:
    return make_cube({"KU109": 10, "KU091": 1, "KU005": 0, "KU020": 5})


@pytest.fixture
def emigration_payload() -> dict[str, Any]:
    # Same raw keys, different positions; KU020 deliberately missing
    return make_cube({"KU091": 1, "KU005": 0, "KU109": 5})


@pytest.fixture
def geo_payload() -> dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [
            make_feature("109", "Hämeenlinna"),
            make_feature("091", "Helsinki"),
            make_feature("005", "Alajärvi"),
            make_feature("999", "Tuntematon"),
            make_feature(None, "Ei koodia"),
        ],
    }


@pytest.fixture
def migration_table() -> MigrationTable:
    return MigrationTable([
        RegionMigration(code="109", immigration=10, emigration=5),
        RegionMigration(code="091", immigration=1, emigration=1),
        RegionMigration(code="005", immigration=0, emigration=0),
    ])


@pytest.fixture
def acquisition(geo_payload, migration_table) -> Acquisition:
    return Acquisition(geo_features=geo_payload, migration_table=migration_table)
