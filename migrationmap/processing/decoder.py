"""Decoding of JSON-stat migration cubes into a per-region table."""

from __future__ import annotations

import logging
import math
from typing import Any

import pandas as pd

from migrationmap import config
from migrationmap.errors import DecodeShapeError
from migrationmap.models import MigrationTable, RegionMigration, StatCube
from migrationmap.processing.colors import hue

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Cube parsing
# ---------------------------------------------------------------------------


def _unwrap_dataset(payload: Any) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise DecodeShapeError(f"Cube payload must be an object, got {type(payload).__name__}")
    # JSON-stat 1.x wraps the dataset under a "dataset" key
    if "value" not in payload and isinstance(payload.get("dataset"), dict):
        return payload["dataset"]
    return payload


def _read_values(dataset: dict[str, Any]) -> tuple[Any, ...]:
    values = dataset.get("value")
    if isinstance(values, list):
        return tuple(values)
    if isinstance(values, dict):
        # Sparse form: {"0": 12, "5": 3}
        try:
            positions = {int(k): v for k, v in values.items()}
        except ValueError as exc:
            raise DecodeShapeError(f"Sparse value keys must be integers: {exc}") from exc
        size = max(positions, default=-1) + 1
        return tuple(positions.get(i) for i in range(size))
    raise DecodeShapeError("Cube has no 'value' sequence")


def _read_index(dataset: dict[str, Any], dimension: str) -> dict[str, int]:
    dimensions = dataset.get("dimension")
    if not isinstance(dimensions, dict):
        raise DecodeShapeError("Cube has no 'dimension' object")
    dim = dimensions.get(dimension)
    if not isinstance(dim, dict):
        available = sorted(k for k in dimensions if k not in ("id", "size", "role"))
        raise DecodeShapeError(f"Dimension {dimension!r} not found. Available: {available}")
    category = dim.get("category")
    if not isinstance(category, dict):
        raise DecodeShapeError(f"Dimension {dimension!r} has no category object")
    index = category.get("index")
    if isinstance(index, list):
        return {str(key): pos for pos, key in enumerate(index)}
    if isinstance(index, dict):
        if not all(isinstance(pos, int) and not isinstance(pos, bool) for pos in index.values()):
            raise DecodeShapeError(f"Dimension {dimension!r} index positions must be integers")
        return {str(key): pos for key, pos in index.items()}
    raise DecodeShapeError(f"Dimension {dimension!r} has no category index")


def _check_single_axis(dataset: dict[str, Any], dimension: str) -> None:
    """Every dimension other than *dimension* must have exactly one category."""
    ids = dataset.get("id")
    sizes = dataset.get("size")
    if ids is None and isinstance(dataset.get("dimension"), dict):
        # JSON-stat 1.x keeps id/size inside the dimension object
        ids = dataset["dimension"].get("id")
        sizes = dataset["dimension"].get("size")
    if ids is None or sizes is None:
        return
    if not isinstance(ids, list) or not isinstance(sizes, list) or len(ids) != len(sizes):
        raise DecodeShapeError("Cube 'id' and 'size' must be lists of equal length")
    extra = [f"{name}={size}" for name, size in zip(ids, sizes) if name != dimension and size != 1]
    if extra:
        raise DecodeShapeError(f"Cube has more than one category on: {', '.join(extra)}")


def parse_cube(payload: Any, dimension: str | None = None) -> StatCube:
    """Extract the value sequence and the region dimension index from a JSON-stat payload."""
    dimension = dimension or config.REGION_DIMENSION
    dataset = _unwrap_dataset(payload)
    values = _read_values(dataset)
    index = _read_index(dataset, dimension)
    _check_single_axis(dataset, dimension)
    return StatCube(values=values, index=index)


def check_feature_collection(payload: Any) -> dict[str, Any]:
    """Ensure the boundary payload at least looks like a GeoJSON feature collection."""
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise DecodeShapeError("Geographic payload is not a feature collection")
    for pos, feature in enumerate(payload["features"]):
        if not isinstance(feature, dict):
            raise DecodeShapeError(f"Feature {pos} is not an object")
        properties = feature.get("properties")
        if properties is not None and not isinstance(properties, dict):
            raise DecodeShapeError(f"Feature {pos} has non-object properties")
    return payload


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def normalize_code(raw_key: str, prefix: str | None = None) -> str:
    """Strip the fixed categorical prefix: ``KU109`` -> ``109``."""
    prefix = config.REGION_PREFIX if prefix is None else prefix
    return raw_key.removeprefix(prefix) if prefix else raw_key


def count_or_zero(cube: StatCube, raw_key: str) -> int:
    """Count stored for *raw_key*, defaulting to zero when the cube has none.

    An absent key or a null value means no recorded movement. A position
    outside the value sequence, or a value that is negative, fractional, infinite
    or not a number means the cube itself is broken and raises ``DecodeShapeError``.
    """
    position = cube.position(raw_key)
    if position is None:
        return 0
    if not 0 <= position < len(cube.values):
        raise DecodeShapeError(f"Position {position} of {raw_key!r} is outside the value sequence")

    value = cube.values[position]
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeShapeError(f"Value for {raw_key!r} is not a number: {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise DecodeShapeError(f"Value for {raw_key!r} is not a number: {value!r}")
    if value < 0:
        raise DecodeShapeError(f"Value for {raw_key!r} is negative: {value}")
    if isinstance(value, float) and not value.is_integer():
        raise DecodeShapeError(f"Value for {raw_key!r} is not a whole count: {value}")
    return int(value)


def decode(immigration: StatCube, emigration: StatCube) -> MigrationTable:
    """Join the two cubes on their raw region keys.

    One row is emitted per immigration key, in immigration index order. A key
    missing from the emigration cube gets an emigration count of zero.
    """
    rows = []
    missing = 0
    for raw_key in immigration.index:
        if emigration.position(raw_key) is None:
            missing += 1
        rows.append(RegionMigration(
            code=normalize_code(raw_key),
            immigration=count_or_zero(immigration, raw_key),
            emigration=count_or_zero(emigration, raw_key),
        ))

    if missing:
        logger.warning("%d regions have no emigration entry, defaulted to 0", missing)

    try:
        table = MigrationTable(rows)
    except ValueError as exc:
        raise DecodeShapeError(str(exc)) from exc
    logger.info("Decoded migration table: %d regions", len(table))
    return table


def decode_payloads(
    immigration_payload: Any,
    emigration_payload: Any,
    dimension: str | None = None,
) -> MigrationTable:
    """Parse both raw responses and decode them into one table."""
    return decode(
        parse_cube(immigration_payload, dimension),
        parse_cube(emigration_payload, dimension),
    )


# ---------------------------------------------------------------------------
# Tabular view
# ---------------------------------------------------------------------------


def table_to_frame(
    table: MigrationTable,
    names: dict[str, str] | None = None,
) -> pd.DataFrame:
    """Flatten a table into a DataFrame with net migration and hue columns.

    ``names`` optionally maps region codes to display names.
    """
    names = names or {}
    df = pd.DataFrame(
        [row.model_dump() for row in table.values()],
        columns=["code", "immigration", "emigration"],
    )
    df.insert(1, "name", df["code"].map(names))
    df["net_migration"] = df["immigration"] - df["emigration"]
    df["hue"] = [hue(i, e) for i, e in zip(df["immigration"], df["emigration"])]
    return df
