"""Tests for JSON-stat cube parsing and migration table decoding.

These tests run on in-memory payloads, without network access.
"""

from __future__ import annotations

import copy

import pytest

from migrationmap.errors import DecodeShapeError
from migrationmap.models import StatCube
from migrationmap.processing.decoder import (
    check_feature_collection,
    count_or_zero,
    decode,
    decode_payloads,
    normalize_code,
    parse_cube,
    table_to_frame,
)

from conftest import make_cube


# ── Cube parsing ──────────────────────────────────────────────────────────

class TestParseCube:
    def test_dict_index(self):
        cube = parse_cube(make_cube({"KU109": 10, "KU091": 3}))
        assert cube.index == {"KU109": 0, "KU091": 1}
        assert cube.values == (10, 3)

    def test_list_index(self):
        payload = make_cube({"KU109": 10, "KU091": 3})
        payload["dimension"]["Alue"]["category"]["index"] = ["KU109", "KU091"]
        cube = parse_cube(payload)
        assert cube.position("KU091") == 1

    def test_sparse_values(self):
        payload = make_cube({"KU109": 10, "KU091": 3, "KU005": 7})
        payload["value"] = {"0": 10, "2": 7}
        cube = parse_cube(payload)
        assert cube.values == (10, None, 7)

    def test_jsonstat1_dataset_wrapper(self):
        inner = make_cube({"KU109": 4})
        cube = parse_cube({"dataset": inner})
        assert cube.position("KU109") == 0

    def test_custom_dimension_name(self):
        cube = parse_cube(make_cube({"KU109": 4}, dimension="Kunta"), dimension="Kunta")
        assert cube.values == (4,)

    def test_missing_dimension_raises(self):
        with pytest.raises(DecodeShapeError, match="not found"):
            parse_cube(make_cube({"KU109": 4}, dimension="Kunta"))

    def test_missing_value_raises(self):
        payload = make_cube({"KU109": 4})
        del payload["value"]
        with pytest.raises(DecodeShapeError):
            parse_cube(payload)

    def test_not_an_object_raises(self):
        with pytest.raises(DecodeShapeError):
            parse_cube([1, 2, 3])

    def test_extra_axis_with_several_categories_raises(self):
        payload = make_cube({"KU109": 4, "KU091": 2})
        payload["size"] = [2, 2, 1]
        with pytest.raises(DecodeShapeError, match="Vuosi=2"):
            parse_cube(payload)

    def test_category_not_an_object_raises(self):
        payload = make_cube({"KU109": 4})
        payload["dimension"]["Alue"]["category"] = ["KU109"]
        with pytest.raises(DecodeShapeError, match="category"):
            parse_cube(payload)

    def test_non_integer_index_raises(self):
        payload = make_cube({"KU109": 4})
        payload["dimension"]["Alue"]["category"]["index"] = {"KU109": "zero"}
        with pytest.raises(DecodeShapeError):
            parse_cube(payload)


class TestCheckFeatureCollection:
    def test_accepts_feature_collection(self, geo_payload):
        assert check_feature_collection(geo_payload) is geo_payload

    def test_rejects_missing_features(self):
        with pytest.raises(DecodeShapeError):
            check_feature_collection({"type": "FeatureCollection"})

    def test_rejects_non_object_feature(self):
        with pytest.raises(DecodeShapeError):
            check_feature_collection({"features": [None]})

    def test_rejects_non_object_properties(self):
        with pytest.raises(DecodeShapeError):
            check_feature_collection({"features": [{"type": "Feature", "properties": "kunta=109"}]})

    def test_accepts_null_properties(self):
        payload = {"features": [{"type": "Feature", "properties": None}]}
        assert check_feature_collection(payload) is payload


# ── Normalization and defaults ────────────────────────────────────────────

class TestNormalizeCode:
    def test_strips_prefix(self):
        assert normalize_code("KU109") == "109"

    def test_keeps_leading_zeros(self):
        assert normalize_code("KU005") == "005"

    def test_key_without_prefix_is_kept(self):
        assert normalize_code("SSS") == "SSS"

    def test_custom_prefix(self):
        assert normalize_code("MK01", prefix="MK") == "01"


class TestCountOrZero:
    def test_absent_key_is_zero(self):
        cube = StatCube(values=(5,), index={"KU109": 0})
        assert count_or_zero(cube, "KU091") == 0

    def test_null_value_is_zero(self):
        cube = StatCube(values=(None,), index={"KU109": 0})
        assert count_or_zero(cube, "KU109") == 0

    def test_float_value_becomes_int(self):
        cube = StatCube(values=(12.0,), index={"KU109": 0})
        assert count_or_zero(cube, "KU109") == 12

    def test_out_of_range_position_raises(self):
        cube = StatCube(values=(5,), index={"KU109": 3})
        with pytest.raises(DecodeShapeError):
            count_or_zero(cube, "KU109")

    def test_negative_value_raises(self):
        cube = StatCube(values=(-1,), index={"KU109": 0})
        with pytest.raises(DecodeShapeError):
            count_or_zero(cube, "KU109")

    @pytest.mark.parametrize("value", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_value_raises(self, value):
        cube = StatCube(values=(value,), index={"KU109": 0})
        with pytest.raises(DecodeShapeError):
            count_or_zero(cube, "KU109")

    def test_fractional_value_raises(self):
        cube = StatCube(values=(12.7,), index={"KU109": 0})
        with pytest.raises(DecodeShapeError, match="whole count"):
            count_or_zero(cube, "KU109")

    def test_non_numeric_value_raises(self):
        cube = StatCube(values=("..",), index={"KU109": 0})
        with pytest.raises(DecodeShapeError):
            count_or_zero(cube, "KU109")


# ── Decoding ──────────────────────────────────────────────────────────────

class TestDecode:
    def test_one_row_per_immigration_key(self, immigration_payload, emigration_payload):
        table = decode_payloads(immigration_payload, emigration_payload)
        assert len(table) == 4
        assert list(table) == ["109", "091", "005", "020"]

    def test_pairs_on_raw_key_not_position(self, immigration_payload, emigration_payload):
        table = decode_payloads(immigration_payload, emigration_payload)
        assert table["109"].immigration == 10
        assert table["109"].emigration == 5
        assert table["091"].emigration == 1

    def test_missing_emigration_defaults_to_zero(self, immigration_payload, emigration_payload):
        table = decode_payloads(immigration_payload, emigration_payload)
        assert table["020"].immigration == 5
        assert table["020"].emigration == 0

    def test_emigration_only_keys_are_ignored(self):
        table = decode_payloads(make_cube({"KU109": 1}), make_cube({"KU109": 1, "KU091": 9}))
        assert list(table) == ["109"]

    def test_inputs_not_mutated(self, immigration_payload, emigration_payload):
        imm = parse_cube(immigration_payload)
        emi = parse_cube(emigration_payload)
        imm_before, emi_before = copy.deepcopy(dict(imm.index)), copy.deepcopy(dict(emi.index))
        decode(imm, emi)
        assert dict(imm.index) == imm_before
        assert dict(emi.index) == emi_before

    def test_colliding_codes_raise(self):
        # "KU109" and "109" both normalize to "109"
        with pytest.raises(DecodeShapeError, match="Duplicate"):
            decode_payloads(make_cube({"KU109": 1, "109": 2}), make_cube({}))

    def test_infinite_count_raises_shape_error(self):
        with pytest.raises(DecodeShapeError):
            decode_payloads(make_cube({"KU109": float("inf")}), make_cube({"KU109": 1}))

    def test_empty_cubes_give_empty_table(self):
        assert len(decode_payloads(make_cube({}), make_cube({}))) == 0


class TestTableToFrame:
    def test_columns_and_values(self, migration_table):
        df = table_to_frame(migration_table, {"109": "Hämeenlinna"})
        assert list(df.columns) == ["code", "name", "immigration", "emigration", "net_migration", "hue"]
        row = df[df["code"] == "109"].iloc[0]
        assert row["name"] == "Hämeenlinna"
        assert row["net_migration"] == 5
        assert row["hue"] == 120

    def test_unknown_names_are_missing(self, migration_table):
        df = table_to_frame(migration_table)
        assert df["name"].isna().all()
