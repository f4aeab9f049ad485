"""Core data model: statistical cubes, migration rows and the per-region table."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, NonNegativeInt, TypeAdapter


@dataclass(frozen=True)
class StatCube:
    """A flat value sequence addressed through one dimension index."""

    values: tuple[Any, ...]
    index: Mapping[str, int]

    def position(self, key: str) -> int | None:
        """Return the value position of *key*, or None when the key is absent."""
        return self.index.get(key)


class RegionMigration(BaseModel):
    code: str
    immigration: NonNegativeInt = 0
    emigration: NonNegativeInt = 0

    model_config = {"frozen": True}

    @property
    def net_migration(self) -> int:
        return self.immigration - self.emigration


_ROWS_ADAPTER = TypeAdapter(list[RegionMigration])


class MigrationTable(Mapping[str, RegionMigration]):
    """Read-only mapping from normalized region code to its migration counts.

    Rows keep the order they were given in. Duplicate codes are rejected.
    """

    def __init__(self, rows: Iterable[RegionMigration] = ()):
        data: dict[str, RegionMigration] = {}
        for row in rows:
            if row.code in data:
                raise ValueError(f"Duplicate region code: {row.code}")
            data[row.code] = row
        self._rows = MappingProxyType(data)

    def __getitem__(self, code: str) -> RegionMigration:
        return self._rows[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"MigrationTable({len(self)} regions)"

    def lookup(self, code: str | None) -> RegionMigration | None:
        """Return the row for *code*, or None when the table has no such region."""
        if code is None:
            return None
        return self._rows.get(code)

    def to_json(self) -> str:
        return _ROWS_ADAPTER.dump_json(list(self._rows.values())).decode()

    @classmethod
    def from_json(cls, text: str | bytes) -> MigrationTable:
        """Rebuild a table from :meth:`to_json` output.

        Raises ``ValueError`` (including pydantic's ``ValidationError``) when the
        snapshot is malformed.
        """
        return cls(_ROWS_ADAPTER.validate_json(text))


@dataclass
class Acquisition:
    """Everything the renderer needs: boundaries plus the decoded table."""

    geo_features: dict[str, Any]
    migration_table: MigrationTable
    from_cache: bool = field(default=False)
