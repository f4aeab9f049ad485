"""Session-scoped memo of the boundaries and the decoded migration table.

The backing store is any mutable mapping that lives exactly as long as one
session: a plain dict for a CLI or API process, ``st.session_state`` for a
Streamlit browser tab. Both entries are stored as JSON text snapshots and are
read back together or not at all.
"""

from __future__ import annotations

import json
import logging
from collections.abc import MutableMapping
from typing import Any

from migrationmap.models import MigrationTable

logger = logging.getLogger(__name__)

GEO_KEY = "migrationmap.geo_features"
TABLE_KEY = "migrationmap.migration_table"


class SessionCache:
    def __init__(self, store: MutableMapping[str, Any] | None = None):
        self._store: MutableMapping[str, Any] = {} if store is None else store

    def read(self) -> tuple[dict[str, Any], MigrationTable] | None:
        """Return ``(geo_features, migration_table)`` or None on a miss.

        A single missing or unparsable entry counts as a miss for both.
        """
        raw_geo = self._store.get(GEO_KEY)
        raw_table = self._store.get(TABLE_KEY)
        if raw_geo is None or raw_table is None:
            logger.debug("Session cache miss")
            return None

        try:
            geo_features = json.loads(raw_geo)
            table = MigrationTable.from_json(raw_table)
        except (TypeError, ValueError) as exc:
            logger.warning("Ignoring unparsable session cache entry: %s", exc)
            return None
        if not isinstance(geo_features, dict):
            logger.warning("Ignoring session cache entry: geo features are not an object")
            return None
        return geo_features, table

    def write(self, geo_features: dict[str, Any], table: MigrationTable) -> None:
        # Serialize both before storing either, so a failure leaves no half entry
        geo_text = json.dumps(geo_features, ensure_ascii=False)
        table_text = table.to_json()
        self._store[GEO_KEY] = geo_text
        self._store[TABLE_KEY] = table_text
        logger.info("Session cache written: %d regions", len(table))

    def clear(self) -> int:
        """Drop both entries. Returns the number of evicted entries."""
        count = 0
        for key in (GEO_KEY, TABLE_KEY):
            if key in self._store:
                del self._store[key]
                count += 1
        return count

    def is_warm(self) -> bool:
        return GEO_KEY in self._store and TABLE_KEY in self._store
