"""Keystone reference table used by the passive tree extractor.

The table is a JSON list of passive skills as written by
``scripts/fetch_reference_data.py``:

    [{"id": "16226", "name": "Chaos Inoculation",
      "isKeystone": true, "effects": ["..."]}, ...]

Entries flagged ``"isKeystone": false`` are ignored; entries without the
flag are assumed to be keystones.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path

from pob_advisor.models.build import Keystone


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent
KEYSTONES_PATH = DATA_DIR / "keystones.json"


def keystones_from_records(records: list[dict]) -> dict[str, Keystone]:
    """Index raw passive skill records by node id."""
    table: dict[str, Keystone] = {}
    for record in records:
        if not isinstance(record, dict) or record.get("isKeystone") is False:
            continue
        node_id = str(record.get("id", "")).strip()
        name = str(record.get("name", "")).strip()
        if not node_id or not name:
            continue
        effects = record.get("effects") or []
        table[node_id] = Keystone(id=node_id, name=name, effect="; ".join(str(e) for e in effects))
    return table


def load_keystone_table(path: Path | None = None) -> dict[str, Keystone]:
    """Read a keystone table from ``path`` (bundled data by default)."""
    source = path or KEYSTONES_PATH
    records = json.loads(source.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{source}: expected a JSON list of passive skills")
    table = keystones_from_records(records)
    logger.debug("Loaded %d keystones from %s", len(table), source)
    return table


@lru_cache(maxsize=None)
def default_keystone_table() -> dict[str, Keystone]:
    """Bundled keystone table, loaded once per process."""
    return load_keystone_table()
