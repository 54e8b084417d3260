"""Path of Exile API client and reference data refresh.

The official data endpoints are not always published; when one answers
404 the refresh falls back to a small built-in data set so the bundled
files stay well-formed.
"""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

import requests

from pob_advisor.data.reference import DATA_DIR


logger = logging.getLogger(__name__)

POE_API_BASE = "https://api.pathofexile.com"
USER_AGENT = "pob-advisor/0.1.0"
RATE_LIMIT_SECONDS = 1.0
DEFAULT_TIMEOUT = 30

STUB_DATA: dict[str, list[dict[str, Any]]] = {
    "items": [
        {"id": "1", "name": "Glorious Plate", "type": "Body Armour"},
        {"id": "2", "name": "Varnished Coat", "type": "Body Armour"},
        {"id": "3", "name": "Spiraled Bow", "type": "Bow"},
    ],
    "skills": [
        {"id": "1", "name": "Kinetic Blast", "type": "active"},
        {"id": "2", "name": "Tornado Shot", "type": "active"},
        {"id": "3", "name": "Spark", "type": "active"},
        {"id": "4", "name": "Greater Multiple Projectiles", "type": "support"},
        {"id": "5", "name": "Multistrike", "type": "support"},
        {"id": "6", "name": "Controlled Destruction", "type": "support"},
    ],
    "passives": [
        {"id": "16226", "name": "Chaos Inoculation", "isKeystone": True, "isNotable": False},
        {"id": "18420", "name": "Mind Over Matter", "isKeystone": True, "isNotable": False},
        {"id": "21852", "name": "Iron Reflexes", "isKeystone": True, "isNotable": False},
        {"id": "31863", "name": "Elemental Overload", "isKeystone": True, "isNotable": False},
        {"id": "61420", "name": "Heart of the Oak", "isKeystone": False, "isNotable": True},
        {"id": "26196", "name": "Nullification", "isKeystone": False, "isNotable": True},
    ],
}


class PoeDataClient:
    """Thin wrapper over the PoE data API, limited to one request per second."""

    def __init__(
        self,
        api_key: str | None = None,
        *,
        session: requests.Session | None = None,
        base_url: str = POE_API_BASE,
        timeout: float = DEFAULT_TIMEOUT,
        rate_limit: float = RATE_LIMIT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.rate_limit = rate_limit
        self._clock = clock
        self._sleep = sleep
        self._last_request: float | None = None
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT
        if api_key:
            self.session.headers["Authorization"] = f"Bearer {api_key}"

    def _wait_for_slot(self) -> None:
        if self._last_request is not None:
            elapsed = self._clock() - self._last_request
            if elapsed < self.rate_limit:
                self._sleep(self.rate_limit - elapsed)
        self._last_request = self._clock()

    def get_json(self, path: str) -> Any:
        self._wait_for_slot()
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("PoE API request to %s failed: %s", path, exc)
            raise
        return response.json()

    def fetch_items(self) -> list[dict[str, Any]]:
        return self.get_json("/api/data/items")

    def fetch_skills(self) -> list[dict[str, Any]]:
        return self.get_json("/api/data/skills")

    def fetch_passive_tree(self) -> dict[str, Any]:
        """``{"version": ..., "skills": [...]}`` snapshot of the passive tree."""
        return self.get_json("/api/data/passive-skills")

    def fetch_leagues(self) -> list[dict[str, Any]]:
        return self.get_json("/api/leagues")


def _is_not_found(exc: requests.HTTPError) -> bool:
    return exc.response is not None and exc.response.status_code == 404


def fetch_with_fallback(kind: str, fetch: Callable[[], Any], stub: Any) -> Any:
    try:
        data = fetch()
    except requests.HTTPError as exc:
        if not _is_not_found(exc):
            raise
        logger.warning("PoE API has no %s endpoint, using built-in %s", kind, kind)
        return stub
    logger.info("Fetched %s from PoE API", kind)
    return data


def save_json(data_dir: Path, filename: str, data: Any) -> Path:
    path = data_dir / filename
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    logger.info("Saved %s", path)
    return path


def refresh_reference_data(client: PoeDataClient, data_dir: Path = DATA_DIR) -> dict[str, int]:
    """Fetch items, skills and the passive tree and rewrite the data files.

    Returns the number of records written per file stem.
    """
    data_dir.mkdir(parents=True, exist_ok=True)

    items = fetch_with_fallback("items", client.fetch_items, STUB_DATA["items"])
    skills = fetch_with_fallback("skills", client.fetch_skills, STUB_DATA["skills"])
    tree = fetch_with_fallback(
        "passive tree", client.fetch_passive_tree, {"skills": STUB_DATA["passives"]}
    )
    passives = tree.get("skills", []) if isinstance(tree, dict) else []
    gems = [skill for skill in skills if skill.get("type") == "support"]
    keystones = [skill for skill in passives if skill.get("isKeystone")]

    written = {
        "items": items,
        "skills": skills,
        "gems": gems,
        "passives": passives,
        "keystones": keystones,
    }
    for stem, records in written.items():
        save_json(data_dir, f"{stem}.json", records)
    return {stem: len(records) for stem, records in written.items()}
