"""Refresh the reference data files from the Path of Exile API.

Usage:
    POE_API_KEY=... python -m scripts.fetch_reference_data [--out DIR]

Writes items.json, skills.json, gems.json, passives.json and
keystones.json. Endpoints that answer 404 are replaced by a small
built-in data set.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

import requests

from pob_advisor.data.poe_client import PoeDataClient, refresh_reference_data
from pob_advisor.data.reference import DATA_DIR
from pob_advisor.engine.config import AdvisorConfig


def _summary(counts: dict[str, int]) -> list[str]:
    return [
        f"Saved {counts['items']} items",
        f"Saved {counts['skills']} skills ({counts['gems']} support gems)",
        f"Saved {counts['passives']} passive skills ({counts['keystones']} keystones)",
    ]


def main() -> None:
    parser = argparse.ArgumentParser(description="Fetch reference data from the PoE API")
    parser.add_argument("--out", type=Path, default=DATA_DIR, help="Output directory.")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    config = AdvisorConfig.from_env()
    client = PoeDataClient(config.poe_api_key)

    print(f"Fetching reference data into {args.out}")
    try:
        counts = refresh_reference_data(client, args.out.expanduser())
    except requests.RequestException as exc:
        print(f"Error: {exc}")
        raise SystemExit(1) from None

    print("=" * 50)
    print("\n".join(_summary(counts)))
    print("=" * 50)


if __name__ == "__main__":
    main()
