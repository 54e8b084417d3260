"""Configuration knobs for the advisor service.

Defaults match the behaviour PoB users expect; deployments may override
cache sizing, the accepted PoB version floor, or the reference data
location through environment variables (see ``AdvisorConfig.from_env``).
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path


MIN_POB_VERSION = "1.4.170"
MAX_PAYLOAD_BYTES = 1024 * 1024


@dataclass(slots=True)
class AdvisorConfig:
    """Tuneable parameters for decoding, caching and suggestion output."""

    cache_size: int = 100              # max cached builds (LRU)
    cache_ttl_seconds: float = 3600.0  # entries expire after an hour
    min_pob_version: str = MIN_POB_VERSION
    max_suggestions_per_category: int = 5
    max_payload_bytes: int = MAX_PAYLOAD_BYTES  # transport-level request ceiling
    keystones_path: Path | None = None  # None = bundled keystones.json
    poe_api_key: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "AdvisorConfig":
        """Build a config from ``CACHE_SIZE``, ``CACHE_TTL`` (ms) and friends."""
        env = os.environ if environ is None else environ
        config = cls()
        if env.get("CACHE_SIZE"):
            config.cache_size = _positive_int(env["CACHE_SIZE"], "CACHE_SIZE")
        if env.get("CACHE_TTL"):
            config.cache_ttl_seconds = _positive_int(env["CACHE_TTL"], "CACHE_TTL") / 1000.0
        if env.get("POB_MIN_VERSION"):
            config.min_pob_version = env["POB_MIN_VERSION"].strip()
        if env.get("POB_KEYSTONES_PATH"):
            config.keystones_path = Path(env["POB_KEYSTONES_PATH"]).expanduser()
        if env.get("POE_API_KEY"):
            config.poe_api_key = env["POE_API_KEY"]
        return config


def _positive_int(raw: str, name: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value
