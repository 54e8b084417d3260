"""Serve the parse / analyze / suggest operations over HTTP."""

from __future__ import annotations

import argparse
import logging

from pob_advisor.engine.config import AdvisorConfig
from pob_advisor.service.server import serve


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the PoB advisor HTTP API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--cache-size", type=int, help="Override CACHE_SIZE.")
    parser.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = AdvisorConfig.from_env()
    if args.cache_size is not None:
        if args.cache_size <= 0:
            parser.error("--cache-size must be positive")
        config.cache_size = args.cache_size

    serve(host=args.host, port=args.port, config=config)


if __name__ == "__main__":
    main()
