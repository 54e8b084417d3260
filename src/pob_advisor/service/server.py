"""JSON-over-HTTP transport for the advisor operations."""

from __future__ import annotations

import json
import logging
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlparse

from pob_advisor.engine.config import AdvisorConfig
from pob_advisor.service.operations import AdvisorService


logger = logging.getLogger(__name__)


class AdvisorRequestHandler(BaseHTTPRequestHandler):
    """Routes ``/api/*`` requests to an ``AdvisorService``."""

    def __init__(self, *args, service: AdvisorService, max_body: int, **kwargs):
        self._service = service
        self._max_body = max_body
        super().__init__(*args, **kwargs)

    def log_message(self, format: str, *args) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)

    def _send_json(self, payload: dict, status: int = HTTPStatus.OK) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Cache-Control", "no-store")
        self.end_headers()
        self.wfile.write(body)

    def _send_error(self, status: HTTPStatus, message: str) -> None:
        error = {"code": status.phrase, "message": message, "details": ""}
        self._send_json({"success": False, "error": error}, status=status)

    def do_GET(self) -> None:  # noqa: N802
        path = urlparse(self.path).path
        if path == "/api/cache":
            self._send_json(self._service.cache_stats())
            return
        if path == "/api/health":
            self._send_json({"success": True, "status": "ok"})
            return
        self._send_error(HTTPStatus.NOT_FOUND, f"Unknown endpoint: {path}")

    def do_POST(self) -> None:  # noqa: N802
        path = urlparse(self.path).path
        if not path.startswith("/api/"):
            self._send_error(HTTPStatus.NOT_FOUND, f"Unknown endpoint: {path}")
            return

        try:
            length = int(self.headers.get("Content-Length", "0"))
        except ValueError:
            length = 0
        if length > self._max_body:
            self.close_connection = True
            self._send_error(
                HTTPStatus.REQUEST_ENTITY_TOO_LARGE,
                f"Request body exceeds {self._max_body} bytes",
            )
            return

        raw = self.rfile.read(length) if length > 0 else b"{}"
        try:
            payload = json.loads(raw.decode("utf-8") if raw else "{}")
        except (UnicodeDecodeError, json.JSONDecodeError):
            self._send_error(HTTPStatus.BAD_REQUEST, "Invalid JSON body")
            return
        if not isinstance(payload, dict):
            self._send_error(HTTPStatus.BAD_REQUEST, "JSON body must be an object")
            return

        if path == "/api/parse":
            result = self._service.parse(payload.get("buildCode"))
        elif path == "/api/analyze":
            result = self._service.analyze(payload.get("build"))
        elif path == "/api/suggest":
            result = self._service.suggest(payload.get("build"), payload.get("analysis"))
        elif path == "/api/cache/clear":
            result = self._service.clear_cache()
        else:
            self._send_error(HTTPStatus.NOT_FOUND, f"Unknown endpoint: {path}")
            return
        status = HTTPStatus.OK if result.get("success") else HTTPStatus.BAD_REQUEST
        self._send_json(result, status=status)


def make_server(
    host: str,
    port: int,
    *,
    service: AdvisorService | None = None,
    config: AdvisorConfig | None = None,
) -> ThreadingHTTPServer:
    active_service = service or AdvisorService(config)
    handler = partial(
        AdvisorRequestHandler,
        service=active_service,
        max_body=active_service.config.max_payload_bytes,
    )
    server = ThreadingHTTPServer((host, port), handler)
    server.advisor_service = active_service  # type: ignore[attr-defined]
    return server


def serve(
    *,
    host: str = "127.0.0.1",
    port: int = 8080,
    config: AdvisorConfig | None = None,
) -> None:
    server = make_server(host, port, config=config)
    host_name, bound_port = server.server_address[:2]
    print(f"Serving PoB advisor API at http://{host_name}:{bound_port}/api/")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.server_close()
