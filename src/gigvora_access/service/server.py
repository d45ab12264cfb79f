"""Access service HTTP server.

Uses only Python's built-in ``http.server`` module.  Every response is
JSON and carries an ``X-Request-Id`` header; see :mod:`gigvora_access.service.api`
for the routes.

Example
-------
>>> from gigvora_access.service.server import AccessServer
>>> server = AccessServer(api=api, host="127.0.0.1", port=4010)
>>> server.start()           # blocks
>>> # Or run in background:
>>> server.start_background()
>>> server.stop()
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import TYPE_CHECKING
from urllib.parse import parse_qs, unquote, urlsplit

if TYPE_CHECKING:
    from gigvora_access.service.api import AccessApi

logger = logging.getLogger(__name__)

_PERMISSION_PREFIX = "/api/permissions/"


class _AccessHandler(BaseHTTPRequestHandler):
    """HTTP request handler for the access service."""

    # Set per server instance by AccessServer.
    api: "AccessApi"

    def do_GET(self) -> None:  # noqa: N802
        """Handle GET requests."""
        parts = urlsplit(self.path)
        path = parts.path.rstrip("/") or "/"
        query = {k: v[-1] for k, v in parse_qs(parts.query).items()}

        if path == "/health":
            status, payload = self.api.get_health()
        elif path == "/api/permissions":
            status, payload = self.api.get_permissions(
                category=query.get("category"), surface=query.get("surface")
            )
        elif path.startswith(_PERMISSION_PREFIX):
            status, payload = self.api.get_permission(unquote(path[len(_PERMISSION_PREFIX):]))
        elif path == "/api/memberships":
            status, payload = self.api.get_memberships()
        elif path == "/api/authorization":
            status, payload = self.api.get_authorization(
                query.get("memberships"), query.get("grants")
            )
        elif path == "/api/routes":
            status, payload = self.api.get_routes(query.get("memberships"))
        elif path == "/api/me":
            status, payload = self.api.get_me(dict(self.headers.items()))
        else:
            status, payload = 404, {"error": "Not found"}

        self._send_json(status, payload)

    def _send_json(self, status: int, data: dict[str, object]) -> None:
        body = json.dumps(data, default=str).encode("utf-8")
        request_id = str(uuid.uuid4())
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Cache-Control", "no-store")
        self.send_header("X-Request-Id", request_id)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)
        logger.info(
            "access request id=%s method=GET path=%s status=%d",
            request_id,
            self.path,
            status,
        )

    def log_message(self, fmt: str, *args: object) -> None:  # type: ignore[override]
        """Route the default request log line to the module logger."""
        logger.debug(fmt, *args)


class AccessServer:
    """Wraps a ``ThreadingHTTPServer`` serving the access API.

    Parameters
    ----------
    api:
        The :class:`AccessApi` answering requests.
    host:
        Bind address (default: ``"127.0.0.1"``).
    port:
        Port to listen on (default: ``4010``).
    """

    def __init__(
        self,
        api: "AccessApi",
        host: str = "127.0.0.1",
        port: int = 4010,
    ) -> None:
        self._api = api
        self._host = host
        self._port = port
        self._server: ThreadingHTTPServer | None = None
        self._thread: threading.Thread | None = None

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the server and block until interrupted (Ctrl-C)."""
        self._server = self._build_server()
        logger.info("Access service running at %s", self.url)
        try:
            self._server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Access service interrupted")
        finally:
            self._server.server_close()

    def start_background(self) -> None:
        """Start the server in a daemon background thread."""
        self._server = self._build_server()
        self._thread = threading.Thread(
            target=self._server.serve_forever,
            daemon=True,
            name="gigvora-access",
        )
        self._thread.start()
        logger.info("Access service running (background) at %s", self.url)

    def stop(self) -> None:
        """Stop the background server."""
        if self._server is not None:
            self._server.shutdown()
            self._server.server_close()
            self._server = None
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None

    @property
    def url(self) -> str:
        """The base URL the server listens on."""
        return f"http://{self._host}:{self._port}/"

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_server(self) -> ThreadingHTTPServer:
        # A handler subclass per server instance keeps api references apart.
        api = self._api

        class _Handler(_AccessHandler):
            pass

        _Handler.api = api  # type: ignore[attr-defined]
        return ThreadingHTTPServer((self._host, self._port), _Handler)
