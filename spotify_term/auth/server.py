"""Local OAuth callback server."""

from __future__ import annotations

import logging
import socket
import threading
import urllib.parse
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable

from spotify_term.auth.constants import CALLBACK_PATH, MISSING_CODE_TEXT, SUCCESS_HTML
from spotify_term.errors import AuthError, MissingCodeError

logger = logging.getLogger(__name__)


class _CallbackHandler(BaseHTTPRequestHandler):
    """Handles the provider's redirect back to localhost."""

    server_version = "SpotifyTermOAuth/1.0"
    protocol_version = "HTTP/1.1"
    # Idle connections (browser preconnects) are dropped instead of holding the listener.
    timeout = 5

    def do_GET(self) -> None:  # noqa: N802
        url = urllib.parse.urlparse(self.path)
        if url.path != CALLBACK_PATH:
            self._reply(404, b"Not found", "text/plain; charset=utf-8")
            return

        qs = urllib.parse.parse_qs(url.query)
        code = qs.get("code", [None])[0]
        error = qs.get("error", [None])[0]

        if code:
            logger.debug("Received authorization code on %s", CALLBACK_PATH)
            self.server.resolve(code)
            self._reply(200, SUCCESS_HTML.encode("utf-8"), "text/html; charset=utf-8")
            return

        if error:
            self.server.reject(AuthError(f"Authorization was not granted: {error}"))
            self._reply(400, f"Authorization failed: {error}\n".encode("utf-8"), "text/plain; charset=utf-8")
            return

        self.server.reject(MissingCodeError("Redirect callback did not carry an authorization code."))
        self._reply(400, MISSING_CODE_TEXT.encode("utf-8"), "text/plain; charset=utf-8")

    def _reply(self, status: int, body: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(body)))
        self.send_header("Connection", "close")
        self.end_headers()
        self.wfile.write(body)
        self.wfile.flush()
        self.close_connection = True

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A003
        # Keep the terminal clean; route access logs to debug logging instead.
        logger.debug("callback server: " + format, *args)


class CallbackServer(ThreadingHTTPServer):
    """Callback server living for the duration of one authorization."""

    daemon_threads = True
    block_on_close = False

    def __init__(
        self,
        server_address: tuple[Any, ...],
        on_code: Callable[[str], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
    ):
        super().__init__(server_address, _CallbackHandler)
        self.code: str | None = None
        self.on_code = on_code
        self.on_error = on_error

    def resolve(self, code: str) -> None:
        self.code = code
        if self.on_code:
            self.on_code(code)

    def reject(self, exc: Exception) -> None:
        if self.on_error:
            self.on_error(exc)

    def close(self) -> None:
        """Stop serving and release the port."""
        self.on_code = None
        self.on_error = None
        self.shutdown()
        self.server_close()


def start_callback_server(
    port: int,
    on_code: Callable[[str], None] | None = None,
    on_error: Callable[[Exception], None] | None = None,
) -> tuple[CallbackServer | None, str | None]:
    """Start the callback server on the first localhost address that binds."""
    try:
        addrinfos = socket.getaddrinfo("localhost", port, type=socket.SOCK_STREAM)
    except OSError as exc:
        return None, f"Failed to resolve localhost: {exc}"

    last_error: OSError | None = None
    for family, _socktype, _proto, _canonname, sockaddr in addrinfos:
        try:
            # Bind the family localhost resolves to first so the browser's redirect reaches us.
            class _AddrCallbackServer(CallbackServer):
                address_family = family

            server = _AddrCallbackServer(sockaddr, on_code=on_code, on_error=on_error)
        except OSError as exc:
            last_error = exc
            continue
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        logger.debug("Callback server listening on %s", server.server_address)
        return server, None

    if last_error:
        return None, f"Local callback server failed to start: {last_error}"
    return None, "Local callback server failed to start: unknown error"
