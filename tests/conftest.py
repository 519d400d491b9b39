import json
import socket
import urllib.parse
from typing import Any, Callable

import httpx
import pytest

from spotify_term.auth.models import TokenRecord
from spotify_term.auth.storage import save_token_file
from spotify_term.config.loader import save_config
from spotify_term.config.schema import Config

Handler = Callable[[httpx.Request], httpx.Response]


class FakeSpotify:
    """Routes httpx requests to canned handlers and records them."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def route(self, method: str, url: str, handler: Handler | None = None, **response: Any) -> None:
        if handler is None:
            status = response.pop("status_code", 200)
            handler = lambda _request: httpx.Response(status, **response)  # noqa: E731
        self._routes[(method, url)] = handler

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url.copy_with(query=None))
        handler = self._routes.get((request.method, url))
        if handler is None:
            return httpx.Response(418, json={"error": {"status": 418, "message": f"unrouted {request.method} {url}"}})
        return handler(request)

    def calls(self, method: str, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and str(r.url.copy_with(query=None)) == url]


def form_of(request: httpx.Request) -> dict[str, str]:
    return {k: v[0] for k, v in urllib.parse.parse_qs(request.content.decode("utf-8")).items()}


def free_port() -> int:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture(autouse=True)
def data_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("SPOTIFY_TERM_HOME", str(home))
    return home


@pytest.fixture
def fake_spotify(monkeypatch) -> FakeSpotify:
    fake = FakeSpotify()
    real_client = httpx.Client

    def _client(*args: Any, **kwargs: Any) -> httpx.Client:
        kwargs["transport"] = httpx.MockTransport(fake.handle)
        return real_client(*args, **kwargs)

    monkeypatch.setattr(httpx, "Client", _client)
    return fake


@pytest.fixture
def config(data_home) -> Config:
    cfg = Config(client_id="client-123", client_secret="secret-456", redirect_port=str(free_port()))
    save_config(cfg)
    return cfg


@pytest.fixture
def stored_token(data_home) -> TokenRecord:
    token = TokenRecord(
        access_token="old-access",
        refresh_token="R",
        token_type="Bearer",
        expires_in=3600,
        scope="user-read-playback-state",
    )
    save_token_file(token)
    return token


def read_json(path) -> dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))
