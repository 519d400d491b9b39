"""Spotify OAuth login and token management."""

from __future__ import annotations

import asyncio
import base64
import logging
import urllib.parse
import webbrowser
from typing import Any, Callable

import httpx

from spotify_term.auth.constants import (
    AUTHORIZATION_TIMEOUT_SEC,
    AUTHORIZE_URL,
    SCOPE,
    TOKEN_REQUEST_TIMEOUT_SEC,
    TOKEN_URL,
)
from spotify_term.auth.models import TokenRecord
from spotify_term.auth.server import start_callback_server
from spotify_term.auth.storage import (
    FileLock,
    get_token_path,
    load_token_file,
    save_token_file,
)
from spotify_term.config.loader import Prompt, load_or_create_config
from spotify_term.config.schema import Config
from spotify_term.errors import (
    AuthError,
    AuthorizationTimedOut,
    MissingCodeError,
    NetworkError,
    ParseError,
)

logger = logging.getLogger(__name__)


def build_authorization_url(config: Config) -> str:
    params = {
        "client_id": config.client_id,
        "response_type": "code",
        "redirect_uri": config.redirect_uri,
        "scope": SCOPE,
    }
    return f"{AUTHORIZE_URL}?{urllib.parse.urlencode(params, quote_via=urllib.parse.quote)}"


def parse_authorization_input(raw: str) -> str | None:
    """Extract the code from a pasted redirect URL, query string or bare code."""
    value = raw.strip()
    if not value:
        return None

    url = urllib.parse.urlparse(value)
    if url.query:
        return urllib.parse.parse_qs(url.query).get("code", [None])[0]
    if "code=" in value:
        return urllib.parse.parse_qs(value).get("code", [None])[0]
    if url.scheme or "/" in value:
        return None
    return value


def _basic_auth_header(config: Config) -> str:
    credentials = f"{config.client_id}:{config.client_secret}".encode("utf-8")
    return "Basic " + base64.b64encode(credentials).decode("ascii")


def _request_token(config: Config, data: dict[str, str]) -> dict[str, Any]:
    headers = {
        "Authorization": _basic_auth_header(config),
        "Content-Type": "application/x-www-form-urlencoded",
    }
    logger.debug("Requesting token with grant_type=%s", data["grant_type"])
    try:
        with httpx.Client(timeout=TOKEN_REQUEST_TIMEOUT_SEC) as client:
            response = client.post(TOKEN_URL, data=data, headers=headers)
    except httpx.HTTPError as exc:
        raise NetworkError(f"Token request failed: {exc}") from exc

    try:
        payload = response.json()
    except ValueError as exc:
        raise ParseError(f"Token response is not valid JSON (HTTP {response.status_code})") from exc
    if not isinstance(payload, dict):
        raise ParseError("Token response must be a JSON object")

    if not response.is_success:
        detail = payload.get("error_description") or payload.get("error") or response.text
        raise AuthError(f"Token request failed: {response.status_code} {detail}")
    return payload


def _store_token(payload: dict[str, Any], refresh_token: str | None = None) -> TokenRecord:
    token = TokenRecord.from_payload(payload, refresh_token=refresh_token)
    if not token.is_complete():
        raise AuthError("Token response missing access_token or refresh_token")
    save_token_file(token)
    return token


def exchange_code_for_token(config: Config, code: str) -> TokenRecord:
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "redirect_uri": config.redirect_uri,
    }
    return _store_token(_request_token(config, data))


def refresh_token(config: Config, refresh: str) -> TokenRecord:
    data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh,
        "redirect_uri": config.redirect_uri,
    }
    return _store_token(_request_token(config, data), refresh_token=refresh)


async def wait_for_code(code_future: asyncio.Future[str], timeout: float) -> str:
    """Wait for the callback server to fulfil ``code_future``."""
    try:
        return await asyncio.wait_for(code_future, timeout=timeout)
    except asyncio.TimeoutError:
        raise AuthorizationTimedOut(
            f"No authorization callback received within {timeout:g} seconds."
        ) from None


def authorize(
    config: Config,
    on_auth: Callable[[str], None] | None = None,
    on_prompt: Prompt | None = None,
    on_status: Callable[[str], None] | None = None,
    timeout: float = AUTHORIZATION_TIMEOUT_SEC,
    open_browser: bool = False,
) -> str:
    """
    Run the browser authorization and return the authorization code.

    The code arrives through a local callback server bound to the configured
    redirect port. The server is shut down once the flow ends, whatever the
    outcome. When the port cannot be bound the user is asked to paste the
    redirected URL instead.
    """
    url = build_authorization_url(config)
    port = config.port

    async def _authorize_async() -> str:
        loop = asyncio.get_running_loop()
        code_future: asyncio.Future[str] = loop.create_future()

        def _resolve(code_value: str) -> None:
            if not code_future.done():
                code_future.set_result(code_value)

        def _reject(exc: Exception) -> None:
            if not code_future.done():
                code_future.set_exception(exc)

        server, server_error = start_callback_server(
            port,
            on_code=lambda code_value: loop.call_soon_threadsafe(_resolve, code_value),
            on_error=lambda exc: loop.call_soon_threadsafe(_reject, exc),
        )
        try:
            if on_auth:
                on_auth(url)
            else:
                print(f"Please, open this link in your browser to authorize the app: {url}")
            if open_browser:
                webbrowser.open(url)

            if server:
                if on_status:
                    on_status("Waiting for the browser callback...")
                return await wait_for_code(code_future, timeout)

            if on_status:
                on_status(
                    f"Local callback server could not start ({server_error}). "
                    "You will need to paste the redirected URL."
                )
            prompt = "Paste the URL your browser was redirected to:"
            ask = on_prompt or (lambda text, _default: input(f"{text} "))
            raw = await loop.run_in_executor(None, ask, prompt, None)
            code = parse_authorization_input(raw)
            if not code:
                raise MissingCodeError("Authorization code not found in the pasted input.")
            return code
        finally:
            if server:
                server.close()
                logger.debug("Callback server closed")

    return asyncio.run(_authorize_async())


def get_token(
    config: Config | None = None,
    on_auth: Callable[[str], None] | None = None,
    on_prompt: Prompt | None = None,
    on_status: Callable[[str], None] | None = None,
    timeout: float = AUTHORIZATION_TIMEOUT_SEC,
    open_browser: bool = False,
) -> TokenRecord:
    """
    Get a fresh token record.

    With a stored record this is a refresh grant using its refresh token;
    otherwise the browser authorization runs first. There is no expiry
    check: every call talks to the token endpoint.
    """
    config = config or load_or_create_config(on_prompt=on_prompt, on_status=on_status)
    token_path = get_token_path()

    with FileLock(token_path.with_name(token_path.name + ".lock")):
        stored = load_token_file(token_path)
        if stored and stored.refresh_token:
            logger.debug("Refreshing stored token")
            return refresh_token(config, stored.refresh_token)

    code = authorize(
        config,
        on_auth=on_auth,
        on_prompt=on_prompt,
        on_status=on_status,
        timeout=timeout,
        open_browser=open_browser,
    )
    if on_status:
        on_status("Exchanging authorization code for tokens...")
    return exchange_code_for_token(config, code)


def get_access_token(config: Config | None = None, **kwargs: Any) -> str:
    """Get an access token for the Web API."""
    return get_token(config, **kwargs).access_token
