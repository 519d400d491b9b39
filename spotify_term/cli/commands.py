"""CLI commands for spotify-term."""

import logging
import time
from contextlib import contextmanager
from typing import Iterator

import typer
from rich.console import Console
from rich.markup import escape

from spotify_term import __logo__, __version__
from spotify_term.auth.constants import AUTHORIZATION_TIMEOUT_SEC
from spotify_term.errors import SpotifyTermError
from spotify_term.player.client import SpotifyClient

app = typer.Typer(
    name="spotify-term",
    help=f"{__logo__} spotify-term - Spotify playback control from the terminal",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()

# Give the player a moment to switch tracks before asking what is playing.
PLAYBACK_SETTLE_DELAY_SEC = 1.0


def _status(message: str) -> None:
    console.print(message, soft_wrap=True, markup=False, highlight=False)


def _line(text: str) -> None:
    """Write a data line as-is: no markup, highlighting or wrapping."""
    console.out(text, highlight=False)


def _prompt(text: str, default: str | None = None) -> str:
    return typer.prompt(text, default=default)


@contextmanager
def _report_errors(context: str) -> Iterator[None]:
    """Print a failed command's error and exit with status 1."""
    try:
        yield
    except SpotifyTermError as exc:
        console.print(f"[red]{escape(context)}[/red]")
        console.print(f"[red]Error: {escape(str(exc))}[/red]", soft_wrap=True)
        raise typer.Exit(1)


def _connect() -> SpotifyClient:
    with _report_errors("Error getting api access token."):
        return SpotifyClient.connect(on_auth=_show_auth_url, on_status=_status, on_prompt=_prompt)


def _show_auth_url(url: str) -> None:
    _status("Please, open this link in your browser to authorize the app:")
    _line(url)


def _show_now_playing(client: SpotifyClient) -> None:
    with _report_errors("Error on currently playing api request."):
        current = client.currently_playing()
    if current is None:
        _line("Nothing is playing right now.")
    else:
        _line(current.describe())


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} spotify-term v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """spotify-term - Spotify playback control from the terminal."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG)


# ============================================================================
# Setup / Login
# ============================================================================


@app.command()
def setup():
    """Perform first time setup."""
    from spotify_term.config.loader import get_config_path, load_config, load_or_create_config

    config_path = get_config_path()
    with _report_errors("Error getting user configuration."):
        if load_config(config_path) is not None:
            console.print(f"[yellow]Config already exists at {escape(str(config_path))}[/yellow]")
            console.print("Delete it to run the setup again.")
            return
        load_or_create_config(on_prompt=_prompt, on_status=_status, config_path=config_path)
    console.print(f"[green]✓[/green] Saved config to {escape(str(config_path))}")


@app.command()
def login(
    timeout: float = typer.Option(
        AUTHORIZATION_TIMEOUT_SEC, "--timeout", "-t", help="Seconds to wait for the browser callback"
    ),
    open_browser: bool = typer.Option(
        False, "--open-browser", "-b", help="Open the authorization link in the default browser"
    ),
):
    """Authorize application on Spotify."""
    from spotify_term.auth.flow import get_token

    with _report_errors("Error getting api access token."):
        get_token(
            on_auth=_show_auth_url,
            on_prompt=_prompt,
            on_status=_status,
            timeout=timeout,
            open_browser=open_browser,
        )
    console.print("[green]✓[/green] Successfully logged in!")


# ============================================================================
# Playback
# ============================================================================


@app.command()
def resume():
    """Resume current track."""
    with _connect() as client:
        with _report_errors("Error on resume track request."):
            client.resume()
        _show_now_playing(client)


@app.command()
def pause():
    """Pause current track."""
    with _connect() as client:
        with _report_errors("Error on pause track request."):
            client.pause()
    _line("Track paused.")


@app.command("next")
def next_track():
    """Skip to next track."""
    with _connect() as client:
        with _report_errors("Error on skip to next track api request."):
            client.next_track()
        time.sleep(PLAYBACK_SETTLE_DELAY_SEC)
        _show_now_playing(client)


@app.command()
def previous():
    """Skip to previous track."""
    with _connect() as client:
        with _report_errors("Error on skip to previous track api request."):
            client.previous_track()
        time.sleep(PLAYBACK_SETTLE_DELAY_SEC)
        _show_now_playing(client)


@app.command("now-playing")
def now_playing():
    """Show the track currently playing."""
    with _connect() as client:
        _show_now_playing(client)


@app.command()
def devices():
    """Show currently connected devices."""
    with _connect() as client:
        with _report_errors("Error on get devices request."):
            found = client.devices()
    if not found:
        _line("There are no available devices at the moment.")
        return
    for device in found:
        _line(device.describe())


@app.command()
def me():
    """Show the raw Spotify profile of the logged in user."""
    with _connect() as client:
        with _report_errors("Error on get profile request."):
            body = client.me()
    _line(body)


if __name__ == "__main__":
    app()
