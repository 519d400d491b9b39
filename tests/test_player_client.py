import httpx
import pytest

from spotify_term.errors import ApiError, NetworkError, ParseError
from spotify_term.player.client import DEFAULT_API_BASE, SpotifyClient
from spotify_term.player.models import CurrentlyPlaying, Device

CURRENTLY_PLAYING = f"{DEFAULT_API_BASE}/me/player/currently-playing"
DEVICES = f"{DEFAULT_API_BASE}/me/player/devices"


def test_requests_carry_bearer_token(fake_spotify) -> None:
    fake_spotify.route("PUT", f"{DEFAULT_API_BASE}/me/player/pause", status_code=204)

    with SpotifyClient("token-abc") as client:
        client.pause()

    (request,) = fake_spotify.requests
    assert request.headers["Authorization"] == "Bearer token-abc"


@pytest.mark.parametrize(
    ("method_name", "http_method", "path"),
    [
        ("resume", "PUT", "/me/player/play"),
        ("pause", "PUT", "/me/player/pause"),
        ("next_track", "POST", "/me/player/next"),
        ("previous_track", "POST", "/me/player/previous"),
    ],
)
def test_playback_commands_hit_their_endpoint(fake_spotify, method_name, http_method, path) -> None:
    fake_spotify.route(http_method, f"{DEFAULT_API_BASE}{path}", status_code=204)

    with SpotifyClient("t") as client:
        getattr(client, method_name)()

    assert len(fake_spotify.calls(http_method, f"{DEFAULT_API_BASE}{path}")) == 1


def test_currently_playing_reads_track_and_first_artist(fake_spotify) -> None:
    fake_spotify.route(
        "GET",
        CURRENTLY_PLAYING,
        json={
            "is_playing": True,
            "progress_ms": 1000,
            "item": {
                "type": "track",
                "name": "Song [Live]",
                "artists": [{"name": "First"}, {"name": "Second"}],
                "album": {"name": "Album"},
            },
        },
    )

    with SpotifyClient("t") as client:
        current = client.currently_playing()

    assert current == CurrentlyPlaying(track_name="Song [Live]", artist_name="First")
    assert current.describe() == "Now playing: Song [Live] by First"


def test_currently_playing_empty_body_means_nothing_playing(fake_spotify) -> None:
    fake_spotify.route("GET", CURRENTLY_PLAYING, status_code=204)

    with SpotifyClient("t") as client:
        assert client.currently_playing() is None


def test_currently_playing_episode_uses_show_name() -> None:
    current = CurrentlyPlaying.from_payload(
        {"item": {"type": "episode", "name": "Ep 1", "show": {"name": "The Show"}}}
    )

    assert current.artist_name == "The Show"


def test_currently_playing_null_item_means_nothing_playing() -> None:
    assert CurrentlyPlaying.from_payload({"is_playing": False, "item": None}) is None


def test_devices_are_decoded_tolerantly(fake_spotify) -> None:
    fake_spotify.route(
        "GET",
        DEVICES,
        json={
            "devices": [
                {
                    "id": "dev-1",
                    "is_active": True,
                    "is_private_session": False,
                    "name": "Kitchen",
                    "type": "Speaker",
                    "volume_percent": 40,
                    "supports_volume": True,
                },
                {"id": "dev-2", "name": "Phone", "type": "Smartphone", "volume_percent": None},
            ]
        },
    )

    with SpotifyClient("t") as client:
        devices = client.devices()

    assert devices == [
        Device(id="dev-1", name="Kitchen", type="Speaker", volume_percent=40),
        Device(id="dev-2", name="Phone", type="Smartphone", volume_percent=None),
    ]
    assert devices[0].describe() == "Kitchen  Speaker  40%  dev-1"


def test_me_returns_raw_body(fake_spotify) -> None:
    fake_spotify.route("GET", f"{DEFAULT_API_BASE}/me", text='{"display_name": "someone"}')

    with SpotifyClient("t") as client:
        assert client.me() == '{"display_name": "someone"}'


def test_api_error_carries_status_and_message(fake_spotify) -> None:
    fake_spotify.route(
        "PUT",
        f"{DEFAULT_API_BASE}/me/player/play",
        status_code=403,
        json={"error": {"status": 403, "message": "Player command failed: Premium required"}},
    )

    with SpotifyClient("t") as client:
        with pytest.raises(ApiError) as exc_info:
            client.resume()

    assert exc_info.value.status_code == 403
    assert "Premium required" in str(exc_info.value)


def test_transport_failure_raises_network_error(fake_spotify) -> None:
    def boom(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    fake_spotify.route("GET", DEVICES, handler=boom)

    with SpotifyClient("t") as client:
        with pytest.raises(NetworkError):
            client.devices()


def test_invalid_json_raises_parse_error(fake_spotify) -> None:
    fake_spotify.route("GET", DEVICES, text="not json")

    with SpotifyClient("t") as client:
        with pytest.raises(ParseError):
            client.devices()


@pytest.mark.parametrize(
    "item",
    [
        {"type": "track", "name": "Song", "artists": ["First"]},
        {"type": "track", "name": "Song", "artists": {"name": "First"}},
        {"type": "episode", "name": "Ep 1", "show": "The Show"},
    ],
)
def test_currently_playing_malformed_item_raises_parse_error(item) -> None:
    with pytest.raises(ParseError):
        CurrentlyPlaying.from_payload({"item": item})


def test_malformed_now_playing_is_reported_not_crashing(fake_spotify) -> None:
    fake_spotify.route("GET", CURRENTLY_PLAYING, json={"item": {"name": "Song", "artists": [42]}})

    with SpotifyClient("t") as client:
        with pytest.raises(ParseError):
            client.currently_playing()
