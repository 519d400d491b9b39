"""Spotify OAuth constants."""

AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
TOKEN_URL = "https://accounts.spotify.com/api/token"
CALLBACK_PATH = "/callback"
SCOPE = "user-modify-playback-state user-read-currently-playing user-read-playback-state"

TOKEN_FILENAME = ".spotify-term"
TOKEN_REQUEST_TIMEOUT_SEC = 30.0
AUTHORIZATION_TIMEOUT_SEC = 300.0
SUCCESS_HTML = (
    "<!doctype html>"
    "<html lang=\"en\">"
    "<head>"
    "<meta charset=\"utf-8\" />"
    "<title>spotify-term authorized</title>"
    "</head>"
    "<body>"
    "<p>Successfully authorized, you can go back to your terminal now.</p>"
    "</body>"
    "</html>"
)
MISSING_CODE_TEXT = "Couldn't get code from request URI.\n"
