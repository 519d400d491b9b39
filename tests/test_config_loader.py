import pytest

from spotify_term.config.loader import get_config_path, load_config, load_or_create_config, save_config
from spotify_term.config.schema import Config
from spotify_term.errors import ConfigError, ParseError

from conftest import read_json


def _scripted(answers: list[str]):
    asked: list[tuple[str, str | None]] = []

    def prompt(text: str, default: str | None) -> str:
        asked.append((text, default))
        return answers.pop(0)

    return prompt, asked


def test_config_path_lives_in_data_home(data_home) -> None:
    assert get_config_path() == data_home / ".spotify-term.config"


def test_first_run_prompts_and_persists() -> None:
    prompt, asked = _scripted(["my-id", "my-secret", "8080"])
    lines: list[str] = []

    config = load_or_create_config(on_prompt=prompt, on_status=lines.append)

    assert config == Config(client_id="my-id", client_secret="my-secret", redirect_port="8080")
    assert len(asked) == 3
    assert read_json(get_config_path()) == {
        "client_id": "my-id",
        "client_secret": "my-secret",
        "redirect_port": "8080",
    }
    assert "http://localhost:8080/callback" in lines[-1]


def test_blank_port_uses_default() -> None:
    prompt, _ = _scripted(["id", "secret", ""])

    config = load_or_create_config(on_prompt=prompt, on_status=lambda _line: None)

    assert config.redirect_port == "5958"


def test_existing_config_is_returned_without_prompting() -> None:
    save_config(Config(client_id="a", client_secret="b", redirect_port="1234"))

    def prompt(_text: str, _default: str | None) -> str:
        raise AssertionError("should not prompt")

    config = load_or_create_config(on_prompt=prompt)

    assert config == Config(client_id="a", client_secret="b", redirect_port="1234")


def test_whitespace_only_file_counts_as_missing() -> None:
    get_config_path().write_text("  \n", encoding="utf-8")

    assert load_config() is None


def test_malformed_config_raises_parse_error() -> None:
    get_config_path().write_text("{not json", encoding="utf-8")

    with pytest.raises(ParseError):
        load_or_create_config()


def test_non_object_config_raises_parse_error() -> None:
    get_config_path().write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ParseError):
        load_config()


def test_missing_keys_load_as_empty_strings() -> None:
    get_config_path().write_text('{"client_id": "only-id"}', encoding="utf-8")

    config = load_config()

    assert config == Config(client_id="only-id", client_secret="", redirect_port="")


def test_redirect_uri_uses_port() -> None:
    assert Config(redirect_port="5958").redirect_uri == "http://localhost:5958/callback"


@pytest.mark.parametrize("port", ["", "abc", "0", "70000"])
def test_invalid_port_raises_config_error(port: str) -> None:
    with pytest.raises(ConfigError):
        Config(redirect_port=port).port
