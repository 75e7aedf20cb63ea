"""API key storage in ~/.versrc and API endpoint configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from urllib.parse import ParseResult, urlparse

from verscli.styles import ERROR_TEXT_STYLE

LEGACY_VERS_HOST = "13.219.19.157"
DEFAULT_VERS_URL = "https://api.vers.sh"
LOGIN_PROMPT = "No API key found. Please run 'vers login' to authenticate."


@dataclass
class AuthConfig:
    """Contents of the .versrc file."""

    api_key: str = ""


def get_config_path() -> Path:
    """Path of the .versrc file in the user's home directory."""
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise RuntimeError(f"failed to get user home directory: {exc}") from exc
    return home / ".versrc"


def load_config() -> AuthConfig:
    """Read .versrc; a missing or empty file gives an empty config."""
    path = get_config_path()
    if not path.exists():
        return AuthConfig()
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise OSError(f"failed to read config file: {exc}") from exc
    if not data:
        return AuthConfig()
    try:
        parsed = json.loads(data)
    except ValueError as exc:
        raise ValueError(f"failed to parse config file: {exc}") from exc
    if parsed is None:
        return AuthConfig()
    if not isinstance(parsed, dict):
        raise ValueError("failed to parse config file: expected a JSON object")
    api_key = parsed.get("apiKey")
    if api_key is None:
        return AuthConfig()
    if not isinstance(api_key, str):
        raise ValueError("failed to parse config file: apiKey must be a string")
    return AuthConfig(api_key=api_key)


def save_config(config: AuthConfig) -> None:
    """Write .versrc, readable and writable by the owner only."""
    path = get_config_path()
    data = json.dumps({"apiKey": config.api_key}, indent=2)
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)
    except OSError as exc:
        raise OSError(f"failed to write config file: {exc}") from exc


def get_api_key() -> str:
    """API key from VERS_API_KEY, falling back to the config file."""
    env_key = os.environ.get("VERS_API_KEY", "")
    if env_key:
        return env_key
    return load_config().api_key


def save_api_key(api_key: str) -> None:
    config = load_config()
    config.api_key = api_key
    save_config(config)


def has_api_key() -> bool:
    if os.environ.get("VERS_API_KEY", ""):
        return True
    return load_config().api_key != ""


def prompt_for_login() -> str:
    """Tell the user to log in; returns the rendered message that was printed."""
    message = ERROR_TEXT_STYLE.render(LOGIN_PROMPT)
    print(message)
    return message


def get_vers_url() -> ParseResult:
    """The API URL from VERS_URL or the default; the scheme must be http or https."""
    url_str = os.environ.get("VERS_URL", "")
    if not url_str.strip():
        url_str = DEFAULT_VERS_URL
    parsed = urlparse(url_str)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(
            f"invalid VERS_URL {parsed.geturl()}; URL must include scheme http:// or https://"
        )
    return parsed


def get_client_options() -> dict[str, str]:
    """Options for building an API client."""
    url = get_vers_url()
    verbose = os.environ.get("VERS_VERBOSE") == "true"
    if url.hostname == LEGACY_VERS_HOST and verbose:
        print(
            f"[DEPRECATED] Using legacy endpoint: {url.geturl()}. "
            "Please update to use new API keys from https://vers.sh"
        )
    if verbose:
        print(f"[DEBUG] Using API endpoint: {url.geturl()}")
    return {"base_url": url.geturl()}


def check_for_legacy_key() -> None:
    """Print a notice when a stored key is used against the legacy endpoint."""
    try:
        config = load_config()
        url = get_vers_url()
    except (OSError, ValueError, RuntimeError):
        return
    if config.api_key and url.hostname == LEGACY_VERS_HOST:
        print(
            "Notice: You're using a legacy API endpoint. Consider generating a new key "
            "at https://vers.sh for improved security and features."
        )