"""Checking GitHub releases for a newer version of the CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from verscli.config import load_cli_config, save_cli_config

_REQUEST_TIMEOUT = 30


@dataclass
class ReleaseAsset:
    name: str = ""
    browser_download_url: str = ""
    size: int = 0


@dataclass
class GitHubRelease:
    tag_name: str = ""
    name: str = ""
    body: str = ""
    draft: bool = False
    prerelease: bool = False
    assets: list[ReleaseAsset] = field(default_factory=list)
    published_at: str = ""


def _release_from_json(payload: Any) -> GitHubRelease:
    if not isinstance(payload, dict):
        raise RuntimeError("failed to decode release info: expected a JSON object")
    assets = [
        ReleaseAsset(
            name=asset.get("name") or "",
            browser_download_url=asset.get("browser_download_url") or "",
            size=int(asset.get("size") or 0),
        )
        for asset in payload.get("assets") or []
        if isinstance(asset, dict)
    ]
    return GitHubRelease(
        tag_name=payload.get("tag_name") or "",
        name=payload.get("name") or "",
        body=payload.get("body") or "",
        draft=bool(payload.get("draft")),
        prerelease=bool(payload.get("prerelease")),
        assets=assets,
        published_at=payload.get("published_at") or "",
    )


def get_latest_release(
    repository: str, include_prerelease: bool = False, verbose: bool = False
) -> GitHubRelease:
    """Fetch the latest release; with prereleases, the newest release that is not a draft."""
    repo_path = repository.removeprefix("https://github.com/")
    api_url = f"https://api.github.com/repos/{repo_path}/releases"
    if not include_prerelease:
        api_url += "/latest"

    if verbose:
        print(f"[DEBUG] Fetching release info from: {api_url}")

    try:
        response = requests.get(api_url, timeout=_REQUEST_TIMEOUT)
    except requests.RequestException as exc:
        raise RuntimeError(f"failed to fetch release info: {exc}") from exc

    if response.status_code != 200:
        raise RuntimeError(f"GitHub API returned status: {response.status_code}")

    try:
        payload = response.json()
    except ValueError as exc:
        raise RuntimeError(f"failed to decode release info: {exc}") from exc

    if not include_prerelease:
        return _release_from_json(payload)

    if not isinstance(payload, list):
        raise RuntimeError("failed to decode release info: expected a JSON array")
    for item in payload:
        release = _release_from_json(item)
        if not release.draft:
            return release
    raise RuntimeError("no releases found")


def check_for_updates(current_version: str, repository: str, verbose: bool = False) -> tuple[bool, str]:
    """Return whether a different release is available, and its tag.

    Development builds and lookup failures report no update.
    """
    current = current_version.removeprefix("v")
    if current in ("dev", "unknown"):
        if verbose:
            print("[DEBUG] Skipping update check for development version")
        return False, ""

    try:
        latest = get_latest_release(repository, False, verbose)
    except RuntimeError as exc:
        if verbose:
            print(f"[DEBUG] Failed to check for updates: {exc}")
        return False, ""

    latest_version = latest.tag_name.removeprefix("v")
    if verbose:
        print(f"[DEBUG] Current: {current}, Latest: {latest_version}")
    return current != latest_version, latest.tag_name


def should_check_for_update() -> bool:
    """True when the stored schedule says an update check is due."""
    try:
        config = load_cli_config()
    except (OSError, ValueError, RuntimeError):
        return False
    return config.should_check_for_update()


def update_check_time() -> None:
    """Record an update check now and store the next scheduled time."""
    try:
        config = load_cli_config()
    except (OSError, ValueError, RuntimeError):
        return
    config.set_next_check_time()
    try:
        save_cli_config(config)
    except (OSError, RuntimeError):
        pass