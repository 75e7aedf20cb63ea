"""Replacing the installed executable with the newest release."""

from __future__ import annotations

import contextlib
import hashlib
import os
import platform
import shutil
import sys
import tempfile
from pathlib import Path

import requests

from verscli.output import ask_confirmation
from verscli.update import GitHubRelease, get_latest_release, update_check_time

_CHUNK_SIZE = 32 * 1024
_TIMEOUT = 60
_ARCH_NAMES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
    "386": "386",
}


class UpgradeError(Exception):
    """An upgrade step that failed."""


def _platform(system: str | None, machine: str | None) -> tuple[str, str]:
    os_name = (system if system is not None else platform.system()).lower()
    arch = (machine if machine is not None else platform.machine()).lower()
    return os_name, _ARCH_NAMES.get(arch, arch)


def binary_name(system: str | None = None, machine: str | None = None) -> str:
    """Release asset name for a platform, by default the running one."""
    os_name, arch = _platform(system, machine)
    name = f"vers-{os_name}-{arch}"
    if os_name == "windows":
        name += ".exe"
    return name


def verify_checksum(file_path: str | Path, checksum_url: str) -> str:
    """Compare a file's SHA-256 with the published one; return the digest on success."""
    try:
        response = requests.get(checksum_url, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise UpgradeError(f"failed to download checksum: {exc}") from exc
    if response.status_code != 200:
        raise UpgradeError(f"failed to download checksum: HTTP {response.status_code}")

    expected = response.text.strip()[:64]
    try:
        with open(file_path, "rb") as handle:
            actual = hashlib.file_digest(handle, "sha256").hexdigest()
    except OSError as exc:
        raise UpgradeError(f"failed to calculate checksum: {exc}") from exc

    if actual != expected:
        raise UpgradeError(f"checksum mismatch: expected {expected}, got {actual}")
    return actual


def download_file(url: str, expected_size: int = 0) -> Path:
    """Download ``url`` to a temporary file, showing progress when the size is known."""
    try:
        response = requests.get(url, stream=True, timeout=_TIMEOUT)
    except requests.RequestException as exc:
        raise UpgradeError(str(exc)) from exc
    with response:
        if response.status_code != 200:
            raise UpgradeError(f"download failed with status: {response.status_code}")

        fd, name = tempfile.mkstemp(prefix="vers-upgrade-")
        path = Path(name)
        downloaded = 0
        try:
            with os.fdopen(fd, "wb") as handle:
                for chunk in response.iter_content(_CHUNK_SIZE):
                    if not chunk:
                        continue
                    handle.write(chunk)
                    downloaded += len(chunk)
                    if expected_size > 0:
                        progress = downloaded / expected_size * 100
                        print(
                            f"\rProgress: {progress:.1f}% ({downloaded}/{expected_size} bytes)",
                            end="",
                            flush=True,
                        )
        except (OSError, requests.RequestException) as exc:
            path.unlink(missing_ok=True)
            raise UpgradeError(str(exc)) from exc
    print()
    return path


def copy_file(src: str | Path, dst: str | Path) -> None:
    """Copy a file's contents and permission bits."""
    shutil.copyfile(src, dst)
    shutil.copymode(src, dst)


def install_new_binary(source_path: str | Path, target_path: str | Path) -> None:
    """Copy the new executable into place and make it executable."""
    copy_file(source_path, target_path)
    os.chmod(target_path, 0o755)


def _current_executable() -> Path:
    launched = sys.argv[0] if sys.argv else ""
    candidate = Path(launched) if launched else None
    if candidate is None or not candidate.is_file():
        found = shutil.which(launched) if launched else None
        if found is None:
            raise UpgradeError("failed to get current executable path")
        candidate = Path(found)
    return candidate.resolve()


def perform_upgrade(release: GitHubRelease, skip_checksum: bool = False) -> None:
    """Download, verify and install the release asset for this platform."""
    name = binary_name()
    binary_url = checksum_url = ""
    binary_size = 0
    for asset in release.assets:
        if asset.name == name:
            binary_url = asset.browser_download_url
            binary_size = asset.size
        if asset.name == name + ".sha256":
            checksum_url = asset.browser_download_url

    if not binary_url:
        os_name, arch = _platform(None, None)
        raise UpgradeError(f"no compatible binary found for {os_name}-{arch}")

    print(f"Downloading {name}...")
    try:
        temp_file = download_file(binary_url, binary_size)
    except UpgradeError as exc:
        raise UpgradeError(f"failed to download update: {exc}") from exc

    try:
        if checksum_url and not skip_checksum:
            print("Verifying download integrity...")
            try:
                verify_checksum(temp_file, checksum_url)
            except UpgradeError as exc:
                raise UpgradeError(f"checksum verification failed: {exc}") from exc
            print("✓ Checksum verification passed")
        elif skip_checksum:
            print("⚠️  Skipping checksum verification (not recommended)")

        current = _current_executable()
        backup = current.with_name(current.name + ".backup")
        try:
            copy_file(current, backup)
        except OSError as exc:
            raise UpgradeError(f"failed to create backup: {exc}") from exc

        try:
            install_new_binary(temp_file, current)
        except OSError as exc:
            with contextlib.suppress(OSError):
                os.replace(backup, current)
            raise UpgradeError(f"failed to install update: {exc}") from exc

        backup.unlink(missing_ok=True)
    finally:
        temp_file.unlink(missing_ok=True)

    print(f"✓ Successfully upgraded to version {release.tag_name}!")
    print("Please restart any running vers processes to use the new version.")


def run_upgrade(
    current_version: str,
    repository: str,
    check_only: bool = False,
    prerelease: bool = False,
    skip_checksum: bool = False,
    verbose: bool = False,
) -> bool:
    """Check for a newer release and install it after confirmation.

    Returns True when a new version was installed.
    """
    current = current_version.removeprefix("v")
    if current in ("dev", "unknown"):
        raise UpgradeError("cannot upgrade development or unknown versions")

    print(f"Current version: {current_version}")
    try:
        latest = get_latest_release(repository, prerelease, verbose)
    except RuntimeError as exc:
        raise UpgradeError(f"failed to check for updates: {exc}") from exc

    print(f"Latest version: {latest.tag_name}")
    if current == latest.tag_name.removeprefix("v"):
        print("You are already running the latest version!")
        update_check_time()
        return False

    if check_only:
        print(f"A new version is available: {current_version} -> {latest.tag_name}")
        print("Run 'vers upgrade' to install the update.")
        return False

    print(f"\nUpgrade from {current_version} to {latest.tag_name}?")
    if not ask_confirmation():
        print("Upgrade cancelled.")
        return False

    perform_upgrade(latest, skip_checksum)
    update_check_time()
    return True