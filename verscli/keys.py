"""Per-VM SSH keys cached under .vers/keys."""

from __future__ import annotations

import os
from pathlib import Path

from verscli.client import APIError, VersClient
from verscli.panels import new_status_styles


def ssh_key_path(vm_id: str) -> Path:
    """Where the SSH key for a VM is stored."""
    return Path(".vers") / "keys" / f"{vm_id}.key"


def get_or_create_ssh_key(vm_id: str, client: VersClient) -> Path:
    """Return the path of the VM's SSH key, fetching and saving it if missing."""
    styles = new_status_styles()
    key_path = ssh_key_path(vm_id)

    if key_path.exists():
        print(styles.head_status.render(f"Using existing SSH key from {key_path}"))
        return key_path

    try:
        key_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create keys directory: {exc}") from exc

    try:
        key_material = client.get_ssh_key(vm_id)
    except APIError as exc:
        raise RuntimeError(f"failed to get SSH key: {exc}") from exc

    try:
        fd = os.open(key_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(key_material)
    except OSError as exc:
        raise OSError(f"failed to write key file: {exc}") from exc

    print(styles.head_status.render(f"SSH key saved to {key_path}"))
    return key_path