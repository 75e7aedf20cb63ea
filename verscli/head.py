"""The HEAD pointer in .vers/HEAD naming the current VM."""

from __future__ import annotations

import contextlib
from collections.abc import Iterable
from pathlib import Path

from verscli.client import APIError, VersClient
from verscli.output import ask_confirmation
from verscli.panels import KillStyles
from verscli.resolve import VMInfo, resolve_vm_identifier

VERS_DIR = ".vers"
HEAD_FILE = "HEAD"


def _head_path() -> Path:
    return Path(VERS_DIR) / HEAD_FILE


def get_current_head_vm() -> str:
    """The VM ID stored in HEAD."""
    path = _head_path()
    if not path.exists():
        raise FileNotFoundError("HEAD not found. Run 'vers init' first")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise OSError(f"error reading HEAD: {exc}") from exc
    vm_id = content.strip()
    if not vm_id:
        raise ValueError("HEAD is empty. Create a VM first with 'vers run'")
    return vm_id


def set_head(vm_id: str) -> None:
    """Point HEAD at a VM ID, creating the .vers directory if needed."""
    try:
        Path(VERS_DIR).mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OSError(f"failed to create .vers directory: {exc}") from exc
    _head_path().write_text(vm_id, encoding="utf-8")


def clear_head() -> None:
    _head_path().write_text("", encoding="utf-8")


def get_current_head_vm_info(client: VersClient) -> VMInfo:
    """Resolve the HEAD VM through the API."""
    return resolve_vm_identifier(client, get_current_head_vm())


def set_head_from_identifier(client: VersClient, identifier: str) -> VMInfo:
    """Resolve a VM ID or alias and store its ID in HEAD."""
    info = resolve_vm_identifier(client, identifier)
    try:
        set_head(info.id)
    except OSError as exc:
        raise OSError(f"failed to update HEAD: {exc}") from exc
    return info


def _head_or_none() -> str | None:
    try:
        return get_current_head_vm()
    except (OSError, ValueError):
        return None


def check_vm_impacts_head(vm_id: str) -> bool:
    """True when deleting this VM would remove HEAD."""
    head = _head_or_none()
    return head is not None and head == vm_id


def check_cluster_impacts_head(client: VersClient, cluster_id: str) -> bool:
    """True when the HEAD VM belongs to this cluster."""
    head = _head_or_none()
    if head is None:
        return False
    try:
        vm = client.get_vm(head)
    except APIError:
        return False
    return vm.get("cluster_id") == cluster_id


def confirm_vm_head_impact(vm_id: str, styles: KillStyles) -> bool:
    if not check_vm_impacts_head(vm_id):
        return True
    print(styles.warning.render("Warning: This will affect the current HEAD"))
    return ask_confirmation()


def confirm_cluster_head_impact(client: VersClient, cluster_id: str, styles: KillStyles) -> bool:
    if not check_cluster_impacts_head(client, cluster_id):
        return True
    print(styles.warning.render("Warning: This will affect the current HEAD"))
    return ask_confirmation()


def cleanup_after_deletion(deleted_vm_ids: Iterable[str]) -> bool:
    """Clear HEAD if it names one of the deleted VMs; True when it was cleared."""
    head = _head_or_none()
    if head is None or head not in set(deleted_vm_ids):
        return False
    with contextlib.suppress(OSError):
        clear_head()
    return True