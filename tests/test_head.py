import io
from pathlib import Path

import pytest

from verscli.client import APIError
from verscli.head import (
    check_cluster_impacts_head,
    check_vm_impacts_head,
    cleanup_after_deletion,
    clear_head,
    confirm_cluster_head_impact,
    confirm_vm_head_impact,
    get_current_head_vm,
    get_current_head_vm_info,
    set_head,
    set_head_from_identifier,
)
from verscli.panels import new_kill_styles


class FakeClient:
    def __init__(self, vms=None):
        self.vms = vms or {}
        self.requested = []

    def get_vm(self, vm_id):
        self.requested.append(vm_id)
        if vm_id not in self.vms:
            raise APIError("404 Not Found", status_code=404)
        return self.vms[vm_id]


@pytest.fixture(autouse=True)
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("NO_COLOR", "1")
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    return tmp_path


def test_missing_head_raises():
    with pytest.raises(FileNotFoundError, match="vers init"):
        get_current_head_vm()


def test_set_and_get_round_trip(workdir):
    set_head("vm-123")
    assert get_current_head_vm() == "vm-123"
    assert (workdir / ".vers" / "HEAD").read_text() == "vm-123"


def test_head_is_trimmed():
    Path(".vers").mkdir()
    Path(".vers/HEAD").write_text("  vm-9\n")
    assert get_current_head_vm() == "vm-9"


def test_cleared_head_is_empty():
    set_head("vm-123")
    clear_head()
    with pytest.raises(ValueError, match="HEAD is empty"):
        get_current_head_vm()


def test_check_vm_impacts_head():
    assert check_vm_impacts_head("vm-1") is False
    set_head("vm-1")
    assert check_vm_impacts_head("vm-1") is True
    assert check_vm_impacts_head("vm-2") is False


def test_cleanup_clears_matching_head():
    set_head("vm-2")
    assert cleanup_after_deletion(["vm-1", "vm-2"]) is True
    with pytest.raises(ValueError):
        get_current_head_vm()


def test_cleanup_keeps_other_head():
    set_head("vm-3")
    assert cleanup_after_deletion(["vm-1", "vm-2"]) is False
    assert get_current_head_vm() == "vm-3"


def test_cleanup_without_head():
    assert cleanup_after_deletion(["vm-1"]) is False


def test_check_cluster_impacts_head():
    set_head("vm-1")
    client = FakeClient({"vm-1": {"id": "vm-1", "cluster_id": "c-1"}})
    assert check_cluster_impacts_head(client, "c-1") is True
    assert check_cluster_impacts_head(client, "c-2") is False
    assert client.requested == ["vm-1", "vm-1"]


def test_check_cluster_impacts_head_api_error():
    set_head("vm-1")
    assert check_cluster_impacts_head(FakeClient(), "c-1") is False


def test_check_cluster_impacts_head_without_head():
    client = FakeClient()
    assert check_cluster_impacts_head(client, "c-1") is False
    assert client.requested == []


def test_confirm_vm_head_impact_no_impact(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    set_head("vm-1")
    assert confirm_vm_head_impact("vm-2", new_kill_styles()) is True


def test_confirm_vm_head_impact_asks(monkeypatch, capsys):
    set_head("vm-1")
    monkeypatch.setattr("sys.stdin", io.StringIO("n\n"))
    assert confirm_vm_head_impact("vm-1", new_kill_styles()) is False
    assert "Warning: This will affect the current HEAD" in capsys.readouterr().out
    monkeypatch.setattr("sys.stdin", io.StringIO("yes\n"))
    assert confirm_vm_head_impact("vm-1", new_kill_styles()) is True


def test_confirm_cluster_head_impact(monkeypatch):
    set_head("vm-1")
    client = FakeClient({"vm-1": {"id": "vm-1", "cluster_id": "c-1"}})
    monkeypatch.setattr("sys.stdin", io.StringIO("n\n"))
    assert confirm_cluster_head_impact(client, "c-1", new_kill_styles()) is False
    assert confirm_cluster_head_impact(client, "c-9", new_kill_styles()) is True


def test_set_head_from_identifier_stores_id():
    client = FakeClient({"dev": {"id": "vm-123", "alias": "dev", "state": "Running"}})
    info = set_head_from_identifier(client, "dev")
    assert info.id == "vm-123"
    assert info.display_name == "dev"
    assert get_current_head_vm() == "vm-123"


def test_set_head_from_unknown_identifier():
    with pytest.raises(LookupError):
        set_head_from_identifier(FakeClient(), "missing")
    assert not Path(".vers/HEAD").exists()


def test_get_current_head_vm_info():
    set_head("vm-5")
    client = FakeClient({"vm-5": {"id": "vm-5", "state": "Paused"}})
    info = get_current_head_vm_info(client)
    assert info.id == "vm-5"
    assert info.display_name == "vm-5"
    assert info.state == "Paused"