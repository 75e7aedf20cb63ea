import json

import pytest
import requests
import responses

from verscli.client import APIError, VersClient, get_vm_and_node_ip, is_host_local

BASE_URL = "http://vers.test"
VM_URL = f"{BASE_URL}/api/vm/test-vm-123"
VM_BODY = json.dumps(
    {"data": {"id": "test-vm-123", "state": "Running", "network_info": {"ssh_port": 22}}}
)


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("VERS_URL", BASE_URL)
    monkeypatch.setenv("VERS_API_KEY", "placeholder")
    monkeypatch.delenv("VERS_DEBUG", raising=False)
    monkeypatch.delenv("VERS_VERBOSE", raising=False)


@pytest.fixture
def client(env):
    return VersClient.from_env()


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def test_from_env_uses_environment(client):
    assert client.base_url == BASE_URL
    assert client.api_key == "placeholder"


def test_success_with_node_ip(client, mocked):
    mocked.add(responses.GET, VM_URL, body=VM_BODY, headers={"X-Node-IP": "192.168.1.100"})
    vm, node_ip = get_vm_and_node_ip(client, "test-vm-123")
    assert node_ip == "192.168.1.100"
    assert vm["id"] == "test-vm-123"
    assert vm["state"] == "Running"
    assert mocked.calls[0].request.headers["Authorization"] == "Bearer placeholder"


def test_no_node_ip_header_falls_back_to_api_host(client, mocked):
    mocked.add(responses.GET, VM_URL, body=VM_BODY)
    vm, node_ip = get_vm_and_node_ip(client, "test-vm-123")
    assert node_ip == "vers.test"
    assert vm["id"] == "test-vm-123"


def test_fallback_prints_debug_message(client, mocked, monkeypatch, capsys):
    monkeypatch.setenv("VERS_DEBUG", "true")
    mocked.add(responses.GET, VM_URL, body=VM_BODY)
    vm, node_ip = get_vm_and_node_ip(client, "test-vm-123")
    assert node_ip == "vers.test"
    assert vm["id"] == "test-vm-123"
    assert "[DEBUG] No node IP in headers, using fallback: vers.test" in capsys.readouterr().out


def test_http_error_raises(client, mocked):
    mocked.add(responses.GET, VM_URL, body=VM_BODY, status=500)
    with pytest.raises(APIError) as info:
        get_vm_and_node_ip(client, "test-vm-123")
    assert info.value.status_code == 500


def test_invalid_json_raises(client, mocked):
    mocked.add(responses.GET, VM_URL, body="invalid json response", headers={"X-Node-IP": "192.168.1.100"})
    with pytest.raises(ValueError, match="failed to decode VM response"):
        get_vm_and_node_ip(client, "test-vm-123")


def test_timeout_raises(client, mocked):
    mocked.add(responses.GET, VM_URL, body=requests.exceptions.ReadTimeout("timed out"))
    with pytest.raises(APIError) as info:
        get_vm_and_node_ip(client, "test-vm-123")
    assert info.value.status_code is None


def test_auth_failure_raises(client, mocked):
    mocked.add(responses.GET, VM_URL, json={"error": "unauthorized"}, status=401)
    with pytest.raises(APIError) as info:
        get_vm_and_node_ip(client, "test-vm-123")
    assert info.value.status_code == 401


def test_error_message_names_status(client, mocked):
    mocked.add(responses.DELETE, VM_URL, body="HasChildren", status=409)
    with pytest.raises(APIError) as info:
        client.delete_vm("test-vm-123", False)
    assert "409 Conflict" in str(info.value)
    assert "HasChildren" in str(info.value)


def test_delete_vm_sends_recursive_flag(client, mocked):
    mocked.add(
        responses.DELETE,
        VM_URL,
        json={"data": {"deleted_ids": ["test-vm-123"], "errors": []}},
    )
    result = client.delete_vm("test-vm-123", True)
    assert result["deleted_ids"] == ["test-vm-123"]
    assert "recursive=true" in mocked.calls[0].request.url


def test_list_clusters_returns_data(client, mocked):
    clusters = [{"id": "c-1", "alias": "prod", "vm_count": 2}]
    mocked.add(responses.GET, f"{BASE_URL}/api/cluster", json={"data": clusters})
    assert client.list_clusters() == clusters


@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("localhost", True),
        ("0.0.0.0", True),
        ("127.0.0.1", True),
        ("vers.test", False),
        ("192.168.1.100", False),
    ],
)
def test_is_host_local(host, expected):
    assert is_host_local(host) is expected