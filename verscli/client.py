"""A small HTTP client for the Vers API."""

from __future__ import annotations

import os
from http import HTTPStatus
from typing import Any

import requests

from verscli.auth import get_api_key, get_client_options, get_vers_url

_LOOPBACK = "127.0.0.1"


class APIError(Exception):
    """A failed API request; ``status_code`` is None when no response arrived."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class VersClient:
    """Authenticated access to the Vers REST API."""

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 30.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._session = requests.Session()

    @classmethod
    def from_env(cls) -> VersClient:
        """Build a client from VERS_URL and the stored or environment API key."""
        options = get_client_options()
        return cls(options["base_url"], get_api_key())

    def _request(self, method: str, path: str, params: dict[str, str] | None = None) -> requests.Response:
        url = f"{self.base_url}{path}"
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        try:
            response = self._session.request(
                method, url, headers=headers, params=params, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise APIError(f'{method} "{url}": {exc}') from exc
        if not response.ok:
            try:
                phrase = HTTPStatus(response.status_code).phrase
            except ValueError:
                phrase = response.reason or ""
            raise APIError(
                f'{method} "{url}": {response.status_code} {phrase} {response.text}'.rstrip(),
                status_code=response.status_code,
            )
        return response

    def _data(self, method: str, path: str, params: dict[str, str] | None = None) -> Any:
        response = self._request(method, path, params)
        try:
            payload = response.json()
        except ValueError as exc:
            raise APIError(f"failed to decode response from {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise APIError(f"unexpected response from {path}: expected a JSON object")
        return payload.get("data")

    def get_vm(self, vm_id: str) -> dict[str, Any]:
        """The VM with this ID or alias."""
        return self._data("GET", f"/api/vm/{vm_id}") or {}

    def get_cluster(self, cluster_id: str) -> dict[str, Any]:
        """The cluster with this ID or alias."""
        return self._data("GET", f"/api/cluster/{cluster_id}") or {}

    def list_clusters(self) -> list[dict[str, Any]]:
        """All clusters, each with its VMs."""
        return self._data("GET", "/api/cluster") or []

    def delete_vm(self, vm_id: str, recursive: bool = False) -> dict[str, Any]:
        """Delete a VM; returns the data object listing deleted IDs and errors."""
        params = {"recursive": "true" if recursive else "false"}
        return self._data("DELETE", f"/api/vm/{vm_id}", params) or {}

    def delete_cluster(self, cluster_id: str) -> dict[str, Any]:
        """Delete a cluster; returns the data object describing the outcome."""
        return self._data("DELETE", f"/api/cluster/{cluster_id}") or {}

    def get_ssh_key(self, vm_id: str) -> str:
        """The private SSH key for a VM."""
        return self._data("GET", f"/api/vm/{vm_id}/ssh_key") or ""

    def get_raw(self, path: str) -> requests.Response:
        """GET a path and return the whole response, headers included."""
        return self._request("GET", path)


def get_vm_and_node_ip(client: VersClient, vm_id: str) -> tuple[dict[str, Any], str]:
    """Fetch a VM and the host serving it.

    The host comes from the X-Node-IP response header, or else from the API URL.
    """
    response = client.get_raw(f"/api/vm/{vm_id}")
    try:
        payload = response.json()
    except ValueError as exc:
        raise ValueError(f"failed to decode VM response: {exc}") from exc
    if not isinstance(payload, dict):
        raise ValueError("failed to decode VM response: expected a JSON object")
    data = payload.get("data") or {}
    if not isinstance(data, dict):
        raise ValueError("failed to decode VM response: data must be an object")

    node_ip = response.headers.get("X-Node-IP", "")
    if node_ip:
        return data, node_ip

    try:
        url = get_vers_url()
    except ValueError as exc:
        raise ValueError(f"failed to get host IP: {exc}") from exc
    host = url.hostname or ""
    if os.environ.get("VERS_DEBUG") == "true":
        print(f"[DEBUG] No node IP in headers, using fallback: {host}")
    return data, host


def is_host_local(host_name: str) -> bool:
    """True for localhost, 0.0.0.0 and the IPv4 loopback address."""
    return host_name in ("localhost", "0.0.0.0", _LOOPBACK)