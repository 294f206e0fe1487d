"""A small client for the parts of the Kubernetes REST API that workloads use."""

from __future__ import annotations

import json
from typing import Any

import requests

_RESOURCES: dict[str, tuple[str, str]] = {
    "deployment": ("apis/apps/v1", "deployments"),
    "job": ("apis/batch/v1", "jobs"),
    "service": ("api/v1", "services"),
    "configmap": ("api/v1", "configmaps"),
}

_MERGE_PATCH = "application/merge-patch+json"
_DELETE_OPTIONS = {"kind": "DeleteOptions", "apiVersion": "v1"}


class KubeError(Exception):
    """Raised when the Kubernetes API cannot be reached or rejects a request."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _error_message(response: requests.Response) -> str:
    message = ""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        message = str(payload["message"])
    if not message:
        message = response.text.strip() or (response.reason or "")
    return f"HTTP {response.status_code}: {message}"


class KubeClient:
    """Sends create, patch, delete and status requests for namespaced resources."""

    def __init__(self, base_url: str, session: requests.Session | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()

    def _collection_url(self, kind: str, namespace: str) -> str:
        try:
            prefix, plural = _RESOURCES[kind.lower()]
        except KeyError:
            raise ValueError(f"unsupported resource kind: {kind}") from None
        return f"{self.base_url}/{prefix}/namespaces/{namespace}/{plural}"

    def _send(self, method: str, url: str, body: Any = None,
              content_type: str = "application/json") -> Any:
        kwargs: dict[str, Any] = {}
        if body is not None:
            kwargs["data"] = json.dumps(body).encode("utf-8")
            kwargs["headers"] = {"Content-Type": content_type}
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as exc:
            raise KubeError(str(exc)) from exc
        if not response.ok:
            raise KubeError(_error_message(response), response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise KubeError(f"invalid JSON in response from {url}") from exc

    def create(self, kind: str, namespace: str, body: dict) -> Any:
        """Create a resource in a namespace and return the stored object."""
        return self._send("POST", self._collection_url(kind, namespace), body)

    def patch(self, kind: str, namespace: str, name: str, body: Any) -> Any:
        """Apply a merge patch to a named resource and return the result."""
        url = f"{self._collection_url(kind, namespace)}/{name}"
        return self._send("PATCH", url, body, content_type=_MERGE_PATCH)

    def delete(self, kind: str, namespace: str, name: str) -> Any:
        """Delete a named resource."""
        url = f"{self._collection_url(kind, namespace)}/{name}"
        return self._send("DELETE", url, dict(_DELETE_OPTIONS))

    def get_status(self, kind: str, namespace: str, name: str) -> Any:
        """Fetch the status subresource of a named resource."""
        url = f"{self._collection_url(kind, namespace)}/{name}/status"
        return self._send("GET", url)