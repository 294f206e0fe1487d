"""Builders for the Deployments, Jobs and Services behind workload types."""

from __future__ import annotations

import copy
import enum
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable

from oamworkloads.kube import KubeError
from oamworkloads.metadata import WorkloadError, form_metadata, to_config_maps

log = logging.getLogger(__name__)


class Phase(str, enum.Enum):
    """The kind of change a builder sends to the cluster."""

    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"

    @classmethod
    def parse(cls, phase: Phase | str) -> Phase:
        """Map a phase name to a Phase; any unknown name means ADD."""
        if isinstance(phase, cls):
            return phase
        try:
            return cls(str(phase))
        except ValueError:
            return cls.ADD


def _dispatch(client: Any, kind: str, namespace: str, name: str, phase: Phase | str,
              body: dict, patch_body: dict | None = None,
              before_create: Callable[[], Iterable[dict]] = tuple) -> None:
    """Patch, delete or create one object according to the phase."""
    phase = Phase.parse(phase)
    if phase is Phase.MODIFY:
        client.patch(kind, namespace, name, body if patch_body is None else patch_body)
    elif phase is Phase.DELETE:
        client.delete(kind, namespace, name)
    else:
        for config_map in before_create():
            client.create("configmap", namespace, config_map)
        client.create(kind, namespace, body)


@dataclass
class _PodBuilder:
    name: str
    component: Any
    labels: dict[str, str] = field(default_factory=dict)
    annotations: dict[str, str] | None = None
    owner_ref: list[dict] | None = None
    param_vals: dict[str, Any] = field(default_factory=dict)
    restart_policy: str = "Always"

    def _pod_template(self) -> dict:
        metadata: dict[str, Any] = {"name": self.name, "labels": dict(self.labels)}
        if self.annotations is not None:
            metadata["annotations"] = dict(self.annotations)
        if self.owner_ref is not None:
            metadata["ownerReferences"] = copy.deepcopy(self.owner_ref)
        pod_spec = self.component.to_pod_spec_with_policy(
            dict(self.param_vals), self.restart_policy)
        return {"metadata": metadata, "spec": pod_spec}

    def _manifest(self, api_version: str, kind: str, spec: dict) -> dict:
        spec["template"] = self._pod_template()
        return {
            "apiVersion": api_version,
            "kind": kind,
            "metadata": form_metadata(self.name, self.labels, self.owner_ref),
            "spec": spec,
        }


@dataclass
class DeploymentBuilder(_PodBuilder):
    """Builds a Deployment from a component, exposing only workload-level settings."""

    replicas: int | None = None

    def to_deployment(self) -> dict:
        spec: dict[str, Any] = {}
        if self.replicas is not None:
            spec["replicas"] = self.replicas
        spec["selector"] = {"matchLabels": dict(self.labels)}
        return self._manifest("apps/v1", "Deployment", spec)

    def do_request(self, client: Any, namespace: str, phase: Phase | str) -> None:
        """Create, patch or delete the deployment."""
        _dispatch(client, "deployment", namespace, self.name, phase, self.to_deployment())


@dataclass
class JobBuilder(_PodBuilder):
    """Builds a Job from a component, exposing only workload-level settings."""

    restart_policy: str = "Never"
    parallelism: int | None = None

    def to_config_maps(self) -> list[dict]:
        configs = self.component.evaluate_configs(dict(self.param_vals))
        return to_config_maps(configs, self.owner_ref, dict(self.labels))

    def to_job(self) -> dict:
        spec: dict[str, Any] = {"backoffLimit": 4}
        if self.parallelism is not None:
            spec["parallelism"] = self.parallelism
        return self._manifest("batch/v1", "Job", spec)

    def get_status(self, client: Any, namespace: str) -> str:
        """Summarise the job as running, failed or succeeded.

        When the job cannot be fetched, the error text is returned.
        """
        try:
            job = client.get_status("job", namespace, self.name)
        except KubeError as exc:
            return str(exc)
        status = (job or {}).get("status")
        if status is None:
            raise WorkloadError(f"job {self.name} has no status")
        if (status.get("active") or 0) > 0:
            return "running"
        if (status.get("failed") or 0) > 0:
            return "failed"
        return "succeeded"

    def do_request(self, client: Any, namespace: str, phase: Phase | str) -> None:
        """Create, patch or delete the job; creating also creates its config maps."""
        _dispatch(client, "job", namespace, self.name, phase, self.to_job(),
                  before_create=self.to_config_maps)


@dataclass
class ServiceBuilder:
    """Builds a Service in front of a component's listening port."""

    name: str
    component: Any
    labels: dict[str, str] = field(default_factory=dict)
    selector: dict[str, str] = field(default_factory=dict)
    owner_ref: list[dict] | None = None

    def to_service(self) -> dict | None:
        """Return the Service, or None when the component listens on no port."""
        port = self.component.listening_port()
        if port is None:
            return None
        return {
            "apiVersion": "v1",
            "kind": "Service",
            "metadata": form_metadata(self.name, self.labels, self.owner_ref),
            "spec": {
                "selector": dict(self.selector),
                "ports": [port.to_service_port()],
            },
        }

    def get_status(self, client: Any, namespace: str) -> str:
        """Report 'created' or 'not existed', or the error text when the request fails."""
        try:
            service = client.get_status("service", namespace, self.name)
        except KubeError as exc:
            return str(exc)
        if (service or {}).get("status") is not None:
            return "created"
        return "not existed"

    def do_request(self, client: Any, namespace: str, phase: Phase | str) -> None:
        """Create, patch or delete the service; does nothing without a port."""
        service = self.to_service()
        if service is None:
            log.info("Not attaching service to pod with no container ports.")
            return
        log.debug("Service:\n%s", json.dumps(service, indent=2))
        _dispatch(client, "service", namespace, self.name, phase, service,
                  patch_body=service["spec"])