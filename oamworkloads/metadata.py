"""Data shared by every workload type and helpers for Kubernetes metadata."""

from __future__ import annotations

import copy
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, ClassVar

from oamworkloads.kube import KubeError

log = logging.getLogger(__name__)

WORKLOAD_TYPE_LABEL = "oam.dev/workload-type"
INSTANCE_NAME_LABEL = "oam.dev/instance-name"
APP_NAME_LABEL = "app.kubernetes.io/name"


class WorkloadError(Exception):
    """Raised when a workload cannot be validated or changed."""


def form_metadata(name: str, labels: dict[str, str],
                  owner_references: list[dict] | None) -> dict:
    """Build object metadata with a name, labels and optional owner references."""
    metadata: dict[str, Any] = {"name": name, "labels": dict(labels)}
    if owner_references is not None:
        metadata["ownerReferences"] = copy.deepcopy(owner_references)
    return metadata


def to_config_maps(configs: dict[str, dict[str, str]],
                   owner_ref: list[dict] | None,
                   labels: dict[str, str] | None) -> list[dict]:
    """Turn a mapping of config-map names to data into ConfigMap objects, ordered by name."""
    config_maps = []
    for name, values in sorted(configs.items()):
        metadata: dict[str, Any] = {"name": name}
        if owner_ref is not None:
            metadata["ownerReferences"] = copy.deepcopy(owner_ref)
        if labels is not None:
            metadata["labels"] = dict(labels)
        config_maps.append({
            "apiVersion": "v1",
            "kind": "ConfigMap",
            "metadata": metadata,
            "data": dict(values),
        })
    return config_maps


class Workload(ABC):
    """A workload type that can be added, modified, deleted and inspected."""

    meta: WorkloadMetadata

    # Checks run by validate(); each takes the metadata and raises WorkloadError.
    checks: ClassVar[tuple[Callable[[WorkloadMetadata], None], ...]] = ()

    def kube_name(self) -> str:
        return self.meta.kube_name()

    @abstractmethod
    def add(self) -> None:
        """Create the workload's resources."""

    @abstractmethod
    def modify(self) -> None:
        """Update the workload's resources."""

    @abstractmethod
    def delete(self) -> None:
        """Remove the workload's resources."""

    @abstractmethod
    def status(self) -> dict[str, str]:
        """Map each resource, as 'kind/name', to its state."""

    def validate(self) -> None:
        """Run the workload's checks; raises WorkloadError when one fails."""
        for check in type(self).checks:
            check(self.meta)


@dataclass
class WorkloadMetadata:
    """Common data about a workload.

    ``definition`` is the component definition; it must offer
    ``evaluate_configs(params)`` and, for the builders, ``containers``,
    ``to_pod_spec_with_policy(params, policy)`` and ``listening_port()``.
    ``client`` is a :class:`~oamworkloads.kube.KubeClient` or compatible object.
    """

    name: str
    component_name: str
    instance_name: str
    namespace: str
    definition: Any
    client: Any
    params: dict[str, Any] = field(default_factory=dict)
    owner_ref: list[dict] | None = None
    annotations: dict[str, str] | None = None

    def labels(self, workload_type: str) -> dict[str, str]:
        return {
            APP_NAME_LABEL: self.name,
            INSTANCE_NAME_LABEL: self.instance_name,
            WORKLOAD_TYPE_LABEL: workload_type,
        }

    def select_labels(self) -> dict[str, str]:
        return {
            APP_NAME_LABEL: self.name,
            INSTANCE_NAME_LABEL: self.instance_name,
        }

    def kube_name(self) -> str:
        return self.instance_name

    def to_config_maps(self, workload_type: str) -> list[dict]:
        configs = self.definition.evaluate_configs(dict(self.params))
        return to_config_maps(configs, self.owner_ref, self.labels(workload_type))

    def create_config_maps(self, workload_type: str) -> None:
        """Create every config map the definition declares."""
        config_maps = self.to_config_maps(workload_type)
        if config_maps:
            log.debug("start to create %d config_maps", len(config_maps))
        for config_map in config_maps:
            self.client.create("configmap", self.namespace, config_map)

    def deployment_status(self) -> str:
        """Summarise the deployment as running, unavailable or updating.

        When the deployment cannot be fetched, the error text is returned.
        """
        try:
            deploy = self.client.get_status("deployment", self.namespace, self.kube_name())
        except KubeError as exc:
            return str(exc)
        status = (deploy or {}).get("status")
        if status is None:
            raise WorkloadError(f"deployment {self.kube_name()} has no status")
        replicas = status.get("replicas") or 0
        available = status.get("availableReplicas") or 0
        unavailable = status.get("unavailableReplicas") or 0
        if available == replicas:
            return "running"
        if unavailable > 0:
            return "unavailable"
        return "updating"