"""Worker workload types: daemon processes that listen on no port."""

from __future__ import annotations

from dataclasses import dataclass

from oamworkloads.builders import DeploymentBuilder, Phase
from oamworkloads.metadata import Workload, WorkloadError, WorkloadMetadata


def validate_worker(meta: WorkloadMetadata) -> None:
    """Raise WorkloadError if any container of the worker declares a port."""
    offending = next((c for c in meta.definition.containers if c.ports), None)
    if offending is not None:
        raise WorkloadError(f"Worker container named {offending.name} has a port declared")


def _deployment_builder(workload: Workload, labels: dict[str, str]) -> DeploymentBuilder:
    meta = workload.meta
    return DeploymentBuilder(
        name=workload.kube_name(),
        component=meta.definition,
        labels=labels,
        annotations=meta.annotations,
        owner_ref=meta.owner_ref,
        param_vals=dict(meta.params),
    )


def _delete_deployment(workload: Workload) -> None:
    meta = workload.meta
    DeploymentBuilder(workload.kube_name(), meta.definition).do_request(
        meta.client, meta.namespace, Phase.DELETE)


def _deployment_status(workload: Workload) -> dict[str, str]:
    return {f"deployment/{workload.kube_name()}": workload.meta.deployment_status()}


@dataclass
class ReplicatedWorker(Workload):
    """A scalable daemon process with no network endpoint."""

    meta: WorkloadMetadata
    replica_count: int | None = None

    def kube_name(self) -> str:
        return self.meta.kube_name()

    def labels(self) -> dict[str, str]:
        return self.meta.labels("Worker")

    def add(self) -> None:
        self.meta.create_config_maps("Worker")
        _deployment_builder(self, self.labels()).do_request(
            self.meta.client, self.meta.namespace, Phase.ADD)

    def modify(self) -> None:
        _deployment_builder(self, self.labels()).do_request(
            self.meta.client, self.meta.namespace, Phase.MODIFY)

    def delete(self) -> None:
        _delete_deployment(self)

    def status(self) -> dict[str, str]:
        return _deployment_status(self)

    def validate(self) -> None:
        validate_worker(self.meta)


@dataclass
class SingletonWorker(Workload):
    """A single daemon process with no network endpoint."""

    meta: WorkloadMetadata

    def kube_name(self) -> str:
        return self.meta.instance_name

    def labels(self) -> dict[str, str]:
        return self.meta.labels("SingletonWorker")

    def add(self) -> None:
        self.meta.create_config_maps("SingletonWorker")
        _deployment_builder(self, self.labels()).do_request(
            self.meta.client, self.meta.namespace, Phase.ADD)

    def modify(self) -> None:
        _deployment_builder(self, self.labels()).do_request(
            self.meta.client, self.meta.namespace, Phase.MODIFY)

    def delete(self) -> None:
        _delete_deployment(self)

    def status(self) -> dict[str, str]:
        return _deployment_status(self)

    def validate(self) -> None:
        validate_worker(self.meta)