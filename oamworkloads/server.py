"""Server workload types: long-running processes with a Service in front of them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from oamworkloads.builders import DeploymentBuilder, Phase, ServiceBuilder
from oamworkloads.metadata import Workload, WorkloadError, WorkloadMetadata


@dataclass
class _Server(Workload):
    """A Deployment with a Service in front of it."""

    meta: WorkloadMetadata

    workload_type: ClassVar[str] = "Service"
    config_map_type: ClassVar[str] = "Service"
    replicas: ClassVar[int | None] = None

    def _name(self) -> str:
        return self.meta.instance_name

    def _labels(self) -> dict[str, str]:
        return self.meta.labels(self.workload_type)

    def _send(self, deployment: DeploymentBuilder, service: ServiceBuilder,
              phase: Phase) -> None:
        deployment.do_request(self.meta.client, self.meta.namespace, phase)
        service.do_request(self.meta.client, self.meta.namespace, phase)

    def _send_configured(self, phase: Phase) -> None:
        meta = self.meta
        name = self._name()
        deployment = DeploymentBuilder(
            name, meta.definition, labels=self._labels(), annotations=meta.annotations,
            owner_ref=meta.owner_ref, param_vals=dict(meta.params), replicas=self.replicas)
        service = ServiceBuilder(
            name, meta.definition, labels=self._labels(), selector=meta.select_labels(),
            owner_ref=meta.owner_ref)
        self._send(deployment, service, phase)

    def _add(self) -> None:
        self.meta.create_config_maps(self.config_map_type)
        self._send_configured(Phase.ADD)

    def _delete(self) -> None:
        name, definition = self._name(), self.meta.definition
        self._send(DeploymentBuilder(name, definition), ServiceBuilder(name, definition),
                   Phase.DELETE)

    def _status(self) -> dict[str, str]:
        meta = self.meta
        name = self._name()
        resources = {f"deployment/{name}": meta.deployment_status()}
        resources[f"service/{name}"] = ServiceBuilder(name, meta.definition).get_status(
            meta.client, meta.namespace)
        return resources


class ReplicatedServer(_Server):
    """A server component that can be scaled up or down."""

    def kube_name(self) -> str:
        return self._name()

    def labels(self) -> dict[str, str]:
        return self._labels()

    def add(self) -> None:
        self._add()

    def modify(self) -> None:
        self._send_configured(Phase.MODIFY)

    def delete(self) -> None:
        self._delete()

    def status(self) -> dict[str, str]:
        return self._status()


class SingletonServer(_Server):
    """A single-instance server: one replica with a Service in front of it."""

    workload_type = "SingletonServer"
    config_map_type = "singleton-service"
    replicas = 1

    def kube_name(self) -> str:
        return self._name()

    def labels(self) -> dict[str, str]:
        return self._labels()

    def add(self) -> None:
        self._add()

    def modify(self) -> None:
        """Not supported: delete the server and create a new one instead."""
        raise WorkloadError(f"we don't support SingletonServer {self.kube_name()} modify")

    def delete(self) -> None:
        self._delete()

    def status(self) -> dict[str, str]:
        return self._status()