"""Task workload types: non-daemon processes run as Kubernetes Jobs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from oamworkloads.builders import JobBuilder, Phase
from oamworkloads.metadata import Workload, WorkloadMetadata


@dataclass
class _Task(Workload):
    """A non-daemon process run as a Job."""

    meta: WorkloadMetadata

    workload_type: ClassVar[str] = "Task"

    def _name(self) -> str:
        return self.meta.instance_name

    def _labels(self) -> dict[str, str]:
        return self.meta.labels(self.workload_type)

    def _parallelism(self) -> int | None:
        return None

    def _send_configured(self, phase: Phase) -> None:
        meta = self.meta
        JobBuilder(
            self._name(), meta.definition, labels=self._labels(),
            annotations=meta.annotations, owner_ref=meta.owner_ref,
            param_vals=dict(meta.params), restart_policy="Never",
            parallelism=self._parallelism(),
        ).do_request(meta.client, meta.namespace, phase)

    def _delete(self) -> None:
        JobBuilder(self._name(), self.meta.definition).do_request(
            self.meta.client, self.meta.namespace, Phase.DELETE)

    def _status(self) -> dict[str, str]:
        name = self._name()
        state = JobBuilder(name, self.meta.definition).get_status(
            self.meta.client, self.meta.namespace)
        return {f"job/{name}": state}


@dataclass
class ReplicatedTask(_Task):
    """A non-daemon process that can be parallelized."""

    replica_count: int | None = None

    def _parallelism(self) -> int:
        return self.replica_count if self.replica_count is not None else 1

    def kube_name(self) -> str:
        return self._name()

    def labels(self) -> dict[str, str]:
        return self._labels()

    def add(self) -> None:
        self._send_configured(Phase.ADD)

    def modify(self) -> None:
        self._send_configured(Phase.MODIFY)

    def delete(self) -> None:
        self._delete()

    def status(self) -> dict[str, str]:
        return self._status()


class SingletonTask(_Task):
    """A single non-daemon process."""

    workload_type = "SingletonTask"

    def kube_name(self) -> str:
        return self._name()

    def labels(self) -> dict[str, str]:
        return self._labels()

    def add(self) -> None:
        self._send_configured(Phase.ADD)

    def modify(self) -> None:
        self._send_configured(Phase.MODIFY)

    def delete(self) -> None:
        self._delete()

    def status(self) -> dict[str, str]:
        return self._status()