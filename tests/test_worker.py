from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from oamworkloads.kube import KubeError
from oamworkloads.metadata import WorkloadError, WorkloadMetadata
from oamworkloads.worker import ReplicatedWorker, SingletonWorker, validate_worker


@dataclass
class FakePort:
    name: str
    container_port: int

    def to_service_port(self):
        return {"name": self.name, "port": self.container_port}


@dataclass
class FakeContainer:
    name: str
    ports: list = field(default_factory=list)


@dataclass
class FakeComponent:
    containers: list = field(default_factory=list)
    configs: dict = field(default_factory=dict)

    def evaluate_configs(self, params):
        return {name: dict(data) for name, data in self.configs.items()}

    def to_pod_spec_with_policy(self, params, policy):
        return {"restartPolicy": policy,
                "containers": [{"name": c.name} for c in self.containers]}

    def listening_port(self):
        for container in self.containers:
            if container.ports:
                return container.ports[0]
        return None


class RecordingClient:
    def __init__(self, statuses=None):
        self.calls = []
        self.statuses = statuses or {}

    def create(self, kind, namespace, body):
        self.calls.append(("create", kind, namespace, body))
        return body

    def patch(self, kind, namespace, name, body):
        self.calls.append(("patch", kind, namespace, name, body))
        return body

    def delete(self, kind, namespace, name):
        self.calls.append(("delete", kind, namespace, name))

    def get_status(self, kind, namespace, name):
        value = self.statuses.get(kind)
        if isinstance(value, Exception):
            raise value
        return value


def make_meta(component=None, client=None, annotations=None, component_name="workerbee"):
    return WorkloadMetadata(
        name="mytask",
        component_name=component_name,
        instance_name="workerinst",
        namespace="tests",
        definition=component if component is not None else FakeComponent(),
        client=client if client is not None else RecordingClient(),
        annotations=annotations,
    )


def good_component():
    return FakeComponent(containers=[FakeContainer("good-container")])


def bad_component():
    component = good_component()
    component.containers.append(FakeContainer(
        "bad-container", [FakePort("http", 80), FakePort("https", 443)]))
    return component


def test_worker_labels():
    replicated = ReplicatedWorker(meta=make_meta(), replica_count=1)
    assert replicated.labels()["oam.dev/workload-type"] == "Worker"
    singleton = SingletonWorker(meta=make_meta())
    assert singleton.labels()["oam.dev/workload-type"] == "SingletonWorker"


def test_singleton_worker_validate():
    bad = SingletonWorker(meta=make_meta(bad_component(), component_name="workermcworkyface"))
    with pytest.raises(WorkloadError, match="Worker container named bad-container has a port declared"):
        bad.validate()
    good = SingletonWorker(meta=make_meta(good_component(), component_name="workermcworkyface"))
    assert good.validate() is None


def test_singleton_worker_kube_name():
    wrkr = SingletonWorker(meta=make_meta(component_name="workermcworkyface"))
    assert wrkr.kube_name() == "workerinst"


def test_replicated_worker_validate():
    bad = ReplicatedWorker(meta=make_meta(bad_component()), replica_count=132)
    with pytest.raises(WorkloadError, match="bad-container"):
        bad.validate()
    good = ReplicatedWorker(meta=make_meta(good_component()), replica_count=132)
    assert good.validate() is None


def test_replicated_worker_kube_name():
    wrkr = ReplicatedWorker(meta=make_meta(annotations={"annotation1": "value"}),
                            replica_count=1)
    assert wrkr.kube_name() == "workerinst"


def test_validate_worker_directly():
    with pytest.raises(WorkloadError):
        validate_worker(make_meta(bad_component()))
    assert validate_worker(make_meta(good_component())) is None


def test_replicated_worker_add_creates_config_maps_and_deployment_only():
    client = RecordingClient()
    component = FakeComponent(containers=[FakeContainer("w")],
                              configs={"container21": {"db-data": "test one"}})
    wrkr = ReplicatedWorker(meta=make_meta(component, client, {"annotation1": "value"}))
    wrkr.add()
    assert [(c[0], c[1]) for c in client.calls] == [("create", "configmap"),
                                                    ("create", "deployment")]
    assert client.calls[0][3]["metadata"]["labels"]["oam.dev/workload-type"] == "Worker"
    deployment = client.calls[1][3]
    assert deployment["spec"]["template"]["metadata"]["annotations"] == {"annotation1": "value"}
    assert deployment["spec"]["template"]["spec"]["restartPolicy"] == "Always"


def test_singleton_worker_add_labels_config_maps():
    client = RecordingClient()
    component = FakeComponent(configs={"cfg": {"k": "v"}})
    SingletonWorker(meta=make_meta(component, client)).add()
    assert client.calls[0][3]["metadata"]["labels"]["oam.dev/workload-type"] == "SingletonWorker"
    assert client.calls[1][1] == "deployment"


@pytest.mark.parametrize("make_worker", [
    lambda meta: ReplicatedWorker(meta=meta, replica_count=2),
    lambda meta: SingletonWorker(meta=meta),
])
def test_worker_modify_and_delete(make_worker):
    client = RecordingClient()
    wrkr = make_worker(make_meta(good_component(), client))
    wrkr.modify()
    wrkr.delete()
    assert client.calls[0][:4] == ("patch", "deployment", "tests", "workerinst")
    assert client.calls[1] == ("delete", "deployment", "tests", "workerinst")
    assert len(client.calls) == 2


def test_worker_status():
    client = RecordingClient({"deployment": {"status": {"replicas": 3, "availableReplicas": 1}}})
    wrkr = ReplicatedWorker(meta=make_meta(client=client), replica_count=3)
    assert wrkr.status() == {"deployment/workerinst": "updating"}


def test_worker_status_error_text():
    client = RecordingClient({"deployment": KubeError("HTTP 500: boom", 500)})
    wrkr = SingletonWorker(meta=make_meta(client=client))
    assert wrkr.status() == {"deployment/workerinst": "HTTP 500: boom"}