# oamworkloads

Turn OAM workload types into Kubernetes resources and manage them through the
Kubernetes REST API.

Each workload type maps onto plain Kubernetes objects:

| Workload type      | Module                  | Kubernetes objects                     |
|--------------------|-------------------------|----------------------------------------|
| `ReplicatedServer` | `oamworkloads.server`   | Deployment + Service                   |
| `SingletonServer`  | `oamworkloads.server`   | Deployment (1 replica) + Service       |
| `ReplicatedWorker` | `oamworkloads.worker`   | Deployment                             |
| `SingletonWorker`  | `oamworkloads.worker`   | Deployment                             |
| `ReplicatedTask`   | `oamworkloads.task`     | Job (parallelism = `replica_count`, default 1) |
| `SingletonTask`    | `oamworkloads.task`     | Job                                    |

A Service is only created when the component reports a listening port. Workers
must not declare any container ports; their `validate()` raises
`oamworkloads.metadata.WorkloadError` naming the first container that does.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Usage

`oamworkloads.kube.KubeClient` sends requests to the API server through a
`requests.Session` (a new one is made if none is given). `WorkloadMetadata`
carries what every workload needs: release name, component and instance names,
namespace, the component definition, the client, parameter values, owner
references and annotations.

```python
import requests

from oamworkloads.kube import KubeClient
from oamworkloads.metadata import WorkloadMetadata
from oamworkloads.server import ReplicatedServer

session = requests.Session()
session.headers["Authorization"] = "Bearer token"
client = KubeClient("https://localhost:6443", session)

meta = WorkloadMetadata(
    name="my-app",
    component_name="frontend",
    instance_name="frontend-v1",
    namespace="default",
    definition=component,   # your component definition object, see below
    client=client,
)

server = ReplicatedServer(meta=meta)
server.validate()
server.add()             # creates config maps, the Deployment and the Service
print(server.status())   # e.g. {"deployment/frontend-v1": "running", "service/frontend-v1": "created"}
server.delete()
```

Every workload type provides `kube_name()` (the instance name), `labels()`,
`add()`, `modify()`, `delete()`, `status()` and `validate()`. Only the worker
types perform checks in `validate()`. `SingletonServer.modify()` is not
supported and raises `WorkloadError`; delete and re-create the server instead.

`status()` maps each resource, written as `kind/name`, to a short state:

- deployments: `running`, `unavailable` or `updating`
- jobs: `running`, `failed` or `succeeded`
- services: `created` or `not existed`

When the API request for a status fails, the error text is reported as the
state instead of raising.

Resources are labelled with `app.kubernetes.io/name`, `oam.dev/workload-type`
and `oam.dev/instance-name`; Services select pods by the name and
instance-name labels only.

### Kubernetes client

`KubeClient` supports the resource kinds `deployment`, `job`, `service` and
`configmap` (any other kind raises `ValueError`) with `create`, `patch` (a JSON
merge patch), `delete` and `get_status`. A failed request or an unreachable
server raises `oamworkloads.kube.KubeError`, whose `status_code` holds the HTTP
status when there was one.

### Builders

The lower-level builders in `oamworkloads.builders` produce the resource bodies
as plain dictionaries, which is handy for inspection or dry runs:

- `DeploymentBuilder.to_deployment()`: restart policy `Always`, optional replicas
- `JobBuilder.to_job()`: restart policy `Never` by default, backoff limit 4,
  optional parallelism
- `ServiceBuilder.to_service()`: `None` when the component listens on no port

Each builder's `do_request(client, namespace, phase)` takes a `Phase`
(`ADD`, `MODIFY` or `DELETE`, or their names as strings; an unknown name means
`ADD`) and sends the matching request. Adding a job also creates its config
maps first. The helpers `form_metadata()` and `to_config_maps()` in
`oamworkloads.metadata` build object metadata and ConfigMap objects (ordered by
name).

## What this package does not do

- It has no model of components. The `definition` you pass must provide
  `evaluate_configs(params)` (a mapping of config-map name to data),
  `containers` (objects with `name` and `ports`),
  `to_pod_spec_with_policy(params, restart_policy)` (a pod spec dictionary) and
  `listening_port()` (`None`, or an object with `to_service_port()`).
- It does not load kubeconfig files or handle authentication; configure the
  `requests.Session` yourself.
- It runs no controller or watch loop and has no command-line program; it is a
  library to call from your own code.