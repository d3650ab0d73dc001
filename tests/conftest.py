"""Test configuration and fixtures."""

from typing import Dict, Iterable, List, Optional, Sequence, Set

import pytest

from kuberoll.cloud.base import CloudProvider
from kuberoll.errors import ClusterAPIError, TerminationError
from kuberoll.k8s.api import ClusterAPI
from kuberoll.model import (
    CloudGroup,
    CloudInstance,
    ClusterHealth,
    ClusterNode,
    InstanceGroup,
    InstanceGroupRole,
    PodInfo,
)

CLUSTER = "k8s.example.com"
OLD = "lc-v1"
NEW = "lc-v2"


def cloud_group(
    name: str,
    stale: Iterable[str] = (),
    fresh: Iterable[str] = (),
    min_size: Optional[int] = None,
    max_size: Optional[int] = None,
) -> CloudGroup:
    """Cloud group whose current fingerprint is NEW; stale instances run OLD."""
    instances = [CloudInstance(id=i, fingerprint=OLD) for i in stale]
    instances += [CloudInstance(id=i, fingerprint=NEW) for i in fresh]
    size = len(instances)
    return CloudGroup(
        name=f"{name}.{CLUSTER}",
        fingerprint=NEW,
        min_size=size if min_size is None else min_size,
        max_size=size if max_size is None else max_size,
        instances=instances,
    )


def node_for(instance_id: str, role: str = "node", ready: bool = True) -> ClusterNode:
    return ClusterNode(
        name=f"ip-{instance_id}",
        provider_id=f"aws:///us-east-1a/{instance_id}",
        role=role,
        ready=ready,
    )


def pod(name: str, node: str, namespace: str = "default", **kwargs) -> PodInfo:
    return PodInfo(name=name, namespace=namespace, node_name=node, phase="Running", **kwargs)


class FakeClock:
    """Monotonic clock advanced only by the sleeps it records."""

    def __init__(self, log: List[tuple]):
        self.now = 0.0
        self.log = log

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.log.append(("sleep", seconds))
        self.now += seconds


class FakeCloud(CloudProvider):
    def __init__(self, groups: Sequence[CloudGroup], log: List[tuple], fail_on: Set[str] = None):
        self.groups = list(groups)
        self.log = log
        self.fail_on = set(fail_on or ())

    def list_instance_groups(self, names):
        self.log.append(("list_instance_groups", tuple(names)))
        return [group.model_copy(deep=True) for group in self.groups]

    def terminate_instance(self, instance):
        self.log.append(("terminate", instance.id))
        if instance.id in self.fail_on:
            raise TerminationError(instance.id, "AccessDenied")

    @property
    def terminated(self) -> List[str]:
        return [entry[1] for entry in self.log if entry[0] == "terminate"]


class FakeClusterAPI(ClusterAPI):
    """In-memory cluster: pods vanish when evicted unless refusals are queued."""

    def __init__(self, log: List[tuple], nodes: Sequence[ClusterNode] = ()):
        self.log = log
        self.nodes = list(nodes)
        self.pods: Dict[str, List[PodInfo]] = {}
        self.refusals: Dict[str, int] = {}
        self.health: List[object] = []
        self.fail_list_nodes = False
        self.fail_cordon = False
        self.fail_list_pods = False

    def list_nodes(self):
        self.log.append(("list_nodes",))
        if self.fail_list_nodes:
            raise ClusterAPIError("connection refused")
        return list(self.nodes)

    def list_pods(self, node_name):
        if self.fail_list_pods:
            raise ClusterAPIError("the server was unable to return a response")
        return list(self.pods.get(node_name, []))

    def cordon(self, node):
        self.log.append(("cordon", node.name))
        if self.fail_cordon:
            raise ClusterAPIError(f"failed to cordon {node.name}")

    def evict_pod(self, pod):
        self.log.append(("evict", pod.ref))
        if self.refusals.get(pod.ref, 0) > 0:
            self.refusals[pod.ref] -= 1
            return False
        self.pods[pod.node_name] = [p for p in self.pods[pod.node_name] if p.ref != pod.ref]
        return True

    def get_health(self):
        self.log.append(("health",))
        outcome = self.health.pop(0) if len(self.health) > 1 else (self.health or [None])[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome if outcome is not None else ClusterHealth()

    def calls(self, kind: str) -> List[tuple]:
        return [entry for entry in self.log if entry[0] == kind]


@pytest.fixture
def call_log():
    return []


@pytest.fixture
def clock(call_log):
    return FakeClock(call_log)


@pytest.fixture
def instance_groups():
    return [
        InstanceGroup(name="bastions", role=InstanceGroupRole.BASTION, min_size=1, max_size=1),
        InstanceGroup(name="masters", role=InstanceGroupRole.MASTER, min_size=3, max_size=3),
        InstanceGroup(name="nodes", role=InstanceGroupRole.NODE, min_size=3, max_size=3),
    ]


@pytest.fixture
def healthy():
    """Health report for a cluster with three ready masters and three ready nodes."""
    nodes = [node_for(f"i-m{n}", role="master") for n in range(3)]
    nodes += [node_for(f"i-n{n}") for n in range(3)]
    return ClusterHealth(
        nodes=nodes,
        system_pods=[pod("kube-dns", "ip-i-m0", namespace="kube-system")],
    )
