"""Cluster API implemented on top of kubectl."""

from typing import Any, Dict, List

from ..errors import ClusterAPIError
from ..model.cluster import SYSTEM_NAMESPACE, ClusterHealth, ClusterNode, PodInfo
from ..utils.logger import get_logger
from .api import ClusterAPI
from .client import K8sClient

logger = get_logger(__name__)

MASTER_ROLE_LABELS = (
    "node-role.kubernetes.io/master",
    "node-role.kubernetes.io/control-plane",
)
MIRROR_POD_ANNOTATION = "kubernetes.io/config.mirror"


def parse_node(item: Dict[str, Any]) -> ClusterNode:
    """Build a ClusterNode from a Node object."""
    metadata = item.get("metadata", {})
    spec = item.get("spec", {})
    labels = metadata.get("labels") or {}

    role = labels.get("kubernetes.io/role", "node")
    if any(label in labels for label in MASTER_ROLE_LABELS):
        role = "master"

    conditions = item.get("status", {}).get("conditions") or []
    ready = any(c.get("type") == "Ready" and c.get("status") == "True" for c in conditions)

    return ClusterNode(
        name=metadata.get("name", ""),
        provider_id=spec.get("providerID", ""),
        role=role,
        ready=ready,
        unschedulable=bool(spec.get("unschedulable", False)),
    )


def parse_pod(item: Dict[str, Any]) -> PodInfo:
    """Build a PodInfo from a Pod object."""
    metadata = item.get("metadata", {})
    owners = metadata.get("ownerReferences") or []
    annotations = metadata.get("annotations") or {}

    return PodInfo(
        name=metadata.get("name", ""),
        namespace=metadata.get("namespace", "default"),
        node_name=item.get("spec", {}).get("nodeName"),
        phase=item.get("status", {}).get("phase", "Unknown"),
        owner_kinds=[owner.get("kind", "") for owner in owners],
        mirror=MIRROR_POD_ANNOTATION in annotations,
    )


class KubectlClusterAPI(ClusterAPI):
    """ClusterAPI backed by kubectl calls."""

    def __init__(self, client: K8sClient):
        self.client = client

    def _items(self, data, what: str) -> List[Dict[str, Any]]:
        if data is None:
            raise ClusterAPIError(f"failed to list {what}")
        return data.get("items", [])

    def list_nodes(self) -> List[ClusterNode]:
        items = self._items(self.client.get_json("nodes"), "nodes")
        return [parse_node(item) for item in items]

    def list_pods(self, node_name: str) -> List[PodInfo]:
        data = self.client.get_json(
            "pods", all_namespaces=True, field_selector=f"spec.nodeName={node_name}"
        )
        return [parse_pod(item) for item in self._items(data, f"pods on {node_name}")]

    def cordon(self, node: ClusterNode) -> None:
        success, output = self.client.execute(["cordon", node.name])
        if not success:
            raise ClusterAPIError(f"failed to cordon {node.name}: {output.strip()}")
        logger.info(f"Cordoned node {node.name}")

    def evict_pod(self, pod: PodInfo) -> bool:
        body = {
            "apiVersion": "policy/v1",
            "kind": "Eviction",
            "metadata": {"name": pod.name, "namespace": pod.namespace},
        }
        path = f"/api/v1/namespaces/{pod.namespace}/pods/{pod.name}/eviction"
        success, output = self.client.create_raw(path, body)
        if success:
            logger.debug(f"Evicted pod {pod.ref}")
            return True
        if "NotFound" in output or "not found" in output:
            return True
        logger.debug(f"Eviction of {pod.ref} refused: {output.strip()}")
        return False

    def get_health(self) -> ClusterHealth:
        nodes = self.list_nodes()
        data = self.client.get_json("pods", namespace=SYSTEM_NAMESPACE)
        pods = [parse_pod(item) for item in self._items(data, f"{SYSTEM_NAMESPACE} pods")]
        return ClusterHealth(nodes=nodes, system_pods=pods)
