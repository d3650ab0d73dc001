"""Cloud topology snapshot: which instances back which group, and which are stale."""

from typing import Dict, List, Optional, Sequence

from ..cloud.base import CloudProvider
from ..errors import NotFoundError
from ..model.cloud import CloudGroup, CloudInstanceGroup
from ..model.cluster import ClusterNode
from ..model.instancegroup import InstanceGroup
from ..utils.logger import get_logger
from .access import ClusterAccess

logger = get_logger(__name__)


def select_instance_groups(
    instance_groups: Sequence[InstanceGroup], names: Optional[Sequence[str]] = None
) -> List[InstanceGroup]:
    """Return the requested instance groups in request order, or all of them."""
    if not names:
        return list(instance_groups)

    by_name = {group.name: group for group in instance_groups}
    selected = []
    for name in names:
        if name not in by_name:
            raise NotFoundError(name)
        selected.append(by_name[name])
    return selected


def classify(
    instance_group: InstanceGroup,
    cloud_group: CloudGroup,
    nodes_by_instance: Dict[str, ClusterNode],
) -> CloudInstanceGroup:
    """Split a cloud group's instances into ready and stale ones."""
    group = CloudInstanceGroup(
        instance_group=instance_group,
        cloud_group_name=cloud_group.name,
        min_size=cloud_group.min_size,
        max_size=cloud_group.max_size,
    )
    for instance in cloud_group.instances:
        linked = instance.model_copy(update={"node": nodes_by_instance.get(instance.id)})
        if instance.fingerprint != cloud_group.fingerprint:
            group.need_update.append(linked)
        else:
            group.ready.append(linked)
    return group


def build_snapshot(
    cluster_name: str,
    instance_groups: Sequence[InstanceGroup],
    cloud: CloudProvider,
    access: ClusterAccess,
    names: Optional[Sequence[str]] = None,
) -> List[CloudInstanceGroup]:
    """Pair each targeted instance group with its cloud instances.

    Read-only. Fails with NotFoundError before any query when a requested
    name is unknown, and with ClusterUnreachableError when nodes cannot be
    listed.
    """
    selected = select_instance_groups(instance_groups, names)
    # An explicit filter means other cloud groups are expected to be skipped
    warn_unmatched = not names

    nodes = access.list_nodes()
    nodes_by_instance = {node.instance_id: node for node in nodes if node.instance_id}

    wanted = {group.cloud_name(cluster_name): group for group in selected}
    cloud_groups = {cg.name: cg for cg in cloud.list_instance_groups(list(wanted))}

    for name in cloud_groups:
        if name not in wanted and warn_unmatched:
            logger.warning(f"Found cloud group with no corresponding instance group: {name}")

    groups = []
    for cloud_name, instance_group in wanted.items():
        cloud_group = cloud_groups.get(cloud_name)
        if cloud_group is None:
            logger.warning(
                f"No cloud group {cloud_name} found for instance group {instance_group.name}"
            )
            continue
        groups.append(classify(instance_group, cloud_group, nodes_by_instance))

    logger.info(
        f"Snapshot: {len(groups)} groups, "
        f"{sum(len(g.need_update) for g in groups)} instances need update"
    )
    return groups
