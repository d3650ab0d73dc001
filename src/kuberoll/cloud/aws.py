"""AWS Auto Scaling provider."""

from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import CloudAPIError, ConfigError, TerminationError
from ..model.cloud import CloudGroup, CloudInstance
from ..utils.logger import get_logger
from .base import CloudProvider

logger = get_logger(__name__)

CLUSTER_TAG = "KubernetesCluster"


def launch_fingerprint(source: Dict[str, Any]) -> str:
    """Launch configuration name or ``template-id:version`` of a group or instance."""
    if source.get("LaunchConfigurationName"):
        return source["LaunchConfigurationName"]

    template = source.get("LaunchTemplate")
    if not template:
        mixed = source.get("MixedInstancesPolicy") or {}
        template = mixed.get("LaunchTemplate", {}).get("LaunchTemplateSpecification")
    if template:
        template_id = template.get("LaunchTemplateId") or template.get("LaunchTemplateName", "")
        return f"{template_id}:{template.get('Version', '$Default')}"
    return ""


class AWSCloudProvider(CloudProvider):
    """Cloud groups backed by EC2 Auto Scaling groups."""

    def __init__(self, cluster_name: str, region: Optional[str] = None, client=None):
        self.cluster_name = cluster_name
        if client is None:
            try:
                client = boto3.client("autoscaling", region_name=region)
            except BotoCoreError as e:
                raise ConfigError(
                    f"cannot create AWS client ({e}); specify --region or region: in the cluster file"
                ) from e
        self.client = client

    def list_instance_groups(self, names: Sequence[str]) -> List[CloudGroup]:
        """Describe every ASG tagged for the cluster, plus requested ASGs lacking the tag."""
        groups = self._describe(Filters=[{"Name": f"tag:{CLUSTER_TAG}", "Values": [self.cluster_name]}])

        found = {group["AutoScalingGroupName"] for group in groups}
        missing = [name for name in names if name not in found]
        if missing:
            logger.debug(f"Looking up untagged auto scaling groups: {', '.join(missing)}")
            groups.extend(self._describe(AutoScalingGroupNames=missing))

        return [self._to_cloud_group(group) for group in groups]

    def terminate_instance(self, instance: CloudInstance) -> None:
        logger.info(f"Terminating instance {instance.id}")
        try:
            self.client.terminate_instance_in_auto_scaling_group(
                InstanceId=instance.id,
                ShouldDecrementDesiredCapacity=False,
            )
        except (ClientError, BotoCoreError) as e:
            raise TerminationError(instance.id, str(e)) from e

    def _describe(self, **kwargs) -> List[Dict[str, Any]]:
        paginator = self.client.get_paginator("describe_auto_scaling_groups")
        groups: List[Dict[str, Any]] = []
        try:
            for page in paginator.paginate(**kwargs):
                groups.extend(page.get("AutoScalingGroups", []))
        except (ClientError, BotoCoreError) as e:
            raise CloudAPIError(f"error describing auto scaling groups: {e}") from e
        return groups

    def _to_cloud_group(self, group: Dict[str, Any]) -> CloudGroup:
        instances = []
        for instance in group.get("Instances", []):
            if instance.get("LifecycleState", "").startswith("Terminat"):
                continue
            instances.append(
                CloudInstance(id=instance["InstanceId"], fingerprint=launch_fingerprint(instance))
            )

        return CloudGroup(
            name=group["AutoScalingGroupName"],
            fingerprint=launch_fingerprint(group),
            min_size=group.get("MinSize", 0),
            max_size=group.get("MaxSize", 0),
            instances=instances,
        )
