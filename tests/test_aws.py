"""Test the AWS Auto Scaling provider."""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, NoRegionError

from kuberoll.cloud.aws import AWSCloudProvider, launch_fingerprint
from kuberoll.errors import CloudAPIError, ConfigError, TerminationError
from kuberoll.model import CloudInstance

CLUSTER = "k8s.example.com"


def _asg(name, launch_config="nodes-v2", instances=()):
    return {
        "AutoScalingGroupName": name,
        "LaunchConfigurationName": launch_config,
        "MinSize": 2,
        "MaxSize": 4,
        "Instances": list(instances),
    }


def _instance(instance_id, launch_config="nodes-v2", state="InService"):
    return {
        "InstanceId": instance_id,
        "LaunchConfigurationName": launch_config,
        "LifecycleState": state,
    }


@pytest.fixture
def asg_client():
    client = MagicMock()
    client.get_paginator.return_value.paginate.return_value = []
    return client


def _pages(asg_client, *responses):
    asg_client.get_paginator.return_value.paginate.side_effect = [
        [{"AutoScalingGroups": list(groups)}] for groups in responses
    ]


class TestLaunchFingerprint:
    def test_launch_configuration(self):
        assert launch_fingerprint({"LaunchConfigurationName": "nodes-v3"}) == "nodes-v3"

    def test_launch_template(self):
        source = {"LaunchTemplate": {"LaunchTemplateId": "lt-0abc", "Version": "7"}}
        assert launch_fingerprint(source) == "lt-0abc:7"

    def test_mixed_instances_policy(self):
        source = {
            "MixedInstancesPolicy": {
                "LaunchTemplate": {
                    "LaunchTemplateSpecification": {"LaunchTemplateName": "nodes", "Version": "$Latest"}
                }
            }
        }
        assert launch_fingerprint(source) == "nodes:$Latest"

    def test_nothing_known(self):
        assert launch_fingerprint({}) == ""


class TestAWSCloudProvider:
    def test_lists_cluster_tagged_groups(self, asg_client):
        _pages(
            asg_client,
            [
                _asg(
                    f"nodes.{CLUSTER}",
                    instances=[
                        _instance("i-1", "nodes-v1"),
                        _instance("i-2"),
                        _instance("i-3", state="Terminating"),
                    ],
                )
            ],
        )
        provider = AWSCloudProvider(CLUSTER, client=asg_client)

        groups = provider.list_instance_groups([f"nodes.{CLUSTER}"])

        asg_client.get_paginator.return_value.paginate.assert_called_once_with(
            Filters=[{"Name": "tag:KubernetesCluster", "Values": [CLUSTER]}]
        )
        assert len(groups) == 1
        group = groups[0]
        assert (group.name, group.fingerprint, group.min_size, group.max_size) == (
            f"nodes.{CLUSTER}",
            "nodes-v2",
            2,
            4,
        )
        assert [(i.id, i.fingerprint) for i in group.instances] == [
            ("i-1", "nodes-v1"),
            ("i-2", "nodes-v2"),
        ]

    def test_looks_up_untagged_groups_by_name(self, asg_client):
        _pages(asg_client, [], [_asg("legacy-nodes")])
        provider = AWSCloudProvider(CLUSTER, client=asg_client)

        groups = provider.list_instance_groups(["legacy-nodes"])

        assert [g.name for g in groups] == ["legacy-nodes"]
        last_call = asg_client.get_paginator.return_value.paginate.call_args
        assert last_call.kwargs == {"AutoScalingGroupNames": ["legacy-nodes"]}

    def test_terminate_keeps_desired_capacity(self, asg_client):
        provider = AWSCloudProvider(CLUSTER, client=asg_client)

        provider.terminate_instance(CloudInstance(id="i-1"))

        asg_client.terminate_instance_in_auto_scaling_group.assert_called_once_with(
            InstanceId="i-1", ShouldDecrementDesiredCapacity=False
        )

    def test_terminate_rejected(self, asg_client):
        asg_client.terminate_instance_in_auto_scaling_group.side_effect = ClientError(
            {"Error": {"Code": "ValidationError", "Message": "Instance Id not found"}},
            "TerminateInstanceInAutoScalingGroup",
        )
        provider = AWSCloudProvider(CLUSTER, client=asg_client)

        with pytest.raises(TerminationError, match="i-1"):
            provider.terminate_instance(CloudInstance(id="i-1"))

    def test_describe_denied(self, asg_client):
        asg_client.get_paginator.return_value.paginate.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "not authorized"}},
            "DescribeAutoScalingGroups",
        )
        provider = AWSCloudProvider(CLUSTER, client=asg_client)

        with pytest.raises(CloudAPIError, match="AccessDenied"):
            provider.list_instance_groups([f"nodes.{CLUSTER}"])

    def test_missing_region(self):
        with patch("kuberoll.cloud.aws.boto3.client", side_effect=NoRegionError()):
            with pytest.raises(ConfigError, match="--region"):
                AWSCloudProvider(CLUSTER)
