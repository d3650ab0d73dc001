"""Base cloud provider class."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..model.cloud import CloudGroup, CloudInstance


class CloudProvider(ABC):
    """Instance-group operations the rolling update needs from a cloud."""

    @abstractmethod
    def list_instance_groups(self, names: Sequence[str]) -> List[CloudGroup]:
        """Describe the cloud groups of the cluster.

        ``names`` are the cloud group names backing the selected instance
        groups. Providers may return additional groups belonging to the
        cluster; the caller decides what to do with them.
        """

    @abstractmethod
    def terminate_instance(self, instance: CloudInstance) -> None:
        """Terminate one instance, leaving its group to launch a replacement.

        Raises TerminationError when the cloud rejects the request.
        """
