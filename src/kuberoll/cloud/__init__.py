"""Cloud provider implementations."""

from .aws import AWSCloudProvider
from .base import CloudProvider

__all__ = ["AWSCloudProvider", "CloudProvider"]
