"""Rolling replacement of the cloud instances backing a Kubernetes cluster."""

__version__ = "0.1.0"
