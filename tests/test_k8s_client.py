"""Test Kubernetes client functionality."""

import json
from subprocess import CalledProcessError
from unittest.mock import MagicMock, patch

import pytest

from kuberoll.k8s.client import K8sClient


class TestK8sClient:
    @patch("subprocess.run")
    def test_kubectl_verification_success(self, mock_run):
        """Test successful kubectl verification."""
        mock_run.return_value = MagicMock(
            stdout='{"clientVersion": {"major": "1", "minor": "28"}}', stderr="", returncode=0
        )

        client = K8sClient()
        assert client is not None

    @patch("subprocess.run")
    def test_kubectl_verification_failure(self, mock_run):
        """Test kubectl verification failure."""
        mock_run.side_effect = FileNotFoundError()

        with pytest.raises(RuntimeError, match="kubectl command not found"):
            K8sClient()

    @patch("subprocess.run")
    def test_build_command_basic(self, mock_run):
        """Test building basic kubectl command."""
        client = K8sClient(request_timeout=None)
        assert client._build_command(["get", "nodes"]) == ["kubectl", "get", "nodes"]

    @patch("subprocess.run")
    def test_build_command_with_context_and_timeout(self, mock_run):
        """Test building command with context and the default request timeout."""
        client = K8sClient(context="k8s.example.com")
        cmd = client._build_command(["get", "nodes"])
        assert cmd == [
            "kubectl",
            "--context",
            "k8s.example.com",
            "--request-timeout=30s",
            "get",
            "nodes",
        ]

    @patch("subprocess.run")
    def test_build_command_with_namespace(self, mock_run):
        """Test building command with namespace."""
        client = K8sClient(namespace="kube-system", request_timeout=None)
        cmd = client._build_command(["get", "pods"])
        assert cmd == ["kubectl", "get", "pods", "-n", "kube-system"]

    @patch("subprocess.run")
    def test_execute_passes_stdin(self, mock_run):
        """Test that request bodies are piped to kubectl."""
        mock_run.return_value = MagicMock(stdout="{}", stderr="", returncode=0)
        client = K8sClient(request_timeout=None)

        success, _ = client.create_raw("/api/v1/namespaces/default/pods/web/eviction", {"kind": "Eviction"})

        assert success is True
        args, kwargs = mock_run.call_args
        assert args[0] == [
            "kubectl",
            "create",
            "--raw",
            "/api/v1/namespaces/default/pods/web/eviction",
            "-f",
            "-",
        ]
        assert json.loads(kwargs["input"]) == {"kind": "Eviction"}

    @patch("subprocess.run")
    def test_execute_failure(self, mock_run):
        """Test failed command execution."""
        client = K8sClient()
        mock_run.side_effect = CalledProcessError(1, "kubectl", stderr="Error message")

        success, output = client.execute(["get", "nodes"])

        assert success is False
        assert "Error message" in output

    @patch("subprocess.run")
    def test_get_json_with_field_selector(self, mock_run):
        """Test listing pods bound to one node."""
        mock_run.return_value = MagicMock(stdout='{"items": []}', stderr="", returncode=0)
        client = K8sClient(request_timeout=None)

        data = client.get_json("pods", all_namespaces=True, field_selector="spec.nodeName=ip-1")

        assert data == {"items": []}
        assert mock_run.call_args[0][0] == [
            "kubectl",
            "get",
            "pods",
            "--all-namespaces",
            "--field-selector",
            "spec.nodeName=ip-1",
            "-o",
            "json",
        ]

    @patch("subprocess.run")
    def test_get_json_invalid_output(self, mock_run):
        """Test that unparseable output yields None."""
        mock_run.return_value = MagicMock(stdout="not json", stderr="", returncode=0)
        client = K8sClient()

        assert client.get_json("nodes") is None
