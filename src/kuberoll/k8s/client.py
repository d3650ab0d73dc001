"""Kubernetes client wrapper."""

import subprocess
import json
from typing import List, Tuple, Optional, Dict, Any

from ..utils.logger import get_logger

logger = get_logger(__name__)


class K8sClient:
    """Wrapper for kubectl commands."""

    def __init__(
        self,
        context: Optional[str] = None,
        namespace: Optional[str] = None,
        request_timeout: Optional[str] = "30s",
    ):
        self.context = context
        self.namespace = namespace
        self.request_timeout = request_timeout
        self._verify_kubectl()

    def _verify_kubectl(self):
        """Verify kubectl is available and configured."""
        try:
            subprocess.run(
                ["kubectl", "version", "--client", "-o", "json"],
                capture_output=True,
                text=True,
                check=True,
            )
            logger.debug("kubectl verified successfully")
        except FileNotFoundError:
            raise RuntimeError("kubectl command not found. Please install kubectl.")
        except subprocess.CalledProcessError:
            logger.warning("kubectl verification failed")

    def _build_command(self, args: List[str]) -> List[str]:
        """Build kubectl command with context, namespace and request timeout."""
        cmd = ["kubectl"]

        if self.context:
            cmd.extend(["--context", self.context])

        if self.request_timeout:
            cmd.append(f"--request-timeout={self.request_timeout}")

        cmd.extend(args)

        if self.namespace and "--all-namespaces" not in args and "-n" not in args:
            cmd.extend(["-n", self.namespace])

        return cmd

    def execute(self, args: List[str], stdin: Optional[str] = None) -> Tuple[bool, str]:
        """Execute kubectl command and return success status and output."""
        cmd = self._build_command(args)
        logger.debug(f"Executing: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, input=stdin, capture_output=True, text=True, check=True)
            return True, result.stdout
        except subprocess.CalledProcessError as e:
            logger.error(f"Command failed: {e.stderr}")
            return False, e.stderr

    def get_json(
        self,
        resource_type: str,
        name: Optional[str] = None,
        all_namespaces: bool = False,
        namespace: Optional[str] = None,
        field_selector: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Get resource(s) as JSON."""
        args = ["get", resource_type]

        if name:
            args.append(name)

        if all_namespaces:
            args.append("--all-namespaces")
        elif namespace:
            args.extend(["-n", namespace])

        if field_selector:
            args.extend(["--field-selector", field_selector])

        args.extend(["-o", "json"])

        success, output = self.execute(args)
        if success:
            try:
                return json.loads(output)
            except json.JSONDecodeError:
                logger.error("Failed to parse JSON output")
                return None
        return None

    def create_raw(self, path: str, body: Dict[str, Any]) -> Tuple[bool, str]:
        """POST a JSON body to a raw API path."""
        return self.execute(["create", "--raw", path, "-f", "-"], stdin=json.dumps(body))
