"""Read-only cluster access for the health probes.

Probes depend on the small :class:`ClusterClient` protocol rather than on the
Kubernetes client directly, so tests can pass a fake.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeInfo:
    name: str
    allocatable_cpu_millis: int = 0
    allocatable_memory_bytes: int = 0


@dataclass(frozen=True)
class PodInfo:
    name: str
    ready: bool


class ClusterClient(Protocol):
    """The cluster reads the probes need. Every method may raise on I/O failure."""

    def list_nodes(self) -> list[NodeInfo]: ...

    def list_pods(self, namespace: str, label_selector: str) -> list[PodInfo]: ...

    def namespace_exists(self, name: str) -> bool: ...

    def crd_exists(self, name: str) -> bool: ...


def parse_cpu_millis(val: str | int | float) -> int:
    s = str(val)
    if s.endswith("m"):
        return int(float(s[:-1]))
    if s.endswith("n"):
        return int(float(s[:-1]) / 1_000_000)
    return int(float(s) * 1000)


def parse_memory_bytes(val: str | int | float) -> int:
    s = str(val)
    suffixes = {
        "Ki": 1024, "Mi": 1024**2, "Gi": 1024**3, "Ti": 1024**4,
        "K": 1000, "M": 1000**2, "G": 1000**3, "T": 1000**4,
        "k": 1000,
    }
    for suffix, multiplier in sorted(suffixes.items(), key=lambda x: -len(x[0])):
        if s.endswith(suffix):
            return int(float(s[: -len(suffix)]) * multiplier)
    return int(float(s))


class KubernetesClusterClient:
    """:class:`ClusterClient` backed by the official Kubernetes Python client."""

    def __init__(self, api_client: client.ApiClient, request_timeout: float = 10.0) -> None:
        self._core = client.CoreV1Api(api_client)
        self._extensions = client.ApiextensionsV1Api(api_client)
        self._timeout = request_timeout

    @classmethod
    def from_kubeconfig(
        cls,
        kubeconfig: Optional[str] = None,
        context: Optional[str] = None,
        request_timeout: float = 10.0,
    ) -> "KubernetesClusterClient":
        """Load kubeconfig, falling back to in-cluster configuration.

        Raises:
            ConfigurationError: If neither configuration source is usable
        """
        try:
            config.load_kube_config(config_file=kubeconfig, context=context)
        except (ConfigException, OSError) as kube_error:
            logger.debug("kubeconfig unavailable (%s), trying in-cluster config", kube_error)
            try:
                config.load_incluster_config()
            except ConfigException as e:
                raise ConfigurationError(
                    "No usable Kubernetes configuration",
                    details={"kubeconfig": str(kube_error), "in_cluster": str(e)},
                ) from e
        return cls(client.ApiClient(), request_timeout=request_timeout)

    def list_nodes(self) -> list[NodeInfo]:
        nodes = self._core.list_node(_request_timeout=self._timeout)
        result = []
        for node in nodes.items:
            allocatable = (node.status.allocatable or {}) if node.status else {}
            result.append(
                NodeInfo(
                    name=node.metadata.name,
                    allocatable_cpu_millis=parse_cpu_millis(allocatable.get("cpu", 0)),
                    allocatable_memory_bytes=parse_memory_bytes(allocatable.get("memory", 0)),
                )
            )
        return result

    def list_pods(self, namespace: str, label_selector: str) -> list[PodInfo]:
        pods = self._core.list_namespaced_pod(
            namespace, label_selector=label_selector, _request_timeout=self._timeout
        )
        return [PodInfo(name=pod.metadata.name, ready=_pod_ready(pod)) for pod in pods.items]

    def namespace_exists(self, name: str) -> bool:
        try:
            self._core.read_namespace(name, _request_timeout=self._timeout)
        except ApiException as e:
            if e.status == 404:
                return False
            raise
        return True

    def crd_exists(self, name: str) -> bool:
        try:
            self._extensions.read_custom_resource_definition(name, _request_timeout=self._timeout)
        except ApiException as e:
            if e.status == 404:
                return False
            raise
        return True


def _pod_ready(pod) -> bool:
    conditions = (pod.status.conditions or []) if pod.status else []
    return any(c.type == "Ready" and c.status == "True" for c in conditions)
