"""
Cluster Member Listers

Providers of the current member list for a named cluster. The backup
engine depends only on MemberLister; the Kubernetes implementation lists
the pods labelled for the cluster, the static one serves fixed lists.
"""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from .members import ClusterMember, MemberPhase

logger = logging.getLogger(__name__)


def cluster_labels(cluster_name: str) -> Dict[str, str]:
    """Labels carried by every pod of an etcd cluster."""
    return {"app": "etcd", "etcd_cluster": cluster_name}


def cluster_label_selector(cluster_name: str) -> str:
    return ",".join(f"{k}={v}" for k, v in sorted(cluster_labels(cluster_name).items()))


class MemberLister(ABC):
    """Returns the member processes of a cluster together with their run phase."""

    @abstractmethod
    def list_members(self, cluster_name: str, namespace: str) -> List[ClusterMember]:
        """
        List the members of ``cluster_name`` in ``namespace``.

        Raises:
            Exception: Any failure of the underlying provider is propagated
        """


class StaticMemberLister(MemberLister):
    """
    Serves a fixed member list.

    Useful for clusters outside an orchestrator and for tests.
    """

    def __init__(self, members: Iterable[ClusterMember]):
        self._members = list(members)

    def list_members(self, cluster_name: str, namespace: str) -> List[ClusterMember]:
        return [m for m in self._members if m.namespace == namespace]


class KubernetesMemberLister(MemberLister):
    """
    Lists the pods of an etcd cluster through the Kubernetes API.

    Example:
        ```python
        lister = KubernetesMemberLister()
        members = lister.list_members("example-etcd-cluster", "default")
        ```
    """

    def __init__(self, core_v1_api=None):
        """
        Args:
            core_v1_api: A ``kubernetes.client.CoreV1Api``. When None, one is
                built from the in-cluster configuration, falling back to the
                local kubeconfig.
        """
        self._api = core_v1_api

    def _core_api(self):
        if self._api is None:
            from kubernetes import client, config as kube_config

            try:
                kube_config.load_incluster_config()
            except kube_config.ConfigException:
                kube_config.load_kube_config()
            self._api = client.CoreV1Api()
        return self._api

    def list_members(self, cluster_name: str, namespace: str) -> List[ClusterMember]:
        selector = cluster_label_selector(cluster_name)
        pod_list = self._core_api().list_namespaced_pod(namespace, label_selector=selector)

        members = []
        for pod in pod_list.items:
            phase: Optional[str] = pod.status.phase if pod.status else None
            members.append(ClusterMember(
                name=pod.metadata.name,
                namespace=pod.metadata.namespace or namespace,
                phase=MemberPhase.parse(phase or ""),
            ))

        logger.debug(f"Listed {len(members)} pods for cluster '{cluster_name}' ({selector})")
        return members
