"""
Cluster Member Models

Describes the processes of an etcd cluster as reported by the orchestrator
and derives the client endpoint used to reach each of them.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List


class MemberPhase(str, Enum):
    """
    Run phase of a member process as reported by the orchestrator.

    Only RUNNING members are ever probed for a backup.
    """
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str) -> "MemberPhase":
        """Map an orchestrator phase string onto a MemberPhase (UNKNOWN if unrecognised)."""
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class ClusterMember:
    """One entry of the member list returned for a cluster."""
    name: str
    namespace: str
    phase: MemberPhase = MemberPhase.UNKNOWN

    @property
    def is_running(self) -> bool:
        return self.phase == MemberPhase.RUNNING


def running_members(members: Iterable[ClusterMember]) -> List[ClusterMember]:
    """Keep only the members in the running phase, preserving order."""
    return [m for m in members if m.is_running]


def cluster_name_from_member_name(member_name: str) -> str:
    """
    Derive the cluster name from a member name.

    Members are named ``<cluster>-<suffix>``, so the cluster name is
    everything before the last dash.

    Raises:
        ValueError: If the member name carries no suffix
    """
    index = member_name.rfind("-")
    if index <= 0:
        raise ValueError(f"unexpected member name: {member_name!r}")
    return member_name[:index]


@dataclass(frozen=True)
class EtcdMember:
    """
    A member of the replicated cluster reachable by the backup engine.

    Attributes:
        name: Member (pod) name
        namespace: Namespace the member lives in
        secure_client: Whether clients connect over TLS
        client_port: Client port exposed by the member
    """
    name: str
    namespace: str
    secure_client: bool = False
    client_port: int = 2379

    @property
    def cluster_name(self) -> str:
        return cluster_name_from_member_name(self.name)

    @property
    def addr(self) -> str:
        """DNS name of the member inside the cluster."""
        return f"{self.name}.{self.cluster_name}.{self.namespace}.svc"

    @property
    def client_scheme(self) -> str:
        return "https" if self.secure_client else "http"

    @property
    def client_url(self) -> str:
        return f"{self.client_scheme}://{self.addr}:{self.client_port}"

    @classmethod
    def from_cluster_member(
        cls,
        member: ClusterMember,
        secure_client: bool,
        client_port: int = 2379
    ) -> "EtcdMember":
        return cls(
            name=member.name,
            namespace=member.namespace,
            secure_client=secure_client,
            client_port=client_port,
        )
