"""
Cluster Membership Module

Supplies the candidate member processes of an etcd cluster and derives
the endpoint of each member. Only members in the running phase are ever
handed to the backup engine.
"""

from .members import (
    MemberPhase,
    ClusterMember,
    EtcdMember,
    running_members,
    cluster_name_from_member_name
)
from .listers import (
    MemberLister,
    StaticMemberLister,
    KubernetesMemberLister,
    cluster_labels,
    cluster_label_selector
)

__all__ = [
    'MemberPhase',
    'ClusterMember',
    'EtcdMember',
    'running_members',
    'cluster_name_from_member_name',
    'MemberLister',
    'StaticMemberLister',
    'KubernetesMemberLister',
    'cluster_labels',
    'cluster_label_selector',
]
