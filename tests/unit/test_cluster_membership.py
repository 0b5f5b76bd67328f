"""
Unit tests for cluster member models and listers.
"""

from types import SimpleNamespace

import pytest

from cluster_membership import (
    ClusterMember,
    EtcdMember,
    KubernetesMemberLister,
    MemberPhase,
    StaticMemberLister,
    cluster_label_selector,
    cluster_name_from_member_name,
    running_members
)


def pod(name, phase, namespace="default"):
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace=namespace),
        status=SimpleNamespace(phase=phase)
    )


class StubCoreV1Api:
    def __init__(self, pods):
        self.pods = pods
        self.calls = []

    def list_namespaced_pod(self, namespace, label_selector=None):
        self.calls.append((namespace, label_selector))
        return SimpleNamespace(items=self.pods)


class TestEtcdMember:

    def test_insecure_client_url(self):
        member = EtcdMember(name="example-etcd-cluster-0000", namespace="default")

        assert member.cluster_name == "example-etcd-cluster"
        assert member.addr == "example-etcd-cluster-0000.example-etcd-cluster.default.svc"
        assert member.client_url == "http://example-etcd-cluster-0000.example-etcd-cluster.default.svc:2379"

    def test_secure_client_url(self):
        member = EtcdMember(name="example-1", namespace="prod", secure_client=True, client_port=2380)

        assert member.client_url == "https://example-1.example.prod.svc:2380"

    def test_member_name_without_suffix(self):
        with pytest.raises(ValueError):
            cluster_name_from_member_name("example")

    def test_from_cluster_member(self):
        member = EtcdMember.from_cluster_member(
            ClusterMember("example-0", "default", MemberPhase.RUNNING),
            secure_client=True
        )

        assert member == EtcdMember("example-0", "default", secure_client=True, client_port=2379)


class TestMemberFiltering:

    def test_running_members_keeps_order(self):
        members = [
            ClusterMember("example-0", "default", MemberPhase.RUNNING),
            ClusterMember("example-1", "default", MemberPhase.PENDING),
            ClusterMember("example-2", "default", MemberPhase.RUNNING),
            ClusterMember("example-3", "default", MemberPhase.FAILED),
        ]

        assert [m.name for m in running_members(members)] == ["example-0", "example-2"]

    def test_unknown_phase(self):
        assert MemberPhase.parse("Terminating") == MemberPhase.UNKNOWN
        assert MemberPhase.parse("Running") == MemberPhase.RUNNING


class TestListers:

    def test_label_selector(self):
        assert cluster_label_selector("example") == "app=etcd,etcd_cluster=example"

    def test_static_lister_filters_namespace(self):
        lister = StaticMemberLister([
            ClusterMember("example-0", "default", MemberPhase.RUNNING),
            ClusterMember("example-0", "other", MemberPhase.RUNNING),
        ])

        assert lister.list_members("example", "default") == [
            ClusterMember("example-0", "default", MemberPhase.RUNNING)
        ]

    def test_kubernetes_lister(self):
        api = StubCoreV1Api([pod("example-0", "Running"), pod("example-1", "Pending"), pod("example-2", None)])
        lister = KubernetesMemberLister(core_v1_api=api)

        members = lister.list_members("example", "default")

        assert api.calls == [("default", "app=etcd,etcd_cluster=example")]
        assert [(m.name, m.phase) for m in members] == [
            ("example-0", MemberPhase.RUNNING),
            ("example-1", MemberPhase.PENDING),
            ("example-2", MemberPhase.UNKNOWN),
        ]

    def test_kubernetes_lister_propagates_api_errors(self):
        class FailingApi:
            def list_namespaced_pod(self, namespace, label_selector=None):
                raise RuntimeError("forbidden")

        with pytest.raises(RuntimeError, match="forbidden"):
            KubernetesMemberLister(core_v1_api=FailingApi()).list_members("example", "default")
