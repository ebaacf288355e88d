from __future__ import annotations

import pytest

from etcdboot.adapters.static import STATIC_GROUP, StaticTopologyProvider, build_static_node_topology
from etcdboot.config.errors import ConfigurationError
from etcdboot.config.etcd import EtcdConfig
from etcdboot.config.topology import StaticPeer, StaticTopologyConfig
from etcdboot.domain.errors import EmptyFleetError
from etcdboot.domain.types import CandidatePeer


def test_static_topology_resolves_self_and_fleet() -> None:
    config = StaticTopologyConfig(
        self_identity="etcd-2",
        peers=(StaticPeer("etcd-1", "10.0.0.1"), StaticPeer("etcd-2", "10.0.0.2")),
    )

    node = build_static_node_topology(config, etcd=EtcdConfig(peer_scheme="https"))

    assert node.group == STATIC_GROUP
    assert node.self_peer == CandidatePeer("etcd-2", "http://10.0.0.2:2379", "https://10.0.0.2:2380")
    assert [peer.identity for peer in node.fleet()] == ["etcd-1", "etcd-2"]


def test_static_topology_requires_self_in_peer_list() -> None:
    config = StaticTopologyConfig(self_identity="etcd-9", peers=(StaticPeer("etcd-1", "10.0.0.1"),))

    with pytest.raises(ConfigurationError, match="etcd-9"):
        build_static_node_topology(config, etcd=EtcdConfig())


def test_empty_static_fleet_is_fatal() -> None:
    with pytest.raises(EmptyFleetError):
        StaticTopologyProvider([]).list_fleet_peers(STATIC_GROUP)


def test_ipv6_peers_are_bracketed_in_urls() -> None:
    config = StaticTopologyConfig(
        self_identity="etcd-1",
        peers=(StaticPeer("etcd-1", "fd00::1"), StaticPeer("etcd-2", "[fd00::2]")),
    )

    node = build_static_node_topology(config, etcd=EtcdConfig())

    assert [(peer.client_url, peer.peer_url) for peer in node.fleet()] == [
        ("http://[fd00::1]:2379", "http://[fd00::1]:2380"),
        ("http://[fd00::2]:2379", "http://[fd00::2]:2380"),
    ]
