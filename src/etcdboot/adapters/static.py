"""Topology provider for fleets listed in configuration."""

from __future__ import annotations

from typing import TYPE_CHECKING

from etcdboot.config.errors import ConfigurationError
from etcdboot.domain.errors import EmptyFleetError
from etcdboot.domain.ports.topology import NodeTopology
from etcdboot.domain.types import CandidatePeer

if TYPE_CHECKING:
    from collections.abc import Sequence

    from etcdboot.config.etcd import EtcdConfig
    from etcdboot.config.topology import StaticTopologyConfig

STATIC_GROUP = "static"


class StaticTopologyProvider:
    """Serve a fixed, ordered peer list; every listed peer counts as in service."""

    def __init__(self, peers: Sequence[CandidatePeer]) -> None:
        self._peers = tuple(peers)

    def list_fleet_peers(self, group: str) -> Sequence[CandidatePeer]:
        if not self._peers:
            raise EmptyFleetError(f"No peers configured for group {group}")
        return self._peers


def build_static_node_topology(
    config: StaticTopologyConfig,
    *,
    etcd: EtcdConfig,
) -> NodeTopology:
    peers = [
        CandidatePeer(
            identity=peer.identity,
            client_url=etcd.client_url(peer.host),
            peer_url=etcd.peer_url(peer.host),
        )
        for peer in config.peers
    ]
    self_peer = next((peer for peer in peers if peer.identity == config.self_identity), None)
    if self_peer is None:
        raise ConfigurationError(
            f"ETCDBOOT_SELF_ID {config.self_identity!r} is not listed in ETCDBOOT_STATIC_PEERS"
        )
    return NodeTopology(
        self_peer=self_peer,
        group=STATIC_GROUP,
        provider=StaticTopologyProvider(peers),
    )
