"""Application orchestration entry points."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from etcdboot.adapters.aws import build_aws_node_topology
from etcdboot.adapters.environment import etcd_environment
from etcdboot.adapters.etcd import EtcdMembersClient, HttpMemberMutator
from etcdboot.adapters.static import build_static_node_topology
from etcdboot.config import TopologyKind, get_etcd_config, get_topology_config
from etcdboot.config.errors import ConfigurationError
from etcdboot.domain.probe import probe_cluster
from etcdboot.domain.reconcile import reconcile

if TYPE_CHECKING:
    from etcdboot.config import EtcdConfig, TopologyConfig
    from etcdboot.domain.ports import NodeTopology
    from etcdboot.domain.types import CandidatePeer, ReconciliationResult

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BootstrapOutcome:
    """Decision for this node plus the etcd environment derived from it."""

    self_peer: CandidatePeer
    result: ReconciliationResult
    environment: dict[str, str]


def resolve_node_topology(
    topology_config: TopologyConfig,
    *,
    etcd_config: EtcdConfig,
) -> NodeTopology:
    if topology_config.kind is TopologyKind.STATIC and topology_config.static is not None:
        return build_static_node_topology(topology_config.static, etcd=etcd_config)
    if topology_config.kind is TopologyKind.AWS and topology_config.aws is not None:
        return build_aws_node_topology(topology_config.aws, etcd=etcd_config)
    raise ConfigurationError(f"Incomplete topology configuration for {topology_config.kind}")


def bootstrap_node(
    *,
    topology: NodeTopology | None = None,
    etcd_config: EtcdConfig | None = None,
    members_client: EtcdMembersClient | None = None,
) -> BootstrapOutcome:
    """Probe the fleet, reconcile membership and return the etcd startup settings.

    Any ``BootstrapError`` raised here means etcd must not be started.
    """

    effective_etcd = etcd_config or get_etcd_config()
    node = topology or resolve_node_topology(get_topology_config(), etcd_config=effective_etcd)
    fleet = list(node.fleet())
    log.info(
        "Bootstrapping %s with %d fleet candidate(s): %s",
        node.self_peer.identity,
        len(fleet),
        ", ".join(peer.identity for peer in fleet),
    )

    client = members_client or EtcdMembersClient(config=effective_etcd)
    probe = probe_cluster(fleet, reader=client)
    mutator = (
        HttpMemberMutator(probe.authority_url, client=client)
        if probe.authority_url is not None
        else None
    )
    result = reconcile(node.self_peer, fleet, probe, mutator=mutator)

    log.info(
        "Bootstrap decided: state=%s, initial_cluster=%s, removed=%d, added=%s",
        result.state,
        ",".join(result.initial_cluster),
        len(result.removed),
        result.added is not None,
    )
    return BootstrapOutcome(
        self_peer=node.self_peer,
        result=result,
        environment=etcd_environment(node.self_peer, result),
    )
