"""Port for discovering the peers of the deployment group."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from etcdboot.domain.types import CandidatePeer


@runtime_checkable
class TopologyProvider(Protocol):
    """Return the in-service peers of a group, in a stable order.

    Implementations raise ``EmptyFleetError`` rather than returning an empty
    sequence.
    """

    def list_fleet_peers(self, group: str) -> Sequence[CandidatePeer]: ...


@dataclass(frozen=True, slots=True)
class NodeTopology:
    """This node's identity together with the provider of its fleet."""

    self_peer: CandidatePeer
    group: str
    provider: TopologyProvider

    def fleet(self) -> Sequence[CandidatePeer]:
        return self.provider.list_fleet_peers(self.group)


__all__ = ["NodeTopology", "TopologyProvider"]
