"""Core value types shared by the prober, reconciler and adapters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import TypeAlias

MemberId: TypeAlias = str
PeerURL: TypeAlias = str
ClientURL: TypeAlias = str


class ClusterState(StrEnum):
    """Value passed to etcd as ``--initial-cluster-state``."""

    NEW = "new"
    EXISTING = "existing"


@dataclass(frozen=True, slots=True)
class CandidatePeer:
    """An in-service fleet instance that may take part in the cluster."""

    identity: str
    client_url: ClientURL
    peer_url: PeerURL

    def as_initial_cluster_entry(self) -> str:
        return f"{self.identity}={self.peer_url}"


@dataclass(frozen=True, slots=True)
class Member:
    """A cluster participant as reported by the etcd members API.

    ``name`` is empty and ``member_id`` may be ``None`` for a member that was
    added but whose etcd process never started.
    """

    member_id: MemberId | None = None
    name: str = ""
    peer_urls: tuple[PeerURL, ...] = ()
    client_urls: tuple[ClientURL, ...] = ()

    @property
    def is_started(self) -> bool:
        return bool(self.name)

    def advertises(self, peer_url: PeerURL) -> bool:
        return peer_url in self.peer_urls

    def renamed(self, name: str) -> Member:
        return replace(self, name=name)

    def initial_cluster_entries(self) -> tuple[str, ...]:
        if not self.name:
            return ()
        return tuple(f"{self.name}={url}" for url in self.peer_urls if url)


@dataclass(frozen=True, slots=True)
class ClusterProbe:
    """Outcome of probing the fleet for a running cluster.

    ``authority_url`` is ``None`` when no candidate answered; otherwise it is
    the members-collection URL that every later mutation goes through.
    """

    authority_url: str | None = None
    members: tuple[Member, ...] = ()

    @classmethod
    def absent(cls) -> ClusterProbe:
        return cls()

    @classmethod
    def found(cls, authority_url: str, members: tuple[Member, ...]) -> ClusterProbe:
        return cls(authority_url=authority_url, members=members)

    @property
    def is_found(self) -> bool:
        return self.authority_url is not None


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Final bootstrap decision handed to the configuration emitter."""

    state: ClusterState
    members: tuple[Member, ...]
    removed: tuple[Member, ...] = field(default_factory=tuple)
    added: Member | None = None

    @property
    def initial_cluster(self) -> tuple[str, ...]:
        entries: list[str] = []
        for member in self.members:
            entries.extend(member.initial_cluster_entries())
        return tuple(entries)


__all__ = [
    "CandidatePeer",
    "ClientURL",
    "ClusterProbe",
    "ClusterState",
    "Member",
    "MemberId",
    "PeerURL",
    "ReconciliationResult",
]
