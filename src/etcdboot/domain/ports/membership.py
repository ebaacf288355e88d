"""Ports for reading and changing etcd cluster membership."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from etcdboot.domain.types import Member, MemberId, PeerURL


class MembersUnavailableError(RuntimeError):
    """Raised by a reader when a candidate cannot report its member list."""


@runtime_checkable
class MembersReader(Protocol):
    """Fetch the member list exposed by one candidate's client URL."""

    def members_url(self, client_url: str) -> str: ...

    def read_members(self, members_url: str) -> tuple[Member, ...]: ...


@runtime_checkable
class MemberMutator(Protocol):
    """Membership operations bound to the authority endpoint.

    ``remove_member`` and ``add_member`` are idempotent: removing an absent
    member and adding an already-present peer URL both return normally.
    """

    def list_members(self) -> tuple[Member, ...]: ...

    def remove_member(self, member_id: MemberId) -> None: ...

    def add_member(self, peer_url: PeerURL) -> Member: ...


__all__ = ["MemberMutator", "MembersReader", "MembersUnavailableError"]
