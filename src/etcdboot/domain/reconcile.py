"""Bootstrap decision engine.

The engine runs in two layers:

1) ``plan_reconciliation`` classifies the situation (create, rejoin or join)
   and computes the stale members and the desired member list without I/O
2) ``apply_plan`` materialises a plan through a ``MemberMutator``: the kept
   members are validated, stale members are removed one by one, then this node is added, then the final
   list goes through the validation gate

Removal always finishes before the add. Adding a voting member while dead
members still count toward quorum can leave the cluster unable to commit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from etcdboot.domain.errors import (
    EmptyFleetError,
    InvalidMemberListError,
    MemberMutationError,
    SelfNotInFleetError,
)
from etcdboot.domain.types import ClusterState, Member, ReconciliationResult

if TYPE_CHECKING:
    from collections.abc import Sequence

    from etcdboot.domain.ports.membership import MemberMutator
    from etcdboot.domain.types import CandidatePeer, ClusterProbe

log = getLogger(__name__)


class ReconciliationAction(StrEnum):
    CREATE = "create"
    REJOIN = "rejoin"
    JOIN = "join"


@dataclass(frozen=True, slots=True)
class ReconciliationPlan:
    """Desired membership computed from the fleet and the probe."""

    action: ReconciliationAction
    self_peer: CandidatePeer
    members: tuple[Member, ...]
    stale: tuple[Member, ...] = field(default_factory=tuple)
    authority_url: str | None = None

    @property
    def state(self) -> ClusterState:
        if self.action is ReconciliationAction.CREATE:
            return ClusterState.NEW
        return ClusterState.EXISTING

    @property
    def requires_mutation(self) -> bool:
        return self.action is ReconciliationAction.JOIN


def plan_reconciliation(
    self_peer: CandidatePeer,
    fleet: Sequence[CandidatePeer],
    probe: ClusterProbe,
) -> ReconciliationPlan:
    """Decide between creating, rejoining and joining the cluster."""

    _check_preconditions(self_peer, fleet)

    if not probe.is_found:
        members = tuple(
            Member(name=candidate.identity, peer_urls=(candidate.peer_url,))
            for candidate in fleet
        )
        return ReconciliationPlan(
            action=ReconciliationAction.CREATE,
            self_peer=self_peer,
            members=members,
        )

    if any(member.advertises(self_peer.peer_url) for member in probe.members):
        return ReconciliationPlan(
            action=ReconciliationAction.REJOIN,
            self_peer=self_peer,
            members=_correct_self_name(self_peer, probe.members),
            authority_url=probe.authority_url,
        )

    good, stale = _partition_members(self_peer, fleet, probe.members)
    return ReconciliationPlan(
        action=ReconciliationAction.JOIN,
        self_peer=self_peer,
        members=good,
        stale=stale,
        authority_url=probe.authority_url,
    )


def apply_plan(
    plan: ReconciliationPlan,
    mutator: MemberMutator | None = None,
) -> ReconciliationResult:
    """Carry out ``plan`` and return the final decision."""

    if plan.action is ReconciliationAction.CREATE:
        log.info("Creating new cluster with %d member(s)", len(plan.members))
        return ReconciliationResult(state=plan.state, members=plan.members)

    if plan.action is ReconciliationAction.REJOIN:
        log.info("Already a member of the cluster; rejoining without membership changes")
        for member in plan.members:
            if not member.initial_cluster_entries():
                # Not-yet-started members are legitimate here; only the join path rejects them.
                log.warning(
                    "Member %s has no name or peer URLs; omitted from initial cluster",
                    member.member_id,
                )
        return ReconciliationResult(state=plan.state, members=plan.members)

    if mutator is None:
        raise ValueError("A member mutator is required to join an existing cluster")

    # Reject a malformed list before any mutation so a failed run adds nothing.
    validate_member_list(plan.members)
    _remove_stale_members(plan.stale, mutator)

    self_peer = plan.self_peer
    log.info("Joining existing cluster via %s as %s", plan.authority_url, self_peer.identity)
    added = mutator.add_member(self_peer.peer_url)
    self_member = Member(
        member_id=added.member_id,
        name=self_peer.identity,
        peer_urls=added.peer_urls or (self_peer.peer_url,),
    )

    final_members = (*plan.members, self_member)
    validate_member_list(final_members)
    return ReconciliationResult(
        state=plan.state,
        members=final_members,
        removed=plan.stale,
        added=self_member,
    )


def reconcile(
    self_peer: CandidatePeer,
    fleet: Sequence[CandidatePeer],
    probe: ClusterProbe,
    *,
    mutator: MemberMutator | None = None,
) -> ReconciliationResult:
    """Plan and apply the bootstrap decision for ``self_peer``."""

    plan = plan_reconciliation(self_peer, fleet, probe)
    log.debug(
        "Reconciliation plan: action=%s, keep=%s, stale=%s",
        plan.action,
        [member.name for member in plan.members],
        [member.name or member.member_id for member in plan.stale],
    )
    return apply_plan(plan, mutator)


def validate_member_list(members: Sequence[Member]) -> None:
    """Reject members that would corrupt etcd's ``--initial-cluster`` value."""

    problems: list[str] = []
    for member in members:
        label = member.name or member.member_id or "<unknown>"
        if not member.name:
            problems.append(f"member {label} has no name")
        if not any(member.peer_urls):
            problems.append(f"member {label} has no peer URLs")
    if problems:
        raise InvalidMemberListError("Refusing malformed member list: " + "; ".join(problems))


def _check_preconditions(self_peer: CandidatePeer, fleet: Sequence[CandidatePeer]) -> None:
    if not fleet:
        raise EmptyFleetError("Cannot bootstrap without fleet candidates")
    if all(candidate.identity != self_peer.identity for candidate in fleet):
        raise SelfNotInFleetError(
            f"{self_peer.identity} is not among the in-service fleet candidates"
        )


def _correct_self_name(
    self_peer: CandidatePeer,
    members: tuple[Member, ...],
) -> tuple[Member, ...]:
    corrected: list[Member] = []
    for member in members:
        if member.advertises(self_peer.peer_url) and not member.name:
            log.info("Naming unstarted member %s as %s", member.member_id, self_peer.identity)
            member = member.renamed(self_peer.identity)
        corrected.append(member)
    return tuple(corrected)


def _partition_members(
    self_peer: CandidatePeer,
    fleet: Sequence[CandidatePeer],
    members: tuple[Member, ...],
) -> tuple[tuple[Member, ...], tuple[Member, ...]]:
    identities = {candidate.identity for candidate in fleet}
    identity_by_peer_url = {candidate.peer_url: candidate.identity for candidate in fleet}

    good: list[Member] = []
    stale: list[Member] = []
    for member in members:
        if not member.name:
            # A sibling that was added but has not started yet keeps its slot.
            matched = next(
                (
                    identity_by_peer_url[url]
                    for url in member.peer_urls
                    if url in identity_by_peer_url
                ),
                None,
            )
            if matched is not None:
                member = member.renamed(matched)
        if member.name in identities and member.name != self_peer.identity:
            good.append(member)
        else:
            stale.append(member)
    return tuple(good), tuple(stale)


def _remove_stale_members(stale: Sequence[Member], mutator: MemberMutator) -> None:
    for member in stale:
        if not member.member_id:
            raise MemberMutationError(
                "member.remove",
                f"stale member {member.name or '<unnamed>'} has no member id",
            )
        log.info("Removing stale member %s (%s)", member.name or "<unnamed>", member.member_id)
        mutator.remove_member(member.member_id)


__all__ = [
    "ReconciliationAction",
    "ReconciliationPlan",
    "apply_plan",
    "plan_reconciliation",
    "reconcile",
    "validate_member_list",
]
