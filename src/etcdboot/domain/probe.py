"""Cluster discovery across the fleet candidates."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from etcdboot.domain.ports.membership import MembersUnavailableError
from etcdboot.domain.types import ClusterProbe

if TYPE_CHECKING:
    from collections.abc import Iterable

    from etcdboot.domain.ports.membership import MembersReader
    from etcdboot.domain.types import CandidatePeer

log = getLogger(__name__)


def probe_cluster(
    candidates: Iterable[CandidatePeer],
    *,
    reader: MembersReader,
) -> ClusterProbe:
    """Return the member list of the first candidate that answers.

    Candidates are tried in the given order and probing stops at the first
    success. A candidate that cannot answer has no opinion; when nobody
    answers the cluster does not exist yet and an absent probe is returned.
    """

    for candidate in candidates:
        members_url = reader.members_url(candidate.client_url)
        try:
            members = reader.read_members(members_url)
        except MembersUnavailableError as exc:
            log.warning("No member list from %s (%s): %s", candidate.identity, members_url, exc)
            continue
        log.info(
            "Found existing cluster via %s: %d member(s)",
            candidate.identity,
            len(members),
        )
        return ClusterProbe.found(members_url, members)

    log.info("No candidate reported a member list; assuming no cluster exists")
    return ClusterProbe.absent()


__all__ = ["probe_cluster"]
