"""Render the bootstrap decision as etcd environment variables."""

from __future__ import annotations

import shlex
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from etcdboot.domain.types import CandidatePeer, ReconciliationResult

log = getLogger(__name__)


def etcd_environment(
    self_peer: CandidatePeer,
    result: ReconciliationResult,
) -> dict[str, str]:
    """Map a reconciliation result onto the variables etcd reads at startup."""

    return {
        "ETCD_NAME": self_peer.identity,
        "ETCD_LISTEN_PEER_URLS": self_peer.peer_url,
        "ETCD_INITIAL_ADVERTISE_PEER_URLS": self_peer.peer_url,
        "ETCD_LISTEN_CLIENT_URLS": self_peer.client_url,
        "ETCD_ADVERTISE_CLIENT_URLS": self_peer.client_url,
        "ETCD_INITIAL_CLUSTER_STATE": str(result.state),
        "ETCD_INITIAL_CLUSTER": ",".join(result.initial_cluster),
    }


def render_exports(environment: dict[str, str]) -> list[str]:
    return [f"export {name}={shlex.quote(value)}" for name, value in environment.items()]


def write_exports(lines: list[str], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    log.info("Wrote etcd environment to %s", path)
