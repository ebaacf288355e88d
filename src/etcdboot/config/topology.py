"""Topology provider configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .env import env_optional_str, env_str, require_env_vars
from .errors import ConfigurationError
from .http_resilience import ResilienceConfig

DEFAULT_METADATA_URL = "http://169.254.169.254"
METADATA_TIMEOUT_SECONDS = 2.0


class TopologyKind(StrEnum):
    AWS = "aws"
    STATIC = "static"


@dataclass(frozen=True, slots=True)
class StaticPeer:
    identity: str
    host: str


@dataclass(frozen=True, slots=True)
class AwsTopologyConfig:
    metadata: ResilienceConfig
    region: str | None = None


@dataclass(frozen=True, slots=True)
class StaticTopologyConfig:
    self_identity: str
    peers: tuple[StaticPeer, ...]


@dataclass(frozen=True, slots=True)
class TopologyConfig:
    kind: TopologyKind
    aws: AwsTopologyConfig | None = None
    static: StaticTopologyConfig | None = None


def parse_static_peers(raw: str) -> tuple[StaticPeer, ...]:
    """Parse ``id=host,id=host`` into peers, preserving order."""

    peers: list[StaticPeer] = []
    seen: set[str] = set()
    for item in raw.split(","):
        entry = item.strip()
        if not entry:
            continue
        identity, sep, host = entry.partition("=")
        identity, host = identity.strip(), host.strip()
        if not sep or not identity or not host:
            raise ConfigurationError(f"Invalid static peer entry {entry!r}; expected id=host")
        if identity in seen:
            raise ConfigurationError(f"Duplicate static peer identity {identity!r}")
        seen.add(identity)
        peers.append(StaticPeer(identity=identity, host=host))
    return tuple(peers)


def get_topology_config() -> TopologyConfig:
    raw_kind = env_str("ETCDBOOT_TOPOLOGY", TopologyKind.AWS).lower()
    try:
        kind = TopologyKind(raw_kind)
    except ValueError as exc:
        choices = ", ".join(item.value for item in TopologyKind)
        raise ConfigurationError(f"ETCDBOOT_TOPOLOGY must be one of: {choices}") from exc

    if kind is TopologyKind.STATIC:
        values = require_env_vars(("ETCDBOOT_SELF_ID", "ETCDBOOT_STATIC_PEERS"))
        return TopologyConfig(
            kind=kind,
            static=StaticTopologyConfig(
                self_identity=values["ETCDBOOT_SELF_ID"],
                peers=parse_static_peers(values["ETCDBOOT_STATIC_PEERS"]),
            ),
        )

    return TopologyConfig(
        kind=kind,
        aws=AwsTopologyConfig(
            metadata=ResilienceConfig(
                name="ec2-metadata",
                base_url=env_str("ETCDBOOT_METADATA_URL", DEFAULT_METADATA_URL),
                timeout_seconds=METADATA_TIMEOUT_SECONDS,
            ),
            region=env_optional_str("AWS_REGION"),
        ),
    )
