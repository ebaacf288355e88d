"""etcd endpoint configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_float, env_int, env_str
from .errors import ConfigurationError
from .http_resilience import DEFAULT_TIMEOUT_SECONDS, ResilienceConfig

DEFAULT_CLIENT_PORT = 2379
DEFAULT_PEER_PORT = 2380
MEMBERS_PATH = "/v2/members"
_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True, slots=True)
class EtcdConfig:
    client_scheme: str = "http"
    client_port: int = DEFAULT_CLIENT_PORT
    peer_scheme: str = "http"
    peer_port: int = DEFAULT_PEER_PORT
    members_path: str = MEMBERS_PATH
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(name="etcd-members")
    )

    def client_url(self, host: str) -> str:
        return f"{self.client_scheme}://{url_host(host)}:{self.client_port}"

    def peer_url(self, host: str) -> str:
        return f"{self.peer_scheme}://{url_host(host)}:{self.peer_port}"


def url_host(host: str) -> str:
    """Return ``host`` as it must appear in a URL authority (IPv6 in brackets)."""

    if ":" in host and not host.startswith("["):
        return f"[{host}]"
    return host


def _scheme(name: str) -> str:
    value = env_str(name, "http").lower()
    if value not in _SCHEMES:
        raise ConfigurationError(f"{name} must be one of {sorted(_SCHEMES)}, got {value!r}")
    return value


def _port(name: str, default: int) -> int:
    value = env_int(name, default)
    if not 0 < value < 65536:
        raise ConfigurationError(f"{name} must be a TCP port, got {value}")
    return value


def get_etcd_config() -> EtcdConfig:
    return EtcdConfig(
        client_scheme=_scheme("ETCDBOOT_CLIENT_SCHEME"),
        client_port=_port("ETCDBOOT_CLIENT_PORT", DEFAULT_CLIENT_PORT),
        peer_scheme=_scheme("ETCDBOOT_PEER_SCHEME"),
        peer_port=_port("ETCDBOOT_PEER_PORT", DEFAULT_PEER_PORT),
        resilience=ResilienceConfig(
            name="etcd-members",
            timeout_seconds=env_float("ETCDBOOT_HTTP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
            default_headers={"Accept": "application/json"},
        ),
    )
