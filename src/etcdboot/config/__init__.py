"""Application configuration helpers."""

from __future__ import annotations

from etcdboot.common.logging import configure_logging

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .etcd import EtcdConfig, get_etcd_config
from .http_resilience import ResilienceConfig
from .topology import (
    AwsTopologyConfig,
    StaticPeer,
    StaticTopologyConfig,
    TopologyConfig,
    TopologyKind,
    get_topology_config,
    parse_static_peers,
)

__all__ = [
    "AwsTopologyConfig",
    "ConfigurationError",
    "EtcdConfig",
    "MissingConfigurationError",
    "ResilienceConfig",
    "StaticPeer",
    "StaticTopologyConfig",
    "TopologyConfig",
    "TopologyKind",
    "configure_logging",
    "get_etcd_config",
    "get_topology_config",
    "parse_static_peers",
    "require_env_vars",
]
