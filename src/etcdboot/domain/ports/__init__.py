"""Domain port definitions for adapters."""

from __future__ import annotations

from .membership import MemberMutator, MembersReader, MembersUnavailableError
from .topology import NodeTopology, TopologyProvider

__all__ = [
    "MemberMutator",
    "MembersReader",
    "MembersUnavailableError",
    "NodeTopology",
    "TopologyProvider",
]
