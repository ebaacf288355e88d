"""AWS topology adapter: instance identity and Auto Scaling membership."""

from __future__ import annotations

from .autoscaling import AutoScalingTopologyProvider, build_aws_node_topology
from .metadata import fetch_instance_identity
from .schema import InstanceIdentityDocument

__all__ = [
    "AutoScalingTopologyProvider",
    "InstanceIdentityDocument",
    "build_aws_node_topology",
    "fetch_instance_identity",
]
