"""Auto Scaling group topology provider backed by boto3."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from etcdboot.domain.errors import EmptyFleetError, TopologyError
from etcdboot.domain.ports.topology import NodeTopology
from etcdboot.domain.types import CandidatePeer

from .metadata import fetch_instance_identity

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from etcdboot.adapters.http_resilience import ResilientClient
    from etcdboot.config.etcd import EtcdConfig
    from etcdboot.config.http_resilience import ResilienceConfig
    from etcdboot.config.topology import AwsTopologyConfig

log = getLogger(__name__)

IN_SERVICE = "InService"


class AutoScalingTopologyProvider:
    """List the in-service instances of an Auto Scaling group as candidate peers."""

    def __init__(
        self,
        *,
        etcd: EtcdConfig,
        region: str,
        autoscaling_client: Any | None = None,
        ec2_client: Any | None = None,
    ) -> None:
        self._etcd = etcd
        self._autoscaling = autoscaling_client or boto3.client("autoscaling", region_name=region)
        self._ec2 = ec2_client or boto3.client("ec2", region_name=region)

    def resolve_group(self, instance_id: str) -> str:
        try:
            response = self._autoscaling.describe_auto_scaling_instances(
                InstanceIds=[instance_id]
            )
        except (BotoCoreError, ClientError) as exc:
            raise TopologyError(f"Unable to look up Auto Scaling group: {exc}") from exc
        instances = response.get("AutoScalingInstances") or []
        if not instances:
            raise TopologyError(f"{instance_id} is not a member of an Auto Scaling group")
        return str(instances[0]["AutoScalingGroupName"])

    def list_fleet_peers(self, group: str) -> Sequence[CandidatePeer]:
        instance_ids = self._in_service_instance_ids(group)
        if not instance_ids:
            raise EmptyFleetError(f"Auto Scaling group {group} has no in-service instances")

        private_ips = self._private_ips(instance_ids)
        peers: list[CandidatePeer] = []
        for instance_id in instance_ids:
            private_ip = private_ips.get(instance_id)
            if private_ip is None:
                log.warning("Skipping %s: no private IP address reported", instance_id)
                continue
            peers.append(
                CandidatePeer(
                    identity=instance_id,
                    client_url=self._etcd.client_url(private_ip),
                    peer_url=self._etcd.peer_url(private_ip),
                )
            )
        if not peers:
            raise EmptyFleetError(f"No addressable in-service instances in {group}")
        log.info("Found %d in-service peer(s) in %s", len(peers), group)
        return peers

    def _in_service_instance_ids(self, group: str) -> list[str]:
        try:
            response = self._autoscaling.describe_auto_scaling_groups(
                AutoScalingGroupNames=[group]
            )
        except (BotoCoreError, ClientError) as exc:
            raise TopologyError(f"Unable to describe Auto Scaling group {group}: {exc}") from exc
        groups = response.get("AutoScalingGroups") or []
        if not groups:
            raise TopologyError(f"Auto Scaling group {group} not found")
        return [
            str(instance["InstanceId"])
            for instance in groups[0].get("Instances", [])
            if instance.get("LifecycleState") == IN_SERVICE
        ]

    def _private_ips(self, instance_ids: list[str]) -> dict[str, str]:
        try:
            response = self._ec2.describe_instances(InstanceIds=instance_ids)
        except (BotoCoreError, ClientError) as exc:
            raise TopologyError(f"Unable to describe instances: {exc}") from exc
        private_ips: dict[str, str] = {}
        for reservation in response.get("Reservations", []):
            for instance in reservation.get("Instances", []):
                private_ip = instance.get("PrivateIpAddress")
                if private_ip:
                    private_ips[str(instance["InstanceId"])] = str(private_ip)
        return private_ips


def build_aws_node_topology(
    config: AwsTopologyConfig,
    *,
    etcd: EtcdConfig,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    provider: AutoScalingTopologyProvider | None = None,
) -> NodeTopology:
    """Resolve this instance and its Auto Scaling group."""

    identity = fetch_instance_identity(config.metadata, client_factory=client_factory)
    log.info(
        "Running as %s (%s) in %s",
        identity.instance_id,
        identity.private_ip,
        identity.region,
    )
    active_provider = provider or AutoScalingTopologyProvider(
        etcd=etcd,
        region=config.region or identity.region,
    )
    group = active_provider.resolve_group(identity.instance_id)
    log.info("Instance %s belongs to %s", identity.instance_id, group)
    self_peer = CandidatePeer(
        identity=identity.instance_id,
        client_url=etcd.client_url(identity.private_ip),
        peer_url=etcd.peer_url(identity.private_ip),
    )
    return NodeTopology(self_peer=self_peer, group=group, provider=active_provider)
