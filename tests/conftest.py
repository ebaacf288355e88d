from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from etcdboot.adapters.http_resilience import ResilientClient
from etcdboot.config.etcd import EtcdConfig
from etcdboot.domain.types import CandidatePeer, Member

if TYPE_CHECKING:
    from collections.abc import Callable

    from etcdboot.config.http_resilience import ResilienceConfig


def _peer(identity: str, ip: str) -> CandidatePeer:
    return CandidatePeer(
        identity=identity,
        client_url=f"http://{ip}:2379",
        peer_url=f"http://{ip}:2380",
    )


@pytest.fixture
def peer_a() -> CandidatePeer:
    return _peer("A", "10.0.0.1")


@pytest.fixture
def peer_b() -> CandidatePeer:
    return _peer("B", "10.0.0.2")


@pytest.fixture
def peer_c() -> CandidatePeer:
    return _peer("C", "10.0.0.3")


@pytest.fixture
def fleet(
    peer_a: CandidatePeer,
    peer_b: CandidatePeer,
    peer_c: CandidatePeer,
) -> list[CandidatePeer]:
    return [peer_a, peer_b, peer_c]


@pytest.fixture
def dead_member() -> Member:
    return Member(member_id="dead01", name="X-dead", peer_urls=("http://10.0.0.9:2380",))


@pytest.fixture
def etcd_config() -> EtcdConfig:
    return EtcdConfig()


@pytest.fixture
def mock_client_factory() -> Callable[
    [Callable[[httpx.Request], httpx.Response]],
    Callable[[ResilienceConfig], ResilientClient],
]:
    def build(
        handler: Callable[[httpx.Request], httpx.Response],
    ) -> Callable[[ResilienceConfig], ResilientClient]:
        async def async_handler(request: httpx.Request) -> httpx.Response:
            return handler(request)

        def factory(resilience: ResilienceConfig) -> ResilientClient:
            return ResilientClient(resilience, transport=httpx.MockTransport(async_handler))

        return factory

    return build
