from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest

from etcdboot.adapters.etcd import EtcdMembersClient, HttpMemberMutator
from etcdboot.domain.errors import MemberMutationError
from etcdboot.domain.ports.membership import MembersUnavailableError
from etcdboot.domain.types import Member

if TYPE_CHECKING:
    from collections.abc import Callable

    from etcdboot.adapters.http_resilience import ResilientClient
    from etcdboot.config.etcd import EtcdConfig
    from etcdboot.config.http_resilience import ResilienceConfig

    MockFactory = Callable[
        [Callable[[httpx.Request], httpx.Response]],
        Callable[[ResilienceConfig], ResilientClient],
    ]

MEMBERS_URL = "http://10.0.0.2:2379/v2/members"

MEMBERS_PAYLOAD = {
    "members": [
        {
            "id": "272e204152",
            "name": "A",
            "peerURLs": ["http://10.0.0.1:2380"],
            "clientURLs": ["http://10.0.0.1:2379"],
        },
        {
            "id": "2225373f43",
            "name": "",
            "peerURLs": ["http://10.0.0.4:2380"],
            "clientURLs": [],
        },
    ]
}


def _client(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
    handler: Callable[[httpx.Request], httpx.Response],
) -> EtcdMembersClient:
    return EtcdMembersClient(config=etcd_config, client_factory=mock_client_factory(handler))


def test_members_url_appends_v2_path(etcd_config: EtcdConfig) -> None:
    client = EtcdMembersClient(config=etcd_config)

    assert client.members_url("http://10.0.0.1:2379/") == "http://10.0.0.1:2379/v2/members"


def test_read_members_translates_payload(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url}")
        return httpx.Response(200, json=MEMBERS_PAYLOAD)

    members = _client(etcd_config, mock_client_factory, handler).read_members(MEMBERS_URL)

    assert seen == [f"GET {MEMBERS_URL}"]
    assert members == (
        Member(
            member_id="272e204152",
            name="A",
            peer_urls=("http://10.0.0.1:2380",),
            client_urls=("http://10.0.0.1:2379",),
        ),
        Member(member_id="2225373f43", name="", peer_urls=("http://10.0.0.4:2380",)),
    )


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(503, text="unavailable"),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"members": [{"peerURLs": "oops"}]}),
    ],
)
def test_read_members_failures_are_unavailable(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
    response: httpx.Response,
) -> None:
    client = _client(etcd_config, mock_client_factory, lambda _request: response)

    with pytest.raises(MembersUnavailableError):
        client.read_members(MEMBERS_URL)


def test_read_members_network_error_is_unavailable(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(MembersUnavailableError, match="request failed"):
        _client(etcd_config, mock_client_factory, handler).read_members(MEMBERS_URL)


def test_read_members_invalid_url_is_unavailable(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=MEMBERS_PAYLOAD)

    client = _client(etcd_config, mock_client_factory, handler)

    with pytest.raises(MembersUnavailableError, match="request failed"):
        client.read_members("http://fd00::1:2379/v2/members")


def test_read_members_handles_null_member_list(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    client = _client(
        etcd_config,
        mock_client_factory,
        lambda _request: httpx.Response(200, json={"members": None}),
    )

    assert client.read_members(MEMBERS_URL) == ()


@pytest.mark.parametrize(("status", "removed"), [(204, True), (404, False), (410, False)])
def test_remove_member_is_idempotent(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
    status: int,
    removed: bool,
) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url}")
        return httpx.Response(status)

    client = _client(etcd_config, mock_client_factory, handler)

    assert client.remove_member(MEMBERS_URL, "dead01") is removed
    assert seen == [f"DELETE {MEMBERS_URL}/dead01"]


def test_remove_member_failure_is_fatal(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    client = _client(
        etcd_config,
        mock_client_factory,
        lambda _request: httpx.Response(500, json={"message": "raft: stopped"}),
    )

    with pytest.raises(MemberMutationError, match="raft: stopped") as excinfo:
        client.remove_member(MEMBERS_URL, "dead01")

    assert excinfo.value.action == "member.remove"
    assert excinfo.value.status_code == 500


def test_remove_member_network_error_is_fatal(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(MemberMutationError) as excinfo:
        _client(etcd_config, mock_client_factory, handler).remove_member(MEMBERS_URL, "dead01")

    assert excinfo.value.status_code is None


def test_add_member_posts_peer_urls(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    bodies: list[object] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(
            201,
            json={"id": "3777296169", "name": "", "peerURLs": ["http://10.0.0.3:2380"]},
        )

    added = _client(etcd_config, mock_client_factory, handler).add_member(
        MEMBERS_URL, "http://10.0.0.3:2380"
    )

    assert bodies == [{"peerURLs": ["http://10.0.0.3:2380"]}]
    assert added.member_id == "3777296169"
    assert added.peer_urls == ("http://10.0.0.3:2380",)


def test_add_member_conflict_is_success(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    client = _client(
        etcd_config,
        mock_client_factory,
        lambda _request: httpx.Response(409, json={"message": "peerURL exists"}),
    )

    added = client.add_member(MEMBERS_URL, "http://10.0.0.3:2380")

    assert added == Member(peer_urls=("http://10.0.0.3:2380",))


@pytest.mark.parametrize("status", [200, 400, 500])
def test_add_member_other_statuses_are_fatal(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
    status: int,
) -> None:
    client = _client(
        etcd_config,
        mock_client_factory,
        lambda _request: httpx.Response(status, text="nope"),
    )

    with pytest.raises(MemberMutationError) as excinfo:
        client.add_member(MEMBERS_URL, "http://10.0.0.3:2380")

    assert excinfo.value.action == "member.add"
    assert excinfo.value.status_code == status


def test_mutator_is_bound_to_authority(
    etcd_config: EtcdConfig,
    mock_client_factory: MockFactory,
) -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(f"{request.method} {request.url}")
        if request.method == "GET":
            return httpx.Response(200, json={"members": []})
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(201, json={"id": "c1", "peerURLs": ["http://10.0.0.3:2380"]})

    mutator = HttpMemberMutator(
        MEMBERS_URL,
        client=_client(etcd_config, mock_client_factory, handler),
    )

    assert mutator.list_members() == ()
    mutator.remove_member("dead01")
    assert mutator.add_member("http://10.0.0.3:2380").member_id == "c1"
    assert seen == [
        f"GET {MEMBERS_URL}",
        f"DELETE {MEMBERS_URL}/dead01",
        f"POST {MEMBERS_URL}",
    ]
