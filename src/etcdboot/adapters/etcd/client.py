"""HTTP client for the etcd v2 members API."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from etcdboot.adapters.http_resilience import ResilientClient, default_client_factory
from etcdboot.domain.errors import MemberMutationError
from etcdboot.domain.ports.membership import MembersUnavailableError
from etcdboot.domain.types import Member

from .schema import AddMemberRequest, MemberPayload, MembersResponse
from .translator import translate_member, translate_members

if TYPE_CHECKING:
    from collections.abc import Callable

    from etcdboot.config.etcd import EtcdConfig
    from etcdboot.config.http_resilience import ResilienceConfig
    from etcdboot.domain.types import MemberId, PeerURL

log = getLogger(__name__)

_REMOVED_STATUSES = frozenset({httpx.codes.NO_CONTENT})
_ALREADY_REMOVED_STATUSES = frozenset({httpx.codes.NOT_FOUND, httpx.codes.GONE})
_DETAIL_LIMIT = 300


def _response_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:_DETAIL_LIMIT] or response.reason_phrase
    if isinstance(payload, dict):
        message = payload.get("message")
        if isinstance(message, str) and message:
            return message
    return str(payload)[:_DETAIL_LIMIT]


class EtcdMembersClient:
    """Low-level client for ``/v2/members``; each call is sent exactly once."""

    def __init__(
        self,
        *,
        config: EtcdConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or default_client_factory

    def members_url(self, client_url: str) -> str:
        return client_url.rstrip("/") + self._config.members_path

    def read_members(self, members_url: str) -> tuple[Member, ...]:
        return asyncio.run(self._read_members_async(members_url))

    def remove_member(self, members_url: str, member_id: MemberId) -> bool:
        """Delete a member; return ``False`` when it was already gone."""

        return asyncio.run(self._remove_member_async(members_url, member_id))

    def add_member(self, members_url: str, peer_url: PeerURL) -> Member:
        return asyncio.run(self._add_member_async(members_url, peer_url))

    async def _read_members_async(self, members_url: str) -> tuple[Member, ...]:
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.get(members_url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise MembersUnavailableError(f"request failed: {exc!r}") from exc

        if not response.is_success:
            raise MembersUnavailableError(f"HTTP {response.status_code}")
        try:
            payload = MembersResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise MembersUnavailableError(f"unexpected member list payload: {exc}") from exc
        return translate_members(payload)

    async def _remove_member_async(self, members_url: str, member_id: MemberId) -> bool:
        url = f"{members_url.rstrip('/')}/{member_id}"
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.delete(url)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise MemberMutationError("member.remove", f"{member_id}: {exc!r}") from exc

        if response.status_code in _REMOVED_STATUSES:
            return True
        if response.status_code in _ALREADY_REMOVED_STATUSES:
            log.info("Member %s already removed (HTTP %s)", member_id, response.status_code)
            return False
        raise MemberMutationError(
            "member.remove",
            f"{member_id}: {_response_detail(response)}",
            status_code=response.status_code,
        )

    async def _add_member_async(self, members_url: str, peer_url: PeerURL) -> Member:
        body = AddMemberRequest(peer_urls=[peer_url]).to_payload()
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.post(members_url, json=body)
            except (httpx.HTTPError, httpx.InvalidURL) as exc:
                raise MemberMutationError("member.add", f"{peer_url}: {exc!r}") from exc

        if response.status_code == httpx.codes.CONFLICT:
            log.info("Peer URL %s already registered; treating add as done", peer_url)
            return Member(peer_urls=(peer_url,))
        if response.status_code != httpx.codes.CREATED:
            raise MemberMutationError(
                "member.add",
                f"{peer_url}: {_response_detail(response)}",
                status_code=response.status_code,
            )
        try:
            added = translate_member(MemberPayload.model_validate(response.json()))
        except (ValueError, ValidationError) as exc:
            log.warning("Member added but response body was unreadable: %s", exc)
            return Member(peer_urls=(peer_url,))
        log.info("Added member %s for %s", added.member_id, peer_url)
        return added


class HttpMemberMutator:
    """``MemberMutator`` bound to the authority endpoint of a found cluster."""

    def __init__(self, authority_url: str, *, client: EtcdMembersClient) -> None:
        self.authority_url = authority_url
        self._client = client

    def list_members(self) -> tuple[Member, ...]:
        """Re-read the authority's member list.

        The bootstrap flow works from the probed list and does not call this;
        it completes the ``MemberMutator`` interface for callers that need a
        fresh read after mutating.
        """

        return self._client.read_members(self.authority_url)

    def remove_member(self, member_id: MemberId) -> None:
        self._client.remove_member(self.authority_url, member_id)

    def add_member(self, peer_url: PeerURL) -> Member:
        return self._client.add_member(self.authority_url, peer_url)

