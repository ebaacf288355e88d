"""Translate etcd members payloads into domain members."""

from __future__ import annotations

from typing import TYPE_CHECKING

from etcdboot.domain.types import Member

from .schema import MemberPayload, MembersResponse

if TYPE_CHECKING:
    from collections.abc import Mapping


def translate_member(payload: MemberPayload | Mapping[str, object]) -> Member:
    model = (
        payload if isinstance(payload, MemberPayload) else MemberPayload.model_validate(payload)
    )
    return Member(
        member_id=model.id,
        name=model.name.strip(),
        peer_urls=tuple(url.strip() for url in model.peer_urls if url.strip()),
        client_urls=tuple(url.strip() for url in model.client_urls if url.strip()),
    )


def translate_members(payload: MembersResponse | Mapping[str, object]) -> tuple[Member, ...]:
    model = (
        payload if isinstance(payload, MembersResponse) else MembersResponse.model_validate(payload)
    )
    return tuple(translate_member(item) for item in model.members)
