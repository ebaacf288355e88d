"""etcd members API adapter."""

from __future__ import annotations

from .client import EtcdMembersClient, HttpMemberMutator
from .schema import AddMemberRequest, MemberPayload, MembersResponse
from .translator import translate_member, translate_members

__all__ = [
    "AddMemberRequest",
    "EtcdMembersClient",
    "HttpMemberMutator",
    "MemberPayload",
    "MembersResponse",
    "translate_member",
    "translate_members",
]
