"""Pydantic models describing the etcd v2 members API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _normalize_member_id(value: object) -> object:
    if isinstance(value, int) and not isinstance(value, bool):
        return format(value, "x")
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _none_to_empty(value: object) -> object:
    return [] if value is None else value


class EtcdBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class MemberPayload(EtcdBaseModel):
    id: str | None = None
    name: str = ""
    peer_urls: list[str] = Field(default_factory=list, alias="peerURLs")
    client_urls: list[str] = Field(default_factory=list, alias="clientURLs")

    _normalize_id = field_validator("id", mode="before")(_normalize_member_id)
    _normalize_peer_urls = field_validator("peer_urls", "client_urls", mode="before")(
        _none_to_empty
    )

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_name(cls, value: object) -> object:
        return "" if value is None else value


class MembersResponse(EtcdBaseModel):
    members: list[MemberPayload] = Field(default_factory=list)

    _normalize_members = field_validator("members", mode="before")(_none_to_empty)


class AddMemberRequest(EtcdBaseModel):
    peer_urls: list[str] = Field(alias="peerURLs")

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)
