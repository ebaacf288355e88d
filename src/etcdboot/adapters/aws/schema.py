"""Pydantic models for the EC2 instance identity document."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class InstanceIdentityDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    instance_id: str = Field(alias="instanceId", min_length=1)
    region: str = Field(min_length=1)
    private_ip: str = Field(alias="privateIp", min_length=1)
