"""EC2 instance metadata (IMDS) lookups."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from etcdboot.adapters.http_resilience import ResilientClient, default_client_factory
from etcdboot.domain.errors import InstanceIdentityError

from .schema import InstanceIdentityDocument

if TYPE_CHECKING:
    from collections.abc import Callable

    from etcdboot.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

TOKEN_PATH = "/latest/api/token"
IDENTITY_DOCUMENT_PATH = "/latest/dynamic/instance-identity/document"
TOKEN_TTL_HEADER = "X-aws-ec2-metadata-token-ttl-seconds"
TOKEN_HEADER = "X-aws-ec2-metadata-token"
TOKEN_TTL_SECONDS = 60


def fetch_instance_identity(
    resilience: ResilienceConfig,
    *,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> InstanceIdentityDocument:
    """Read this instance's identity document, preferring an IMDSv2 session token."""

    factory = client_factory or default_client_factory
    return asyncio.run(_fetch_instance_identity_async(resilience, factory))


async def _fetch_instance_identity_async(
    resilience: ResilienceConfig,
    factory: Callable[[ResilienceConfig], ResilientClient],
) -> InstanceIdentityDocument:
    async with factory(resilience) as client:
        headers: dict[str, str] = {}
        token = await _request_token(client)
        if token:
            headers[TOKEN_HEADER] = token
        try:
            response = await client.get(IDENTITY_DOCUMENT_PATH, headers=headers)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise InstanceIdentityError(f"Unable to load instance identity: {exc!r}") from exc

    try:
        return InstanceIdentityDocument.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise InstanceIdentityError(f"Unexpected instance identity document: {exc}") from exc


async def _request_token(client: ResilientClient) -> str | None:
    try:
        response = await client.put(
            TOKEN_PATH,
            headers={TOKEN_TTL_HEADER: str(TOKEN_TTL_SECONDS)},
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        log.debug("IMDSv2 token request failed, falling back to IMDSv1: %r", exc)
        return None
    if not response.is_success:
        log.debug("IMDSv2 token request returned HTTP %s", response.status_code)
        return None
    return response.text.strip() or None
