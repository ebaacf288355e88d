"""Configuration types for bounded HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_TIMEOUT_SECONDS = 5.0


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    """Per-client HTTP settings.

    Requests are sent exactly once; ``timeout_seconds`` bounds every call.
    """

    name: str
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    default_headers: Mapping[str, str] | None = None
