"""Bootstrap error taxonomy.

Every exception in this module is fatal for the current invocation: the caller
must not start etcd after catching one. Transient probe failures and
idempotent-success statuses never raise.
"""

from __future__ import annotations


class BootstrapError(RuntimeError):
    """Base class for conditions that abort the bootstrap run."""


class PreconditionError(BootstrapError):
    """Raised before any membership change when the inputs cannot be used."""


class EmptyFleetError(PreconditionError):
    """Raised when the topology provider reports no in-service peers."""


class SelfNotInFleetError(PreconditionError):
    """Raised when this node is not one of the fleet candidates."""


class TopologyError(PreconditionError):
    """Raised when the fleet or this node's place in it cannot be resolved."""


class InstanceIdentityError(TopologyError):
    """Raised when the instance identity document cannot be read."""


class UnsafeMembershipError(BootstrapError):
    """Raised when continuing could corrupt the cluster or its quorum."""


class MemberMutationError(UnsafeMembershipError):
    """Raised when an add or remove call fails with a non-idempotent outcome."""

    def __init__(
        self,
        action: str,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> None:
        message = f"{action} failed: {detail}"
        if status_code is not None:
            message = f"{action} failed with HTTP {status_code}: {detail}"
        super().__init__(message)
        self.action = action
        self.detail = detail
        self.status_code = status_code


class InvalidMemberListError(UnsafeMembershipError):
    """Raised when the final member list would produce a malformed initial cluster."""


__all__ = [
    "BootstrapError",
    "EmptyFleetError",
    "InstanceIdentityError",
    "InvalidMemberListError",
    "MemberMutationError",
    "PreconditionError",
    "SelfNotInFleetError",
    "TopologyError",
    "UnsafeMembershipError",
]
