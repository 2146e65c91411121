"""
Error taxonomy for vitalgraph.

Every error carries the HTTP status and machine-readable code the API
layer should surface, so callers outside the HTTP layer can still branch
on ``code`` without knowing about transport.
"""

from __future__ import annotations


class VitalgraphError(Exception):
    """Base error for all recoverable and non-recoverable core failures."""

    status_code: int = 500
    default_code: str = "internal_error"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code

    def with_prefix(self, prefix: str) -> "VitalgraphError":
        """
        Return a copy of this error whose message is prefixed with
        positional context, e.g. ``metrics[2]: ``.
        """
        return type(self)(f"{prefix}{self.message}", self.code)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(VitalgraphError):
    """Unknown graph node, edge, intervention or version."""

    status_code = 404
    default_code = "not_found"


class ConflictError(VitalgraphError):
    """Duplicate id on creation."""

    status_code = 409
    default_code = "conflict"


class InvalidEndpointsError(VitalgraphError):
    """Edge references a node absent from the merged node set."""

    status_code = 400
    default_code = "graph_edge_invalid_nodes"


class ValidationError(VitalgraphError):
    """Malformed create or import payload."""

    status_code = 400
    default_code = "invalid_payload"


class ConcurrencyFailure(VitalgraphError):
    """
    The relational backend could not lock or commit the state row.

    The mutation was rolled back; the caller is expected to retry.
    """

    status_code = 503
    default_code = "state_concurrency_failure"


class StateStoreError(VitalgraphError):
    """Backend I/O failure; the current mutation was aborted without writing."""

    status_code = 500
    default_code = "state_store_failure"


__all__ = [
    "VitalgraphError",
    "NotFoundError",
    "ConflictError",
    "InvalidEndpointsError",
    "ValidationError",
    "ConcurrencyFailure",
    "StateStoreError",
]
