"""Domain exceptions raised by the service layer."""
from __future__ import annotations


class TransferAgentError(RuntimeError):
    """Base exception for service errors."""


class NotFoundError(TransferAgentError):
    """Raised when a requested record does not exist."""


class ValidationFailure(TransferAgentError):
    """Raised when a request payload is missing data or conflicts with stored rows."""


class IssuerAccessDenied(TransferAgentError):
    """Raised when the caller holds no sufficient role on the issuer."""


class ProviderError(TransferAgentError):
    """Raised when the auth provider or object storage rejects a call."""


__all__ = [
    "IssuerAccessDenied",
    "NotFoundError",
    "ProviderError",
    "TransferAgentError",
    "ValidationFailure",
]
