"""Application-level exception types for votesession."""

from __future__ import annotations

from enum import StrEnum


class VoteSessionError(Exception):
    """Base exception for votesession."""


class ConfigurationError(VoteSessionError):
    """Raised when configuration or a build artifact cannot be used."""


class FailureKind(StrEnum):
    """Kinds of terminal failure for one session establishment run."""

    NO_PROVIDER_AVAILABLE = "NoProviderAvailable"
    ACCOUNT_ACCESS_DENIED = "AccountAccessDenied"
    NO_ACTIVE_ACCOUNT = "NoActiveAccount"
    INVALID_CONTRACT_BINDING = "InvalidContractBinding"
    CONTRACT_QUERY_FAILED = "ContractQueryFailed"


class SessionFailure(VoteSessionError):
    """Tagged failure of one stage; terminal for the run that raised it."""

    kind: FailureKind

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind.value!r}, message={str(self)!r}, cause={self.cause!r})"


class NoProviderAvailable(SessionFailure):
    """Raised when neither an injected nor a fallback provider is usable."""

    kind = FailureKind.NO_PROVIDER_AVAILABLE


class AccountAccessDenied(SessionFailure):
    """Raised when the provider refuses to enumerate accounts."""

    kind = FailureKind.ACCOUNT_ACCESS_DENIED


class NoActiveAccount(SessionFailure):
    """Raised when the provider authorized no account at all."""

    kind = FailureKind.NO_ACTIVE_ACCOUNT


class InvalidContractBinding(SessionFailure):
    """Raised when the contract address or interface description is malformed."""

    kind = FailureKind.INVALID_CONTRACT_BINDING


class ContractQueryFailed(SessionFailure):
    """Raised when the owner query against the contract fails."""

    kind = FailureKind.CONTRACT_QUERY_FAILED
