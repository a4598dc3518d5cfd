"""votesession - bind a wallet to a voting contract and resolve its role."""

from .errors import FailureKind, SessionFailure
from .session import Role, SessionAssembler, SessionResult, SessionState, establish_session

__version__ = "0.1.0"

__all__ = [
    "FailureKind",
    "Role",
    "SessionAssembler",
    "SessionFailure",
    "SessionResult",
    "SessionState",
    "establish_session",
]
