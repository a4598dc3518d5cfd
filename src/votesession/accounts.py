"""Account enumeration against a located provider."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from loguru import logger

from votesession.errors import AccountAccessDenied, NoActiveAccount


async def resolve_accounts(provider: Any) -> tuple[str, ...]:
    """Ask the provider for the addresses the user authorized.

    The result may be empty but is never ``None``. A refusal from the
    provider surfaces as ``AccountAccessDenied``.
    """

    try:
        accounts = await provider.eth.accounts
    except Exception as exc:
        raise AccountAccessDenied(f"provider refused account access: {exc}", cause=exc) from exc

    if accounts is None:
        return ()
    if isinstance(accounts, (str, bytes)) or not isinstance(accounts, Sequence):
        raise AccountAccessDenied(f"provider returned malformed accounts: {accounts!r}")
    if not all(isinstance(account, str) for account in accounts):
        raise AccountAccessDenied(f"provider returned non-string accounts: {accounts!r}")

    logger.debug("accounts.resolved count={}", len(accounts))
    return tuple(accounts)


def active_account_of(accounts: tuple[str, ...]) -> str:
    if not accounts:
        raise NoActiveAccount("provider authorized no account")
    return accounts[0]
