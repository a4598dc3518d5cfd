"""Owner-versus-voter classification of the active account."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from votesession.errors import ContractQueryFailed


@dataclass(frozen=True)
class RoleCheck:
    """Outcome of one owner query."""

    owner_address: str
    is_owner: bool


def same_address(left: str, right: str) -> bool:
    """Compare two hex addresses ignoring checksum casing."""

    return left.lower() == right.lower()


async def resolve_role(contract: Any, active_account: str, *, method: str = "owner") -> RoleCheck:
    """Issue one read-only owner query and compare it to ``active_account``."""

    try:
        owner = await getattr(contract.functions, method)().call()
    except Exception as exc:
        raise ContractQueryFailed(f"{method}() call failed: {exc}", cause=exc) from exc

    if not isinstance(owner, str):
        raise ContractQueryFailed(f"{method}() returned a non-address value: {owner!r}")

    is_owner = same_address(active_account, owner)
    logger.debug("role.resolved owner={} is_owner={}", owner, is_owner)
    return RoleCheck(owner_address=owner, is_owner=is_owner)
