"""Local construction of the voting contract handle."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from eth_utils import is_address, to_checksum_address
from loguru import logger

from votesession.artifacts import Interface, find_function, is_read_only
from votesession.errors import InvalidContractBinding

type ContractHandle = Any


def validate_interface(interface: Interface, *, owner_method: str) -> None:
    """Check the ABI shape and that the owner query is a read-only function."""

    if not interface:
        raise InvalidContractBinding("interface description is empty")
    for index, entry in enumerate(interface):
        if not isinstance(entry, Mapping) or not isinstance(entry.get("type"), str):
            raise InvalidContractBinding(f"interface entry {index} has no type")

    owner_entry = find_function(interface, owner_method)
    if owner_entry is None:
        raise InvalidContractBinding(f"interface does not declare {owner_method}()")
    if not is_read_only(owner_entry):
        raise InvalidContractBinding(f"{owner_method}() is not a read-only method")


def bind_contract(provider: Any, address: str, interface: Interface, *, owner_method: str = "owner") -> ContractHandle:
    """Build a contract handle. No network call is made."""

    if not isinstance(address, str) or not is_address(address):
        raise InvalidContractBinding(f"malformed contract address: {address!r}")
    validate_interface(interface, owner_method=owner_method)

    checksum_address = to_checksum_address(address)
    try:
        handle = provider.eth.contract(address=checksum_address, abi=list(interface))
    except Exception as exc:
        raise InvalidContractBinding(f"cannot bind contract at {checksum_address}: {exc}", cause=exc) from exc

    logger.debug("contract.bound address={} entries={}", checksum_address, len(interface))
    return handle
