"""Presentation helpers derived from session values."""

from __future__ import annotations

ELLIPSIS = "..."


def display_address(address: str) -> str:
    """Shorten an account address to ``0xABCD...EF12`` form.

    Cosmetic only: never compare or authorize on the result.
    """

    return f"{address[:6]}{ELLIPSIS}{address[-4:]}"
