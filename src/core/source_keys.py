"""Helpers for building natural keys of sources and targets."""

from __future__ import annotations

from typing import Optional, Tuple

AUCTION_SEPARATOR = ":;:"


def build_auction_address(prefix: str, auction_address: str) -> str:
    """Return the underlying blockchain address stored for an auction source.

    ``prefix`` is the auction web url (Metaplex) or the auction name (Bonfida).
    """

    return f"{prefix}{AUCTION_SEPARATOR}{auction_address}"


def split_auction_address(blockchain_address: str) -> Tuple[Optional[str], str]:
    """Split an auction address into (prefix, auction_address)."""

    if AUCTION_SEPARATOR not in blockchain_address:
        return None, blockchain_address
    prefix, _, auction_address = blockchain_address.partition(AUCTION_SEPARATOR)
    return prefix, auction_address


def normalize_email(value: Optional[str]) -> Optional[str]:
    """Email targets are matched case-insensitively."""

    if value is None:
        return None
    return value.lower()

