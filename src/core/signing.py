"""Signing primitives shared by login and broadcast.

The disclosure text is part of every signed payload so that a wallet's
signing prompt always shows the same human-auditable statement.
"""

from __future__ import annotations

import base64
import hashlib
import logging
import uuid
from typing import Optional

from core.errors import SigningError
from core.ports import MessageSignerPort

LOGGER = logging.getLogger(__name__)

SIGNING_MESSAGE = """Sign in with Notifi \n
    No password needed or gas is needed. \n
    Clicking “Approve” only means you have proved this wallet is owned by you! \n
    This request will not trigger any transaction or cost any gas fees. \n
    Use of our website and service is subject to our terms of service and privacy policy. \n"""

CHALLENGE_PREFIX = "Notifi Auth: 0x"


def new_client_nonce() -> str:
    """Return a random UUID4 string (122 bits of entropy)."""

    return str(uuid.uuid4())


def challenge_log_value(server_nonce: str, client_nonce: str) -> str:
    """Return the line a wallet UI shows while the user signs the login transaction."""

    digest = hashlib.sha256(f"{server_nonce}{client_nonce}".encode("utf-8")).hexdigest()
    return f"{CHALLENGE_PREFIX}{digest}"


def build_signing_payload(wallet_address: str, dapp_address: str, timestamp: int) -> bytes:
    """Return the canonical bytes a wallet signs for login and broadcast."""

    return f"{SIGNING_MESSAGE} \n 'Nonce:' {wallet_address}{dapp_address}{timestamp}".encode(
        "utf-8"
    )


async def sign_payload(
    signer: Optional[MessageSignerPort],
    wallet_address: str,
    dapp_address: str,
    timestamp: int,
) -> str:
    """Sign the canonical payload and return the base64 signature.

    Any failure inside the signer surfaces as ``SigningError`` with the
    original exception chained.
    """

    if signer is None:
        raise SigningError("No signer available")

    payload = build_signing_payload(wallet_address, dapp_address, timestamp)
    try:
        signed = await signer.sign_message(payload)
    except Exception as exc:
        raise SigningError(f"Signer failed: {exc}") from exc

    LOGGER.debug("Signed %s byte payload for %s", len(payload), wallet_address)
    return base64.b64encode(bytes(signed)).decode("ascii")
