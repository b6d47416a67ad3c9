"""Interactive wallet login via the transaction challenge."""

from __future__ import annotations

import asyncio
import logging
import os

from core.client import NotifiClient
from core.errors import UnauthorizedError
from core.models import User


def _resolve_transaction_signature() -> str:
    signature = os.getenv("NOTIFI_TX_SIGNATURE")
    if signature:
        return signature
    return input("Transaction signature: ").strip()


async def authorize(client: NotifiClient) -> User:
    """Run begin/complete challenge, prompting for the signed transaction."""

    log_value = await client.begin_challenge()
    print("")
    print("Include this line in a memo transaction signed by your wallet:")
    print(log_value)
    print("")
    user = await client.complete_challenge(_resolve_transaction_signature())
    if not client.auth.is_authenticated:
        raise UnauthorizedError("Login was rejected by the server")
    return user


async def main() -> None:
    from client import build_client

    client = build_client()
    try:
        user = await authorize(client)
        logging.info("Logged in as: %s", user.email or client.config.wallet_address)
    finally:
        client.log_out()
        await client.service.close()


if __name__ == "__main__":
    asyncio.run(main())
