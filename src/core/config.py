"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WALLET_BLOCKCHAIN = "SOLANA"


@dataclass(frozen=True)
class SessionConfig:
    """Identity of the wallet and dapp a session acts for."""

    dapp_address: str
    wallet_address: str
    wallet_blockchain: str = DEFAULT_WALLET_BLOCKCHAIN
