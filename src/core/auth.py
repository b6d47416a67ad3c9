"""Challenge/response and direct-signature login for a wallet session.

States: anonymous -> challenge issued -> authenticated, plus a direct
anonymous -> authenticated path when the caller holds a message signer.
Only one challenge may be outstanding; its nonce is single use.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from typing import Callable, Optional, Tuple

from core.config import SessionConfig
from core.errors import InvalidArgumentError, ProtocolError, SequenceError, UnauthorizedError
from core.mirror import DataMirror, MemoryContainer, fetch_internal_data
from core.models import InternalData, SessionState, User
from core.ports import ContainerPort, MessageSignerPort, NotifiServicePort
from core.signing import challenge_log_value, new_client_nonce, sign_payload

LOGGER = logging.getLogger(__name__)


def unix_timestamp(clock: Callable[[], float] = time.time) -> int:
    return round(clock())


class AuthSession:
    """Owns the session state and keeps the service's bearer token in sync."""

    def __init__(
        self,
        config: SessionConfig,
        service: NotifiServicePort,
        mirror: DataMirror,
        state: Optional[ContainerPort[SessionState]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._service = service
        self._mirror = mirror
        self._state: ContainerPort[SessionState] = (
            state if state is not None else MemoryContainer(SessionState())
        )
        self._clock = clock

    @property
    def state(self) -> SessionState:
        return self._state.get()

    @property
    def token(self) -> Optional[str]:
        return self._state.get().token

    @property
    def roles(self) -> Tuple[str, ...]:
        return self._state.get().roles

    @property
    def pending_nonce(self) -> Optional[str]:
        return self._state.get().client_random_uuid

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    def _update_state(self, **changes) -> None:
        self._state.replace(dataclasses.replace(self._state.get(), **changes))

    async def begin_challenge(self) -> str:
        """Request a server nonce and return the line the wallet displays.

        Any previous pending challenge is silently discarded.
        """

        server_nonce = await self._service.begin_log_in_by_transaction(
            wallet_address=self._config.wallet_address,
            wallet_blockchain=self._config.wallet_blockchain,
            dapp_address=self._config.dapp_address,
        )
        if server_nonce is None:
            raise ProtocolError("Failed to begin login process: no nonce returned")

        client_nonce = new_client_nonce()
        log_value = challenge_log_value(server_nonce, client_nonce)
        self._update_state(client_random_uuid=client_nonce)
        LOGGER.info("Login challenge issued for %s", self._config.wallet_address)
        return log_value

    async def complete_challenge(self, transaction_signature: str) -> User:
        """Exchange the signed transaction for a session token."""

        client_nonce = self.pending_nonce
        if client_nonce is None:
            raise SequenceError("Must call begin_challenge before complete_challenge")

        try:
            user = await self._service.complete_log_in_by_transaction(
                wallet_address=self._config.wallet_address,
                wallet_blockchain=self._config.wallet_blockchain,
                dapp_address=self._config.dapp_address,
                random_uuid=client_nonce,
                transaction_signature=transaction_signature,
            )
        finally:
            # The nonce is consumed whether or not the server accepted it.
            self._update_state(client_random_uuid=None)

        await self._handle_login_result(user)
        return user

    async def direct_login(self, signer: Optional[MessageSignerPort]) -> User:
        """Log in by signing the canonical payload with the wallet."""

        if signer is None:
            raise InvalidArgumentError("Signer cannot be None")

        timestamp = unix_timestamp(self._clock)
        signature = await sign_payload(
            signer,
            self._config.wallet_address,
            self._config.dapp_address,
            timestamp,
        )
        user = await self._service.log_in_from_dapp(
            wallet_public_key=self._config.wallet_address,
            dapp_address=self._config.dapp_address,
            timestamp=timestamp,
            signature=signature,
        )
        await self._handle_login_result(user)
        return user

    def logout(self) -> None:
        """Drop the token everywhere and mark the mirror as absent."""

        self._service.set_jwt(None)
        self._mirror.clear()
        self._update_state(token=None, roles=())
        LOGGER.info("Logged out %s", self._config.wallet_address)

    def require_role(self, role: str) -> None:
        """Fail locally when the session lacks ``role``."""

        if role not in self.roles:
            raise UnauthorizedError(f"This user is not authorized: missing role {role}")

    async def refresh(self) -> InternalData:
        """Fetch every collection and load it into the mirror."""

        data = await fetch_internal_data(self._service)
        self._mirror.load(data)
        return data

    async def _handle_login_result(self, user: User) -> None:
        token = user.authorization.token if user.authorization is not None else None
        roles = tuple(user.roles) if user.roles is not None else ()
        self._update_state(token=token, roles=roles)
        self._service.set_jwt(token)

        if token is None:
            LOGGER.warning("Login for %s returned no token", self._config.wallet_address)
        else:
            LOGGER.info(
                "Logged in %s with roles: %s",
                self._config.wallet_address,
                ", ".join(roles) or "none",
            )

        await self.refresh()
