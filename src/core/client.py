"""Client facade combining session, reconciliation and alert operations.

This module is transport-agnostic. It only relies on ports for the remote
service and the signer, so any adapter satisfying ``NotifiServicePort`` can
back it.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, List, Mapping, Optional, Sequence

from core.alerts import AlertManager
from core.auth import AuthSession, unix_timestamp
from core.broadcast import broadcast_message
from core.config import SessionConfig
from core.errors import ProtocolError
from core.mirror import DataMirror, fetch_internal_data
from core.models import (
    ROLE_USER_MESSENGER,
    Alert,
    ClientConfiguration,
    FilterOptions,
    InternalData,
    SessionState,
    Source,
    SourceGroup,
    SourceSpec,
    TargetGroup,
    TargetSpec,
    User,
    UserTopic,
)
from core.ports import ContainerPort, MessageSignerPort, NotifiServicePort
from core.reconciler import ResourceReconciler

LOGGER = logging.getLogger(__name__)


class NotifiClient:
    """Everything a dapp needs to log a wallet in and manage its alerts."""

    def __init__(
        self,
        config: SessionConfig,
        service: NotifiServicePort,
        mirror: Optional[DataMirror] = None,
        state: Optional[ContainerPort[SessionState]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.config = config
        self.service = service
        self.mirror = mirror if mirror is not None else DataMirror.full()
        self._clock = clock
        self.auth = AuthSession(config, service, self.mirror, state=state, clock=clock)
        self.reconciler = ResourceReconciler(service, self.mirror)
        self.alerts = AlertManager(service, self.reconciler, self.mirror)

    @property
    def data(self) -> Optional[InternalData]:
        """Current mirror snapshot; None until the first login refresh."""

        return self.mirror.snapshot()

    # --- Session ---

    async def begin_challenge(self) -> str:
        return await self.auth.begin_challenge()

    async def complete_challenge(self, transaction_signature: str) -> User:
        return await self.auth.complete_challenge(transaction_signature)

    async def log_in(self, signer: Optional[MessageSignerPort]) -> User:
        return await self.auth.direct_login(signer)

    def log_out(self) -> None:
        self.auth.logout()

    async def fetch_data(self) -> InternalData:
        """Fetch every collection without touching the mirror."""

        return await fetch_internal_data(self.service)

    # --- Sources and targets ---

    async def create_source(self, spec: SourceSpec) -> Source:
        return await self.reconciler.ensure_source(spec)

    async def create_metaplex_auction_source(
        self, auction_address: str, auction_web_url: str
    ) -> Source:
        return await self.reconciler.create_metaplex_auction_source(
            auction_address, auction_web_url
        )

    async def create_bonfida_auction_source(
        self, auction_address: str, auction_name: str
    ) -> Source:
        return await self.reconciler.create_bonfida_auction_source(auction_address, auction_name)

    async def ensure_source_group(self, name: str, source_ids: Sequence[str]) -> SourceGroup:
        return await self.reconciler.ensure_source_group(name, source_ids)

    async def ensure_target_group(self, name: str, spec: TargetSpec) -> TargetGroup:
        return await self.reconciler.ensure_target_group(name, spec)

    async def send_email_target_verification(self, target_id: str) -> str:
        sent_id = await self.service.send_email_target_verification_request(target_id)
        if sent_id is None:
            raise ProtocolError("Problem requesting email verification")
        return sent_id

    # --- Alerts ---

    async def create_alert(
        self,
        name: str,
        source_id: str,
        filter_id: str,
        target_spec: TargetSpec,
        filter_options: Optional[FilterOptions] = None,
        group_name: Optional[str] = None,
    ) -> Alert:
        return await self.alerts.create_alert(
            name, source_id, filter_id, filter_options, target_spec, group_name
        )

    async def update_alert(self, alert_id: str, target_spec: TargetSpec) -> Alert:
        return await self.alerts.update_alert(alert_id, target_spec)

    async def delete_alert(
        self,
        alert_id: str,
        keep_source_group: bool = False,
        keep_target_group: bool = False,
    ) -> str:
        return await self.alerts.delete_alert(alert_id, keep_source_group, keep_target_group)

    # --- Dapp and messaging ---

    async def get_configuration(self) -> ClientConfiguration:
        return await self.service.get_configuration_for_dapp(self.config.dapp_address)

    async def get_topics(self) -> List[UserTopic]:
        self.auth.require_role(ROLE_USER_MESSENGER)
        return await self.service.get_topics()

    async def broadcast_message(
        self,
        topic: UserTopic,
        subject: str,
        message: str,
        signer: Optional[MessageSignerPort],
        is_holder_only: bool = False,
        extra_variables: Optional[Mapping[str, str]] = None,
    ) -> Optional[str]:
        return await broadcast_message(
            self.service,
            self.config,
            topic,
            subject,
            message,
            is_holder_only,
            extra_variables,
            signer,
            clock=lambda: unix_timestamp(self._clock),
        )
