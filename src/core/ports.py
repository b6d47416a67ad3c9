"""Ports (interfaces) used by the core.

Ports define the minimal contracts for the remote service, the wallet signer
and the state containers so that the core can be reused with different
backends.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Sequence, TypeVar

from core.models import (
    Alert,
    ClientConfiguration,
    EmailTarget,
    SmsTarget,
    Source,
    SourceGroup,
    SourceSpec,
    TargetGroup,
    TelegramTarget,
    User,
    UserTopic,
)

T = TypeVar("T")


class NotifiServicePort(Protocol):
    """Remote service operations required by the core."""

    def set_jwt(self, token: Optional[str]) -> None:
        ...

    async def begin_log_in_by_transaction(
        self, *, wallet_address: str, wallet_blockchain: str, dapp_address: str
    ) -> Optional[str]:
        ...

    async def complete_log_in_by_transaction(
        self,
        *,
        wallet_address: str,
        wallet_blockchain: str,
        dapp_address: str,
        random_uuid: str,
        transaction_signature: str,
    ) -> User:
        ...

    async def log_in_from_dapp(
        self, *, wallet_public_key: str, dapp_address: str, timestamp: int, signature: str
    ) -> User:
        ...

    async def get_alerts(self) -> List[Alert]:
        ...

    async def get_sources(self) -> List[Source]:
        ...

    async def get_source_groups(self) -> List[SourceGroup]:
        ...

    async def get_target_groups(self) -> List[TargetGroup]:
        ...

    async def get_email_targets(self) -> List[EmailTarget]:
        ...

    async def get_sms_targets(self) -> List[SmsTarget]:
        ...

    async def get_telegram_targets(self) -> List[TelegramTarget]:
        ...

    async def create_alert(
        self,
        *,
        name: str,
        source_group_id: str,
        filter_id: str,
        filter_options: str,
        target_group_id: str,
        group_name: str,
    ) -> Alert:
        ...

    async def delete_alert(self, alert_id: str) -> Optional[str]:
        ...

    async def create_source(self, spec: SourceSpec) -> Source:
        ...

    async def create_source_group(self, *, name: str, source_ids: Sequence[str]) -> SourceGroup:
        ...

    async def update_source_group(
        self, *, id: str, name: str, source_ids: Sequence[str]
    ) -> SourceGroup:
        ...

    async def delete_source_group(self, group_id: str) -> Optional[str]:
        ...

    async def create_target_group(
        self,
        *,
        name: str,
        email_target_ids: Sequence[str],
        sms_target_ids: Sequence[str],
        telegram_target_ids: Sequence[str],
    ) -> TargetGroup:
        ...

    async def update_target_group(
        self,
        *,
        id: str,
        name: str,
        email_target_ids: Sequence[str],
        sms_target_ids: Sequence[str],
        telegram_target_ids: Sequence[str],
    ) -> TargetGroup:
        ...

    async def delete_target_group(self, group_id: str) -> Optional[str]:
        ...

    async def create_email_target(self, *, name: str, value: str) -> EmailTarget:
        ...

    async def create_sms_target(self, *, name: str, value: str) -> SmsTarget:
        ...

    async def create_telegram_target(self, *, name: str, value: str) -> TelegramTarget:
        ...

    async def send_email_target_verification_request(self, target_id: str) -> Optional[str]:
        ...

    async def get_configuration_for_dapp(self, dapp_address: str) -> ClientConfiguration:
        ...

    async def get_topics(self) -> List[UserTopic]:
        ...

    async def broadcast_message(
        self,
        *,
        topic_name: str,
        target_templates: Optional[Dict[str, str]],
        timestamp: int,
        variables: Dict[str, str],
        wallet_blockchain: str,
        signature: str,
    ) -> Optional[str]:
        ...


class MessageSignerPort(Protocol):
    """Wallet capability that signs arbitrary bytes."""

    async def sign_message(self, message: bytes) -> bytes:
        ...


class ContainerPort(Protocol[T]):
    """Single-slot read/replace state holder."""

    def get(self) -> T:
        ...

    def replace(self, value: T) -> None:
        ...
