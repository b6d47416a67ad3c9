"""In-memory fakes for the core ports."""

from __future__ import annotations

import itertools
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from core.models import (
    Alert,
    Authorization,
    ClientConfiguration,
    EmailTarget,
    Filter,
    SmsTarget,
    Source,
    SourceGroup,
    SourceSpec,
    TargetGroup,
    TelegramTarget,
    User,
    UserTopic,
)


class FakeNotifiService:
    """Records every call and keeps server state in plain lists."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.call_args: Dict[str, List[dict]] = defaultdict(list)
        self.failures: Dict[str, Exception] = {}
        self.jwt: Optional[str] = None
        self.nonce: Optional[str] = "server-nonce"
        self.user = User(authorization=Authorization(token="jwt-token"), roles=("UserMessenger",))
        self.topics: List[UserTopic] = []
        self.configuration = ClientConfiguration(supported_sms_country_codes=("US", "CA"))
        self.broadcast_id: Optional[str] = "message-1"
        self.verification_id: Optional[str] = "verification-1"

        self.alerts: List[Alert] = []
        self.sources: List[Source] = []
        self.source_groups: List[SourceGroup] = []
        self.target_groups: List[TargetGroup] = []
        self.email_targets: List[EmailTarget] = []
        self.sms_targets: List[SmsTarget] = []
        self.telegram_targets: List[TelegramTarget] = []
        self._ids = itertools.count(1)

    def _record(self, operation: str, /, **kwargs) -> None:
        self.calls.append(operation)
        self.call_args[operation].append(kwargs)
        failure = self.failures.get(operation)
        if failure is not None:
            raise failure

    def _next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def count(self, name: str) -> int:
        return self.calls.count(name)

    def set_jwt(self, token: Optional[str]) -> None:
        self.calls.append("set_jwt")
        self.jwt = token

    # --- Login ---

    async def begin_log_in_by_transaction(self, **kwargs) -> Optional[str]:
        self._record("begin_log_in_by_transaction", **kwargs)
        return self.nonce

    async def complete_log_in_by_transaction(self, **kwargs) -> User:
        self._record("complete_log_in_by_transaction", **kwargs)
        return self.user

    async def log_in_from_dapp(self, **kwargs) -> User:
        self._record("log_in_from_dapp", **kwargs)
        return self.user

    # --- Collections ---

    async def get_alerts(self) -> List[Alert]:
        self._record("get_alerts")
        return list(self.alerts)

    async def get_sources(self) -> List[Source]:
        self._record("get_sources")
        return list(self.sources)

    async def get_source_groups(self) -> List[SourceGroup]:
        self._record("get_source_groups")
        return list(self.source_groups)

    async def get_target_groups(self) -> List[TargetGroup]:
        self._record("get_target_groups")
        return list(self.target_groups)

    async def get_email_targets(self) -> List[EmailTarget]:
        self._record("get_email_targets")
        return list(self.email_targets)

    async def get_sms_targets(self) -> List[SmsTarget]:
        self._record("get_sms_targets")
        return list(self.sms_targets)

    async def get_telegram_targets(self) -> List[TelegramTarget]:
        self._record("get_telegram_targets")
        return list(self.telegram_targets)

    # --- Alerts ---

    async def create_alert(self, **kwargs) -> Alert:
        self._record("create_alert", **kwargs)
        source_group = next(g for g in self.source_groups if g.id == kwargs["source_group_id"])
        target_group = next(g for g in self.target_groups if g.id == kwargs["target_group_id"])
        alert = Alert(
            id=self._next_id("A"),
            name=kwargs["name"],
            filter_options=kwargs["filter_options"],
            filter=Filter(id=kwargs["filter_id"], name=None, filter_type="BALANCE"),
            group_name=kwargs["group_name"],
            source_group=source_group,
            target_group=target_group,
        )
        self.alerts.append(alert)
        return alert

    async def delete_alert(self, alert_id: str) -> Optional[str]:
        self._record("delete_alert", alert_id=alert_id)
        self.alerts = [alert for alert in self.alerts if alert.id != alert_id]
        return alert_id

    # --- Sources ---

    async def create_source(self, spec: SourceSpec) -> Source:
        self._record("create_source", spec=spec)
        source = Source(
            id=self._next_id("S"),
            name=spec.name,
            blockchain_address=spec.blockchain_address,
            type=spec.type,
        )
        self.sources.append(source)
        return source

    def _members(self, source_ids: Sequence[str]) -> tuple:
        known = {source.id: source for source in self.sources}
        return tuple(
            known.get(sid, Source(id=sid, name=None, blockchain_address=None, type=""))
            for sid in source_ids
        )

    async def create_source_group(self, *, name: str, source_ids: Sequence[str]) -> SourceGroup:
        self._record("create_source_group", name=name, source_ids=list(source_ids))
        group = SourceGroup(id=self._next_id("SG"), name=name, sources=self._members(source_ids))
        self.source_groups.append(group)
        return group

    async def update_source_group(
        self, *, id: str, name: str, source_ids: Sequence[str]
    ) -> SourceGroup:
        self._record("update_source_group", id=id, name=name, source_ids=list(source_ids))
        group = SourceGroup(id=id, name=name, sources=self._members(source_ids))
        self.source_groups = [group if g.id == id else g for g in self.source_groups]
        return group

    async def delete_source_group(self, group_id: str) -> Optional[str]:
        self._record("delete_source_group", group_id=group_id)
        self.source_groups = [g for g in self.source_groups if g.id != group_id]
        return group_id

    # --- Targets ---

    def _build_target_group(self, id: str, name: str, **kwargs) -> TargetGroup:
        return TargetGroup(
            id=id,
            name=name,
            email_targets=tuple(t for t in self.email_targets if t.id in kwargs["email_target_ids"]),
            sms_targets=tuple(t for t in self.sms_targets if t.id in kwargs["sms_target_ids"]),
            telegram_targets=tuple(
                t for t in self.telegram_targets if t.id in kwargs["telegram_target_ids"]
            ),
        )

    async def create_target_group(self, *, name: str, **kwargs) -> TargetGroup:
        self._record("create_target_group", name=name, **kwargs)
        group = self._build_target_group(self._next_id("TG"), name, **kwargs)
        self.target_groups.append(group)
        return group

    async def update_target_group(self, *, id: str, name: str, **kwargs) -> TargetGroup:
        self._record("update_target_group", id=id, name=name, **kwargs)
        group = self._build_target_group(id, name, **kwargs)
        self.target_groups = [group if g.id == id else g for g in self.target_groups]
        return group

    async def delete_target_group(self, group_id: str) -> Optional[str]:
        self._record("delete_target_group", group_id=group_id)
        self.target_groups = [g for g in self.target_groups if g.id != group_id]
        return group_id

    async def create_email_target(self, *, name: str, value: str) -> EmailTarget:
        self._record("create_email_target", name=name, value=value)
        target = EmailTarget(id=self._next_id("E"), name=name, email_address=value)
        self.email_targets.append(target)
        return target

    async def create_sms_target(self, *, name: str, value: str) -> SmsTarget:
        self._record("create_sms_target", name=name, value=value)
        target = SmsTarget(id=self._next_id("P"), name=name, phone_number=value)
        self.sms_targets.append(target)
        return target

    async def create_telegram_target(self, *, name: str, value: str) -> TelegramTarget:
        self._record("create_telegram_target", name=name, value=value)
        target = TelegramTarget(id=self._next_id("T"), name=name, telegram_id=value)
        self.telegram_targets.append(target)
        return target

    async def send_email_target_verification_request(self, target_id: str) -> Optional[str]:
        self._record("send_email_target_verification_request", target_id=target_id)
        return self.verification_id

    # --- Dapp and messaging ---

    async def get_configuration_for_dapp(self, dapp_address: str) -> ClientConfiguration:
        self._record("get_configuration_for_dapp", dapp_address=dapp_address)
        return self.configuration

    async def get_topics(self) -> List[UserTopic]:
        self._record("get_topics")
        return list(self.topics)

    async def broadcast_message(self, **kwargs) -> Optional[str]:
        self._record("broadcast_message", **kwargs)
        return self.broadcast_id


class FakeSigner:
    def __init__(self, signature: bytes = b"signed-bytes") -> None:
        self.signature = signature
        self.messages: List[bytes] = []

    async def sign_message(self, message: bytes) -> bytes:
        self.messages.append(message)
        return self.signature


class FailingSigner:
    async def sign_message(self, message: bytes) -> bytes:
        raise RuntimeError("user rejected the request")
