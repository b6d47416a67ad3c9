"""GraphQL-over-HTTP adapter for the remote notification service.

Implements the core NotifiServicePort with an async httpx client. The bearer
token set through ``set_jwt`` is attached to every subsequent request.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, TypeVar

import httpx

from adapters import graphql_documents as docs
from adapters.graphql_mapper import (
    parse_alert,
    parse_configuration,
    parse_email_target,
    parse_sms_target,
    parse_source,
    parse_source_group,
    parse_target_group,
    parse_telegram_target,
    parse_topic,
    parse_user,
    to_key_value_list,
)
from core.errors import ProtocolError
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

LOGGER = logging.getLogger(__name__)

R = TypeVar("R")

GQL_URLS = {
    "Production": "https://api.notifi.network/gql",
    "Staging": "https://api.stg.notifi.network/gql",
    "Development": "https://api.dev.notifi.network/gql",
    "Local": "https://localhost:5001/gql",
}


def gql_url_for(environment: str) -> str:
    try:
        return GQL_URLS[environment]
    except KeyError:
        raise ValueError(
            f"Unknown environment {environment!r}; expected one of {', '.join(GQL_URLS)}"
        ) from None


class GraphQLNotifiService:
    """Thin async client wrapping the service's GraphQL endpoint."""

    def __init__(
        self,
        gql_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._gql_url = gql_url
        self._timeout = timeout
        self._client = client
        self._jwt: Optional[str] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    def set_jwt(self, token: Optional[str]) -> None:
        self._jwt = token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._jwt:
            headers["Authorization"] = f"Bearer {self._jwt}"
        return headers

    async def _execute(
        self, document: str, field: str, variables: Optional[Mapping[str, Any]] = None
    ) -> Any:
        """Run one operation and return ``data[field]`` (possibly None)."""

        client = await self._get_client()
        response = await client.post(
            self._gql_url,
            json={"query": document, "variables": dict(variables or {})},
            headers=self._headers(),
        )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ProtocolError(
                f"GraphQL {field} failed with HTTP {response.status_code}: {response.text}"
            ) from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProtocolError(f"GraphQL {field} returned invalid JSON") from exc

        errors = payload.get("errors") if isinstance(payload, dict) else None
        if errors:
            messages = "; ".join(str(error.get("message", error)) for error in errors)
            raise ProtocolError(f"GraphQL {field} failed: {messages}")

        data = payload.get("data") if isinstance(payload, dict) else None
        if not isinstance(data, dict):
            raise ProtocolError(f"GraphQL {field} returned no data")
        LOGGER.debug("GraphQL %s ok", field)
        return data.get(field)

    async def _list(
        self, document: str, field: str, parse: Callable[[Mapping[str, Any]], R]
    ) -> List[R]:
        items = await self._execute(document, field)
        return [parse(item) for item in (items or []) if item is not None]

    async def _one(
        self,
        document: str,
        field: str,
        parse: Callable[[Mapping[str, Any]], R],
        variables: Mapping[str, Any],
    ) -> R:
        item = await self._execute(document, field, variables)
        if item is None:
            raise ProtocolError(f"GraphQL {field} returned null")
        return parse(item)

    async def _id(self, document: str, field: str, variables: Mapping[str, Any]) -> Optional[str]:
        item = await self._execute(document, field, variables)
        return item.get("id") if item else None

    # --- Login ---

    async def begin_log_in_by_transaction(
        self, *, wallet_address: str, wallet_blockchain: str, dapp_address: str
    ) -> Optional[str]:
        result = await self._execute(
            docs.BEGIN_LOG_IN_BY_TRANSACTION,
            "beginLogInByTransaction",
            {
                "walletAddress": wallet_address,
                "walletBlockchain": wallet_blockchain,
                "dappAddress": dapp_address,
            },
        )
        return result.get("nonce") if result else None

    async def complete_log_in_by_transaction(
        self,
        *,
        wallet_address: str,
        wallet_blockchain: str,
        dapp_address: str,
        random_uuid: str,
        transaction_signature: str,
    ) -> User:
        return await self._one(
            docs.COMPLETE_LOG_IN_BY_TRANSACTION,
            "completeLogInByTransaction",
            parse_user,
            {
                "walletAddress": wallet_address,
                "walletBlockchain": wallet_blockchain,
                "dappAddress": dapp_address,
                "randomUuid": random_uuid,
                "transactionSignature": transaction_signature,
            },
        )

    async def log_in_from_dapp(
        self, *, wallet_public_key: str, dapp_address: str, timestamp: int, signature: str
    ) -> User:
        return await self._one(
            docs.LOG_IN_FROM_DAPP,
            "logInFromDapp",
            parse_user,
            {
                "walletPublicKey": wallet_public_key,
                "dappAddress": dapp_address,
                "timestamp": timestamp,
                "signature": signature,
            },
        )

    # --- Collections ---

    async def get_alerts(self) -> List[Alert]:
        return await self._list(docs.GET_ALERTS, "alert", parse_alert)

    async def get_sources(self) -> List[Source]:
        return await self._list(docs.GET_SOURCES, "source", parse_source)

    async def get_source_groups(self) -> List[SourceGroup]:
        return await self._list(docs.GET_SOURCE_GROUPS, "sourceGroup", parse_source_group)

    async def get_target_groups(self) -> List[TargetGroup]:
        return await self._list(docs.GET_TARGET_GROUPS, "targetGroup", parse_target_group)

    async def get_email_targets(self) -> List[EmailTarget]:
        return await self._list(docs.GET_EMAIL_TARGETS, "emailTarget", parse_email_target)

    async def get_sms_targets(self) -> List[SmsTarget]:
        return await self._list(docs.GET_SMS_TARGETS, "smsTarget", parse_sms_target)

    async def get_telegram_targets(self) -> List[TelegramTarget]:
        return await self._list(
            docs.GET_TELEGRAM_TARGETS, "telegramTarget", parse_telegram_target
        )

    # --- Alerts ---

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
        return await self._one(
            docs.CREATE_ALERT,
            "createAlert",
            parse_alert,
            {
                "name": name,
                "sourceGroupId": source_group_id,
                "filterId": filter_id,
                "filterOptions": filter_options,
                "targetGroupId": target_group_id,
                "groupName": group_name,
            },
        )

    async def delete_alert(self, alert_id: str) -> Optional[str]:
        return await self._id(docs.DELETE_ALERT, "deleteAlert", {"id": alert_id})

    # --- Sources ---

    async def create_source(self, spec: SourceSpec) -> Source:
        return await self._one(
            docs.CREATE_SOURCE,
            "createSource",
            parse_source,
            {
                "name": spec.name,
                "blockchainAddress": spec.blockchain_address,
                "type": spec.type,
            },
        )

    async def create_source_group(self, *, name: str, source_ids: Sequence[str]) -> SourceGroup:
        return await self._one(
            docs.CREATE_SOURCE_GROUP,
            "createSourceGroup",
            parse_source_group,
            {"name": name, "sourceIds": list(source_ids)},
        )

    async def update_source_group(
        self, *, id: str, name: str, source_ids: Sequence[str]
    ) -> SourceGroup:
        return await self._one(
            docs.UPDATE_SOURCE_GROUP,
            "updateSourceGroup",
            parse_source_group,
            {"id": id, "name": name, "sourceIds": list(source_ids)},
        )

    async def delete_source_group(self, group_id: str) -> Optional[str]:
        return await self._id(docs.DELETE_SOURCE_GROUP, "deleteSourceGroup", {"id": group_id})

    # --- Targets ---

    async def create_target_group(
        self,
        *,
        name: str,
        email_target_ids: Sequence[str],
        sms_target_ids: Sequence[str],
        telegram_target_ids: Sequence[str],
    ) -> TargetGroup:
        return await self._one(
            docs.CREATE_TARGET_GROUP,
            "createTargetGroup",
            parse_target_group,
            {
                "name": name,
                "emailTargetIds": list(email_target_ids),
                "smsTargetIds": list(sms_target_ids),
                "telegramTargetIds": list(telegram_target_ids),
            },
        )

    async def update_target_group(
        self,
        *,
        id: str,
        name: str,
        email_target_ids: Sequence[str],
        sms_target_ids: Sequence[str],
        telegram_target_ids: Sequence[str],
    ) -> TargetGroup:
        return await self._one(
            docs.UPDATE_TARGET_GROUP,
            "updateTargetGroup",
            parse_target_group,
            {
                "id": id,
                "name": name,
                "emailTargetIds": list(email_target_ids),
                "smsTargetIds": list(sms_target_ids),
                "telegramTargetIds": list(telegram_target_ids),
            },
        )

    async def delete_target_group(self, group_id: str) -> Optional[str]:
        return await self._id(docs.DELETE_TARGET_GROUP, "deleteTargetGroup", {"id": group_id})

    async def create_email_target(self, *, name: str, value: str) -> EmailTarget:
        return await self._one(
            docs.CREATE_EMAIL_TARGET,
            "createEmailTarget",
            parse_email_target,
            {"name": name, "value": value},
        )

    async def create_sms_target(self, *, name: str, value: str) -> SmsTarget:
        return await self._one(
            docs.CREATE_SMS_TARGET,
            "createSmsTarget",
            parse_sms_target,
            {"name": name, "value": value},
        )

    async def create_telegram_target(self, *, name: str, value: str) -> TelegramTarget:
        return await self._one(
            docs.CREATE_TELEGRAM_TARGET,
            "createTelegramTarget",
            parse_telegram_target,
            {"name": name, "value": value},
        )

    async def send_email_target_verification_request(self, target_id: str) -> Optional[str]:
        return await self._id(
            docs.SEND_EMAIL_TARGET_VERIFICATION_REQUEST,
            "sendEmailTargetVerificationRequest",
            {"targetId": target_id},
        )

    # --- Dapp and messaging ---

    async def get_configuration_for_dapp(self, dapp_address: str) -> ClientConfiguration:
        return await self._one(
            docs.GET_CONFIGURATION_FOR_DAPP,
            "configurationForDapp",
            parse_configuration,
            {"dappAddress": dapp_address},
        )

    async def get_topics(self) -> List[UserTopic]:
        return await self._list(docs.GET_TOPICS, "topics", parse_topic)

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
        return await self._id(
            docs.BROADCAST_MESSAGE,
            "broadcastMessage",
            {
                "topicName": topic_name,
                "targetTemplates": to_key_value_list(target_templates),
                "timestamp": timestamp,
                "variables": to_key_value_list(variables),
                "walletBlockchain": wallet_blockchain,
                "signature": signature,
            },
        )
