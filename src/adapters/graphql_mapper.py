"""GraphQL-to-core model mapping adapter.

This keeps wire field names (camelCase, nullable lists) out of the core.
Every ``parse_*`` accepts the raw dict the service returned for one item.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple

from core.models import (
    Alert,
    Authorization,
    ClientConfiguration,
    EmailTarget,
    Filter,
    SmsTarget,
    Source,
    SourceGroup,
    TargetGroup,
    TelegramTarget,
    User,
    UserTopic,
)


def _items(raw: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    # The service returns null for empty member lists.
    return [item for item in (raw.get(key) or []) if item is not None]


def _strings(value: Optional[List[Any]]) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    return tuple(str(item) for item in value)


def parse_filter(raw: Mapping[str, Any]) -> Filter:
    return Filter(
        id=raw.get("id"),
        name=raw.get("name"),
        filter_type=raw.get("filterType") or "",
    )


def parse_source(raw: Mapping[str, Any]) -> Source:
    return Source(
        id=raw.get("id"),
        name=raw.get("name"),
        blockchain_address=raw.get("blockchainAddress"),
        type=raw.get("type") or "",
        applicable_filters=tuple(parse_filter(item) for item in _items(raw, "applicableFilters")),
    )


def parse_source_group(raw: Mapping[str, Any]) -> SourceGroup:
    return SourceGroup(
        id=raw.get("id"),
        name=raw.get("name"),
        sources=tuple(parse_source(item) for item in _items(raw, "sources")),
    )


def parse_email_target(raw: Mapping[str, Any]) -> EmailTarget:
    return EmailTarget(
        id=raw.get("id"),
        name=raw.get("name"),
        email_address=raw.get("emailAddress"),
        is_confirmed=bool(raw.get("isConfirmed", False)),
    )


def parse_sms_target(raw: Mapping[str, Any]) -> SmsTarget:
    return SmsTarget(
        id=raw.get("id"),
        name=raw.get("name"),
        phone_number=raw.get("phoneNumber"),
        is_confirmed=bool(raw.get("isConfirmed", False)),
    )


def parse_telegram_target(raw: Mapping[str, Any]) -> TelegramTarget:
    return TelegramTarget(
        id=raw.get("id"),
        name=raw.get("name"),
        telegram_id=raw.get("telegramId"),
        is_confirmed=bool(raw.get("isConfirmed", False)),
        confirmation_url=raw.get("confirmationUrl"),
    )


def parse_target_group(raw: Mapping[str, Any]) -> TargetGroup:
    return TargetGroup(
        id=raw.get("id"),
        name=raw.get("name"),
        email_targets=tuple(parse_email_target(item) for item in _items(raw, "emailTargets")),
        sms_targets=tuple(parse_sms_target(item) for item in _items(raw, "smsTargets")),
        telegram_targets=tuple(
            parse_telegram_target(item) for item in _items(raw, "telegramTargets")
        ),
    )


def parse_alert(raw: Mapping[str, Any]) -> Alert:
    return Alert(
        id=raw.get("id"),
        name=raw.get("name"),
        filter_options=raw.get("filterOptions") or "{}",
        filter=parse_filter(raw.get("filter") or {}),
        group_name=raw.get("groupName"),
        source_group=parse_source_group(raw.get("sourceGroup") or {}),
        target_group=parse_target_group(raw.get("targetGroup") or {}),
    )


def parse_user(raw: Mapping[str, Any]) -> User:
    authorization = raw.get("authorization")
    return User(
        email=raw.get("email"),
        email_confirmed=bool(raw.get("emailConfirmed", False)),
        authorization=(
            Authorization(token=authorization["token"], expiry=authorization.get("expiry"))
            if authorization and authorization.get("token")
            else None
        ),
        roles=_strings(raw.get("roles")),
    )


def parse_topic(raw: Mapping[str, Any]) -> UserTopic:
    return UserTopic(
        topic_name=raw.get("topicName"),
        target_collections=_strings(raw.get("targetCollections")),
        target_template=raw.get("targetTemplate"),
    )


def parse_configuration(raw: Mapping[str, Any]) -> ClientConfiguration:
    return ClientConfiguration(
        supported_sms_country_codes=_strings(raw.get("supportedSmsCountryCodes")) or (),
    )


def to_key_value_list(values: Optional[Mapping[str, str]]) -> Optional[List[Dict[str, str]]]:
    """Convert an ordered mapping to the service's ``[{key, value}]`` shape."""

    if values is None:
        return None
    return [{"key": key, "value": value} for key, value in values.items()]
