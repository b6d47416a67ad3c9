"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any transport-specific types. Every remote entity is owned by
the service; the core only ever holds read-through copies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union

SOURCE_TYPE_METAPLEX_AUCTION = "SOLANA_METAPLEX_AUCTION"
SOURCE_TYPE_BONFIDA_AUCTION = "SOLANA_BONFIDA_AUCTION"

ROLE_USER_MESSENGER = "UserMessenger"


@dataclass(frozen=True)
class Filter:
    """A rule selecting which events on a source produce notifications."""

    id: Optional[str]
    name: Optional[str]
    filter_type: str


@dataclass(frozen=True)
class Source:
    """A watched origin of events, identified by name."""

    id: Optional[str]
    name: Optional[str]
    blockchain_address: Optional[str]
    type: str
    applicable_filters: Tuple[Filter, ...] = ()


@dataclass(frozen=True)
class SourceSpec:
    """Desired state for a source."""

    name: str
    blockchain_address: str
    type: str


@dataclass(frozen=True)
class SourceGroup:
    id: Optional[str]
    name: Optional[str]
    sources: Tuple[Source, ...] = ()


@dataclass(frozen=True)
class EmailTarget:
    id: Optional[str]
    name: Optional[str]
    email_address: Optional[str]
    is_confirmed: bool = False


@dataclass(frozen=True)
class SmsTarget:
    id: Optional[str]
    name: Optional[str]
    phone_number: Optional[str]
    is_confirmed: bool = False


@dataclass(frozen=True)
class TelegramTarget:
    id: Optional[str]
    name: Optional[str]
    telegram_id: Optional[str]
    is_confirmed: bool = False
    confirmation_url: Optional[str] = None


Target = Union[EmailTarget, SmsTarget, TelegramTarget]


@dataclass(frozen=True)
class TargetGroup:
    id: Optional[str]
    name: Optional[str]
    email_targets: Tuple[EmailTarget, ...] = ()
    sms_targets: Tuple[SmsTarget, ...] = ()
    telegram_targets: Tuple[TelegramTarget, ...] = ()


@dataclass(frozen=True)
class TargetSpec:
    """Desired delivery endpoints for a target group.

    Each field is optional; an unset field means the group should have no
    members of that kind.
    """

    email_address: Optional[str] = None
    phone_number: Optional[str] = None
    telegram_id: Optional[str] = None


@dataclass(frozen=True)
class FilterOptions:
    """Tunable parameters serialized onto an alert."""

    alert_frequency: Optional[str] = None
    direct_message_type: Optional[str] = None
    threshold: Optional[Union[float, int, str]] = None


@dataclass(frozen=True)
class Alert:
    """Binding of one source group, one filter and one target group."""

    id: Optional[str]
    name: Optional[str]
    filter_options: str
    filter: Filter
    group_name: Optional[str]
    source_group: SourceGroup
    target_group: TargetGroup


@dataclass(frozen=True)
class Authorization:
    token: str
    expiry: Optional[str] = None


@dataclass(frozen=True)
class User:
    """Result of a login call."""

    email: Optional[str] = None
    email_confirmed: bool = False
    authorization: Optional[Authorization] = None
    roles: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class UserTopic:
    """A broadcast topic the user is allowed to message."""

    topic_name: Optional[str]
    target_collections: Optional[Tuple[str, ...]] = None
    target_template: Optional[str] = None


@dataclass(frozen=True)
class ClientConfiguration:
    supported_sms_country_codes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SessionState:
    """Authentication state for one session.

    ``client_random_uuid`` is the pending challenge nonce; it is single use
    and only one challenge may be outstanding.
    """

    client_random_uuid: Optional[str] = None
    token: Optional[str] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class InternalData:
    """Snapshot of every collection the mirror tracks."""

    alerts: Tuple[Alert, ...] = ()
    filters: Tuple[Filter, ...] = ()
    sources: Tuple[Source, ...] = ()
    source_groups: Tuple[SourceGroup, ...] = ()
    target_groups: Tuple[TargetGroup, ...] = ()
    email_targets: Tuple[EmailTarget, ...] = ()
    sms_targets: Tuple[SmsTarget, ...] = ()
    telegram_targets: Tuple[TelegramTarget, ...] = ()
