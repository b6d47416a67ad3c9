"""Topic broadcasts signed by the dapp wallet."""

from __future__ import annotations

import json
import logging
from typing import Callable, Dict, Mapping, Optional

from core.config import SessionConfig
from core.errors import InvalidTopicError
from core.models import UserTopic
from core.ports import MessageSignerPort, NotifiServicePort
from core.signing import sign_payload

LOGGER = logging.getLogger(__name__)

BROADCAST_BLOCKCHAIN = "OFF_CHAIN"
TEMPLATE_CHANNELS = ("EMAIL", "SMS", "TELEGRAM")

VAR_MESSAGE = "message"
VAR_SUBJECT = "subject"
VAR_TARGET_COLLECTION = "TargetCollection"
RESERVED_VARIABLES = frozenset({VAR_MESSAGE, VAR_SUBJECT, VAR_TARGET_COLLECTION})


def build_target_templates(topic: UserTopic) -> Optional[Dict[str, str]]:
    """Fan the topic's single template out to every delivery channel."""

    if topic.target_template is None:
        return None
    return {channel: topic.target_template for channel in TEMPLATE_CHANNELS}


def build_variables(
    topic: UserTopic,
    subject: str,
    message: str,
    is_holder_only: bool,
    extra_variables: Optional[Mapping[str, str]] = None,
) -> Dict[str, str]:
    """Return broadcast variables; reserved names always win over extras."""

    variables = {VAR_MESSAGE: message, VAR_SUBJECT: subject}
    if is_holder_only and topic.target_collections is not None:
        variables[VAR_TARGET_COLLECTION] = json.dumps(
            list(topic.target_collections), separators=(",", ":")
        )

    for key, value in (extra_variables or {}).items():
        if key in RESERVED_VARIABLES:
            LOGGER.debug("Dropping reserved broadcast variable %s", key)
            continue
        variables[key] = value
    return variables


async def broadcast_message(
    service: NotifiServicePort,
    config: SessionConfig,
    topic: UserTopic,
    subject: str,
    message: str,
    is_holder_only: bool,
    extra_variables: Optional[Mapping[str, str]],
    signer: Optional[MessageSignerPort],
    clock: Callable[[], int],
) -> Optional[str]:
    """Sign and send a broadcast; return the server message id or None."""

    if topic.topic_name is None:
        raise InvalidTopicError("Invalid UserTopic: topic has no name")

    variables = build_variables(topic, subject, message, is_holder_only, extra_variables)
    timestamp = clock()
    signature = await sign_payload(signer, config.wallet_address, config.dapp_address, timestamp)

    message_id = await service.broadcast_message(
        topic_name=topic.topic_name,
        target_templates=build_target_templates(topic),
        timestamp=timestamp,
        variables=variables,
        wallet_blockchain=BROADCAST_BLOCKCHAIN,
        signature=signature,
    )
    LOGGER.info("Broadcast to %s sent (id=%s)", topic.topic_name, message_id)
    return message_id
