"""Shared alert formatting helpers.

Keeping formatting here prevents drift between CLI commands and keeps the
output consistent regardless of which command printed it.
"""

from __future__ import annotations

from typing import Iterable, List

from core.filter_options import unpack_filter_options
from core.models import Alert, ClientConfiguration, TargetGroup, UserTopic

DIVIDER = "──────────────"


def format_target_group(group: TargetGroup) -> str:
    """Return a one-line summary of a target group's members."""

    parts: List[str] = []
    emails = [t.email_address for t in group.email_targets if t.email_address]
    phones = [t.phone_number for t in group.sms_targets if t.phone_number]
    telegrams = [t.telegram_id for t in group.telegram_targets if t.telegram_id]
    if emails:
        parts.append(f"email: {', '.join(emails)}")
    if phones:
        parts.append(f"sms: {', '.join(phones)}")
    if telegrams:
        parts.append(f"telegram: {', '.join(telegrams)}")
    return " | ".join(parts) if parts else "no targets"


def _format_filter_options(raw: str) -> str:
    try:
        options = unpack_filter_options(raw)
    except ValueError:
        return raw

    parts: List[str] = []
    if options.alert_frequency is not None:
        parts.append(f"frequency={options.alert_frequency}")
    if options.direct_message_type is not None:
        parts.append(f"dm={options.direct_message_type}")
    if options.threshold is not None:
        parts.append(f"threshold={options.threshold}")
    return ", ".join(parts) if parts else "defaults"


def format_alert(alert: Alert) -> str:
    """Create the multi-line block printed for one alert."""

    sources = [s.name or s.blockchain_address or "?" for s in alert.source_group.sources]
    lines = [
        f"Alert:   {alert.name} ({alert.id})",
        f"Group:   {alert.group_name or 'default'}",
        f"Filter:  {alert.filter.name or alert.filter.filter_type} "
        f"[{_format_filter_options(alert.filter_options)}]",
        f"Sources: {', '.join(sources) if sources else 'none'}",
        f"Targets: {format_target_group(alert.target_group)}",
        DIVIDER,
    ]
    return "\n".join(lines)


def format_alerts(alerts: Iterable[Alert]) -> str:
    blocks = [format_alert(alert) for alert in alerts]
    if not blocks:
        return "No alerts configured."
    return "\n".join(blocks)


def format_topic(topic: UserTopic) -> str:
    name = topic.topic_name or "(unnamed)"
    collections = ", ".join(topic.target_collections or ()) or "all holders"
    template = topic.target_template or "none"
    return f"{name} | collections: {collections} | template: {template}"


def format_configuration(configuration: ClientConfiguration) -> str:
    codes = ", ".join(configuration.supported_sms_country_codes) or "none"
    return f"Supported SMS country codes: {codes}"
