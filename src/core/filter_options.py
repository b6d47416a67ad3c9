"""Compact encoding of alert filter options."""

from __future__ import annotations

import json
from typing import Dict, Optional, Union

from core.models import FilterOptions


def _format_threshold(value: Union[float, int, str]) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def pack_filter_options(options: Optional[FilterOptions]) -> str:
    """Serialize filter options, omitting any key whose value is unset.

    >>> pack_filter_options(FilterOptions(threshold=10))
    '{"threshold":"10"}'
    """

    record: Dict[str, str] = {}
    if options is not None:
        if options.alert_frequency is not None:
            record["alertFrequency"] = options.alert_frequency
        if options.direct_message_type is not None:
            record["directMessageType"] = options.direct_message_type
        if options.threshold is not None:
            record["threshold"] = _format_threshold(options.threshold)
    return json.dumps(record, separators=(",", ":"))


def unpack_filter_options(raw: Optional[str]) -> FilterOptions:
    """Parse the stored encoding back into ``FilterOptions``.

    Unknown keys are ignored; an empty or missing value yields defaults.
    """

    if not raw:
        return FilterOptions()
    record = json.loads(raw)
    if not isinstance(record, dict):
        raise ValueError(f"Filter options must be a JSON object, got: {raw!r}")
    return FilterOptions(
        alert_frequency=record.get("alertFrequency"),
        direct_message_type=record.get("directMessageType"),
        threshold=record.get("threshold"),
    )
