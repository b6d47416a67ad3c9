"""Alert lifecycle built on top of the resource reconciler."""

from __future__ import annotations

import dataclasses
import logging
from typing import Optional

from core.concurrency import gather_all
from core.dedup import replace_item
from core.errors import (
    DuplicateNameError,
    ImmutableReferenceError,
    InvariantViolationError,
    NotFoundError,
)
from core.filter_options import pack_filter_options
from core.mirror import DataMirror
from core.models import Alert, FilterOptions, TargetSpec
from core.ports import NotifiServicePort
from core.reconciler import ResourceReconciler

LOGGER = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "default"


class AlertManager:
    """Creates, updates and deletes alerts together with their groups."""

    def __init__(
        self,
        service: NotifiServicePort,
        reconciler: ResourceReconciler,
        mirror: DataMirror,
    ) -> None:
        self._service = service
        self._reconciler = reconciler
        self._mirror = mirror

    async def create_alert(
        self,
        name: str,
        source_id: str,
        filter_id: str,
        filter_options: Optional[FilterOptions],
        target_spec: TargetSpec,
        group_name: Optional[str] = None,
    ) -> Alert:
        """Create a uniquely named alert with its own source and target groups.

        The name check runs before any group is ensured so a duplicate name
        never leaves orphan groups behind.
        """

        alerts = tuple(await self._service.get_alerts())
        if any(alert.name == name for alert in alerts):
            raise DuplicateNameError(f"Cannot create alerts with duplicate names: {name}")

        source_group, target_group = await gather_all(
            self._reconciler.ensure_source_group(name, [source_id]),
            self._reconciler.ensure_target_group(name, target_spec),
        )

        if source_group.id is None:
            raise InvariantViolationError("Unknown error creating SourceGroup")
        if target_group.id is None:
            raise InvariantViolationError("Unknown error creating TargetGroup")

        alert = await self._service.create_alert(
            name=name,
            source_group_id=source_group.id,
            filter_id=filter_id,
            filter_options=pack_filter_options(filter_options),
            target_group_id=target_group.id,
            group_name=group_name if group_name is not None else DEFAULT_GROUP_NAME,
        )

        self._mirror.write(alerts=(*alerts, alert))
        LOGGER.info("Created alert %s (%s)", name, alert.id)
        return alert

    async def update_alert(self, alert_id: str, target_spec: TargetSpec) -> Alert:
        """Change the members of an alert's target group.

        The alert keeps pointing at the same target group; only the group's
        membership may change.
        """

        alerts = tuple(await self._service.get_alerts())
        existing = next((alert for alert in alerts if alert.id == alert_id), None)
        if existing is None or existing.target_group.name is None:
            raise NotFoundError(f"Unknown alert id: {alert_id}")

        target_group = await self._reconciler.ensure_target_group(
            existing.target_group.name, target_spec
        )
        if target_group.id != existing.target_group.id:
            raise ImmutableReferenceError(
                f"Unable to modify TargetGroup of alert {alert_id}: "
                f"{existing.target_group.id} resolved to {target_group.id}"
            )

        updated = dataclasses.replace(existing, target_group=target_group)
        self._mirror.write(alerts=replace_item(alerts, existing, updated))
        LOGGER.info("Updated target group of alert %s", alert_id)
        return updated

    async def delete_alert(
        self,
        alert_id: str,
        keep_source_group: bool = False,
        keep_target_group: bool = False,
    ) -> str:
        """Delete an alert and, unless kept, the groups it owns."""

        alerts = tuple(await self._service.get_alerts())
        existing = next((alert for alert in alerts if alert.id == alert_id), None)
        if existing is None:
            raise NotFoundError(f"Unknown alert id: {alert_id}")

        deleted_id = await self._service.delete_alert(alert_id)
        LOGGER.info("Deleted alert %s", alert_id)

        collections = {"alerts": tuple(alert for alert in alerts if alert is not existing)}

        source_group_id = existing.source_group.id
        if not keep_source_group and source_group_id is not None:
            await self._service.delete_source_group(source_group_id)
            # Re-fetch rather than drop locally; the server may cascade.
            collections["source_groups"] = await self._service.get_source_groups()
            LOGGER.info("Deleted source group %s", source_group_id)

        target_group_id = existing.target_group.id
        if not keep_target_group and target_group_id is not None:
            await self._service.delete_target_group(target_group_id)
            collections["target_groups"] = await self._service.get_target_groups()
            LOGGER.info("Deleted target group %s", target_group_id)

        self._mirror.write(**collections)
        return deleted_id if deleted_id is not None else alert_id
