"""Idempotent "ensure" operations for sources, targets and their groups.

Every resource kind runs through the same algorithm:
1) Fetch the full remote collection
2) Look up an existing item by natural key
3) Create it when absent, return it when in sync, update it otherwise
4) Replace the mirrored collection with what the service confirmed

A resource kind without an update operation treats drift as a conflict
rather than silently overwriting the remote item.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, List, Optional, Sequence, TypeVar

from core.dedup import are_sets_equal, replace_item
from core.errors import ConflictError
from core.mirror import DataMirror
from core.models import (
    SOURCE_TYPE_BONFIDA_AUCTION,
    SOURCE_TYPE_METAPLEX_AUCTION,
    EmailTarget,
    SmsTarget,
    Source,
    SourceGroup,
    SourceSpec,
    TargetGroup,
    TargetSpec,
    TelegramTarget,
)
from core.ports import NotifiServicePort
from core.source_keys import build_auction_address, normalize_email

LOGGER = logging.getLogger(__name__)

R = TypeVar("R")


def _always_in_sync(_item: object) -> bool:
    return True


def _member_ids(items: Sequence) -> List[str]:
    return [item.id for item in items]


class ResourceReconciler:
    """Find-or-create-or-update for every resource kind an alert references."""

    def __init__(self, service: NotifiServicePort, mirror: DataMirror) -> None:
        self._service = service
        self._mirror = mirror

    async def _ensure(
        self,
        *,
        kind: str,
        collection: str,
        fetch_all: Callable[[], Awaitable[Sequence[R]]],
        key_matches: Callable[[R], bool],
        create: Callable[[], Awaitable[R]],
        in_sync: Callable[[R], bool] = _always_in_sync,
        update: Optional[Callable[[R], Awaitable[R]]] = None,
        skip_unassigned: bool = False,
    ) -> R:
        current = tuple(await fetch_all())
        # A group the service has not assigned an id yet cannot be updated in place.
        existing = next(
            (
                item
                for item in current
                if key_matches(item)
                and not (skip_unassigned and getattr(item, "id", None) is None)
            ),
            None,
        )

        if existing is None:
            created = await create()
            self._mirror.write(**{collection: (*current, created)})
            LOGGER.info("Created %s %s", kind, getattr(created, "id", None))
            return created

        if in_sync(existing):
            self._mirror.write(**{collection: current})
            LOGGER.debug("%s %s already in sync", kind, getattr(existing, "id", None))
            return existing

        if update is None:
            raise ConflictError(f"Cannot create a {kind} with a duplicate name")

        updated = await update(existing)
        self._mirror.write(**{collection: replace_item(current, existing, updated)})
        LOGGER.info("Updated %s %s", kind, getattr(updated, "id", None))
        return updated

    # --- Sources ---

    async def ensure_source(self, spec: SourceSpec) -> Source:
        """Return the source named ``spec.name``, creating it if needed.

        Sources are never updated: a same-named source with a different
        address or type raises ``ConflictError``.
        """

        return await self._ensure(
            kind="source",
            collection="sources",
            fetch_all=self._service.get_sources,
            key_matches=lambda source: source.name == spec.name,
            in_sync=lambda source: (
                source.blockchain_address == spec.blockchain_address and source.type == spec.type
            ),
            create=lambda: self._service.create_source(spec),
        )

    async def create_metaplex_auction_source(
        self, auction_address: str, auction_web_url: str
    ) -> Source:
        return await self.ensure_source(
            SourceSpec(
                name=auction_address,
                blockchain_address=build_auction_address(auction_web_url, auction_address),
                type=SOURCE_TYPE_METAPLEX_AUCTION,
            )
        )

    async def create_bonfida_auction_source(
        self, auction_address: str, auction_name: str
    ) -> Source:
        return await self.ensure_source(
            SourceSpec(
                name=auction_address,
                blockchain_address=build_auction_address(auction_name, auction_address),
                type=SOURCE_TYPE_BONFIDA_AUCTION,
            )
        )

    async def ensure_source_group(self, name: str, source_ids: Sequence[str]) -> SourceGroup:
        """Return the source group ``name`` with exactly ``source_ids`` as members."""

        source_ids = list(source_ids)

        async def _update(existing: SourceGroup) -> SourceGroup:
            return await self._service.update_source_group(
                id=existing.id, name=name, source_ids=source_ids
            )

        return await self._ensure(
            kind="source group",
            collection="source_groups",
            fetch_all=self._service.get_source_groups,
            key_matches=lambda group: group.name == name,
            in_sync=lambda group: are_sets_equal(source_ids, _member_ids(group.sources)),
            create=lambda: self._service.create_source_group(name=name, source_ids=source_ids),
            update=_update,
            skip_unassigned=True,
        )

    # --- Targets ---

    async def ensure_email_target(self, email_address: str) -> EmailTarget:
        wanted = normalize_email(email_address)
        return await self._ensure(
            kind="email target",
            collection="email_targets",
            fetch_all=self._service.get_email_targets,
            key_matches=lambda target: normalize_email(target.email_address) == wanted,
            create=lambda: self._service.create_email_target(
                name=email_address, value=email_address
            ),
        )

    async def ensure_sms_target(self, phone_number: str) -> SmsTarget:
        return await self._ensure(
            kind="sms target",
            collection="sms_targets",
            fetch_all=self._service.get_sms_targets,
            key_matches=lambda target: target.phone_number == phone_number,
            create=lambda: self._service.create_sms_target(name=phone_number, value=phone_number),
        )

    async def ensure_telegram_target(self, telegram_id: str) -> TelegramTarget:
        return await self._ensure(
            kind="telegram target",
            collection="telegram_targets",
            fetch_all=self._service.get_telegram_targets,
            key_matches=lambda target: target.telegram_id == telegram_id,
            create=lambda: self._service.create_telegram_target(
                name=telegram_id, value=telegram_id
            ),
        )

    async def ensure_target_group(self, name: str, spec: TargetSpec) -> TargetGroup:
        """Return the target group ``name`` whose members match ``spec``.

        Targets are ensured one kind at a time before the group itself, and
        each member set is compared as an unordered set.
        """

        email_ids: List[str] = []
        sms_ids: List[str] = []
        telegram_ids: List[str] = []
        if spec.email_address is not None:
            email_ids.append((await self.ensure_email_target(spec.email_address)).id)
        if spec.phone_number is not None:
            sms_ids.append((await self.ensure_sms_target(spec.phone_number)).id)
        if spec.telegram_id is not None:
            telegram_ids.append((await self.ensure_telegram_target(spec.telegram_id)).id)

        def _in_sync(group: TargetGroup) -> bool:
            return (
                are_sets_equal(_member_ids(group.email_targets), email_ids)
                and are_sets_equal(_member_ids(group.sms_targets), sms_ids)
                and are_sets_equal(_member_ids(group.telegram_targets), telegram_ids)
            )

        async def _update(existing: TargetGroup) -> TargetGroup:
            return await self._service.update_target_group(
                id=existing.id,
                name=name,
                email_target_ids=email_ids,
                sms_target_ids=sms_ids,
                telegram_target_ids=telegram_ids,
            )

        return await self._ensure(
            kind="target group",
            collection="target_groups",
            fetch_all=self._service.get_target_groups,
            key_matches=lambda group: group.name == name,
            in_sync=_in_sync,
            create=lambda: self._service.create_target_group(
                name=name,
                email_target_ids=email_ids,
                sms_target_ids=sms_ids,
                telegram_target_ids=telegram_ids,
            ),
            update=_update,
            skip_unassigned=True,
        )
