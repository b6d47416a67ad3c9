"""Local mirror of remote collections.

The mirror is a read-through cache: after each mutation the touched
collection is replaced wholesale with what the service confirmed. It is
never patched field by field and never trusted across unrelated
collections.

One ``DataMirror`` covers every backing strategy:
- full: every collection is retained
- partial: only the named collections are retained, the rest stay empty
- disabled: nothing is retained and snapshots are always absent
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Generic, Iterable, Optional, Sequence, TypeVar

from core.concurrency import gather_all
from core.dedup import unique_filters
from core.models import InternalData
from core.ports import ContainerPort, NotifiServicePort

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")

COLLECTIONS = tuple(field.name for field in dataclasses.fields(InternalData))

MIRROR_FULL = "full"
MIRROR_PARTIAL = "partial"
MIRROR_DISABLED = "disabled"


class MemoryContainer(Generic[T]):
    """In-process container; a replace is visible to the next ``get``."""

    def __init__(self, value: T) -> None:
        self._value = value

    def get(self) -> T:
        return self._value

    def replace(self, value: T) -> None:
        self._value = value


class NullContainer:
    """Container that never holds anything."""

    def get(self) -> None:
        return None

    def replace(self, value: object) -> None:
        return None


class DataMirror:
    """Mirror of the collections in ``InternalData`` behind a container."""

    def __init__(
        self,
        container: ContainerPort[Optional[InternalData]],
        collections: Optional[Iterable[str]] = None,
    ) -> None:
        retained = frozenset(COLLECTIONS if collections is None else collections)
        unknown = retained - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown mirror collections: {', '.join(sorted(unknown))}")
        self._container = container
        self._retained = retained

    @classmethod
    def full(cls, container: Optional[ContainerPort[Optional[InternalData]]] = None) -> "DataMirror":
        return cls(container if container is not None else MemoryContainer(None))

    @classmethod
    def partial(
        cls,
        collections: Iterable[str],
        container: Optional[ContainerPort[Optional[InternalData]]] = None,
    ) -> "DataMirror":
        return cls(container if container is not None else MemoryContainer(None), collections)

    @classmethod
    def disabled(cls) -> "DataMirror":
        return cls(NullContainer(), ())

    @classmethod
    def from_strategy(cls, strategy: str, collections: Sequence[str] = ()) -> "DataMirror":
        """Build a mirror from a config-level strategy name."""

        if strategy == MIRROR_FULL:
            return cls.full()
        if strategy == MIRROR_PARTIAL:
            return cls.partial(collections)
        if strategy == MIRROR_DISABLED:
            return cls.disabled()
        raise ValueError(f"Unsupported mirror strategy: {strategy}")

    @property
    def retained(self) -> frozenset:
        return self._retained

    def snapshot(self) -> Optional[InternalData]:
        """Return the current snapshot, or None when the mirror is absent."""

        return self._container.get()

    def load(self, data: InternalData) -> None:
        """Replace the whole mirror with a freshly fetched snapshot."""

        self._container.replace(self._strip(data))

    def clear(self) -> None:
        """Set the mirror to the absent state; callers must refresh before trusting it."""

        self._container.replace(None)

    def write(self, **collections: Sequence) -> None:
        """Replace the named collections in the current snapshot.

        Writes are dropped while the mirror is absent (before the first
        refresh or after logout) and for collections the strategy does not
        retain.
        """

        current = self._container.get()
        if current is None:
            return

        updates = {}
        for name, items in collections.items():
            if name not in COLLECTIONS:
                raise ValueError(f"Unknown mirror collection: {name}")
            if name in self._retained:
                updates[name] = tuple(items)
        if not updates:
            return

        self._container.replace(dataclasses.replace(current, **updates))
        LOGGER.debug("Mirror updated: %s", ", ".join(sorted(updates)))

    def _strip(self, data: InternalData) -> InternalData:
        dropped = {name: () for name in COLLECTIONS if name not in self._retained}
        return dataclasses.replace(data, **dropped) if dropped else data


async def fetch_internal_data(service: NotifiServicePort) -> InternalData:
    """Fetch every top-level collection concurrently.

    Filters are not a collection of their own on the service; they are the
    union of every source's applicable filters.
    """

    (
        alerts,
        sources,
        source_groups,
        target_groups,
        email_targets,
        sms_targets,
        telegram_targets,
    ) = await gather_all(
        service.get_alerts(),
        service.get_sources(),
        service.get_source_groups(),
        service.get_target_groups(),
        service.get_email_targets(),
        service.get_sms_targets(),
        service.get_telegram_targets(),
    )

    return InternalData(
        alerts=tuple(alerts),
        filters=tuple(unique_filters(sources)),
        sources=tuple(sources),
        source_groups=tuple(source_groups),
        target_groups=tuple(target_groups),
        email_targets=tuple(email_targets),
        sms_targets=tuple(sms_targets),
        telegram_targets=tuple(telegram_targets),
    )
