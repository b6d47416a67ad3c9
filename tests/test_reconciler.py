from __future__ import annotations

import asyncio

import pytest

from core.errors import ConflictError
from core.models import (
    SOURCE_TYPE_BONFIDA_AUCTION,
    SOURCE_TYPE_METAPLEX_AUCTION,
    EmailTarget,
    Source,
    SourceGroup,
    SourceSpec,
    SmsTarget,
    TargetGroup,
    TargetSpec,
    TelegramTarget,
)

WALLET_SOURCE = SourceSpec(name="wallet", blockchain_address="addr-1", type="SOLANA_WALLET")


def _seed_sources(service, *ids: str) -> None:
    for source_id in ids:
        service.sources.append(
            Source(id=source_id, name=source_id, blockchain_address=source_id, type="T")
        )


def test_ensure_source_is_idempotent(client, service) -> None:
    async def scenario():
        first = await client.create_source(WALLET_SOURCE)
        second = await client.create_source(WALLET_SOURCE)
        return first, second

    first, second = asyncio.run(scenario())

    assert first == second
    assert service.count("create_source") == 1
    assert client.data.sources == (first,)


def test_ensure_source_conflict_leaves_mirror_untouched(client, service) -> None:
    service.sources.append(
        Source(id="S0", name="wallet", blockchain_address="other", type="SOLANA_WALLET")
    )

    with pytest.raises(ConflictError):
        asyncio.run(client.create_source(WALLET_SOURCE))

    assert service.count("create_source") == 0
    assert client.data.sources == ()


def test_source_without_id_still_conflicts_on_name(client, service) -> None:
    service.sources.append(
        Source(id=None, name="wallet", blockchain_address="other", type="SOLANA_WALLET")
    )

    with pytest.raises(ConflictError):
        asyncio.run(client.create_source(WALLET_SOURCE))

    assert service.count("create_source") == 0


def test_source_group_without_id_is_created_fresh(client, service) -> None:
    _seed_sources(service, "S1")
    service.source_groups.append(SourceGroup(id=None, name="watch"))

    created = asyncio.run(client.ensure_source_group("watch", ["S1"]))

    assert created.id is not None
    assert service.count("create_source_group") == 1
    assert service.count("update_source_group") == 0


def test_auction_sources_use_prefixed_address(client, service) -> None:
    async def scenario():
        metaplex = await client.create_metaplex_auction_source("auction-1", "https://x.io")
        bonfida = await client.create_bonfida_auction_source("auction-2", "name.sol")
        return metaplex, bonfida

    metaplex, bonfida = asyncio.run(scenario())

    assert metaplex.name == "auction-1"
    assert metaplex.blockchain_address == "https://x.io:;:auction-1"
    assert metaplex.type == SOURCE_TYPE_METAPLEX_AUCTION
    assert bonfida.blockchain_address == "name.sol:;:auction-2"
    assert bonfida.type == SOURCE_TYPE_BONFIDA_AUCTION


def test_source_group_membership_is_compared_as_a_set(client, service) -> None:
    _seed_sources(service, "S1", "S2")

    async def scenario():
        created = await client.ensure_source_group("watch", ["S1", "S2"])
        same = await client.ensure_source_group("watch", ["S2", "S1", "S2"])
        return created, same

    created, same = asyncio.run(scenario())

    assert created.id == same.id
    assert service.count("create_source_group") == 1
    assert service.count("update_source_group") == 0


def test_source_group_drift_is_updated_in_place(client, service) -> None:
    _seed_sources(service, "S1", "S2")

    async def scenario():
        created = await client.ensure_source_group("watch", ["S1"])
        updated = await client.ensure_source_group("watch", ["S2"])
        return created, updated

    created, updated = asyncio.run(scenario())

    assert updated.id == created.id
    assert [source.id for source in updated.sources] == ["S2"]
    assert service.call_args["update_source_group"] == [
        {"id": created.id, "name": "watch", "source_ids": ["S2"]}
    ]
    assert client.data.source_groups == (updated,)


def test_email_targets_match_case_insensitively(client, service) -> None:
    existing = EmailTarget(id="E0", name="Alice@Example.com", email_address="Alice@Example.com")
    service.email_targets.append(existing)

    target = asyncio.run(client.reconciler.ensure_email_target("alice@example.com"))

    assert target is existing
    assert service.count("create_email_target") == 0
    assert client.data.email_targets == (existing,)


def test_sms_and_telegram_targets_match_exactly(client, service) -> None:
    async def scenario():
        await client.reconciler.ensure_telegram_target("Alice")
        await client.reconciler.ensure_telegram_target("alice")
        await client.reconciler.ensure_sms_target("+15550001")
        await client.reconciler.ensure_sms_target("+15550001")

    asyncio.run(scenario())

    assert service.count("create_telegram_target") == 2
    assert service.count("create_sms_target") == 1
    assert service.call_args["create_sms_target"] == [{"name": "+15550001", "value": "+15550001"}]


def test_target_group_is_created_then_reused(client, service) -> None:
    spec = TargetSpec(email_address="a@example.com", phone_number="+15550001")

    async def scenario():
        created = await client.ensure_target_group("watch", spec)
        again = await client.ensure_target_group("watch", spec)
        return created, again

    created, again = asyncio.run(scenario())

    assert created.id == again.id
    assert [t.email_address for t in created.email_targets] == ["a@example.com"]
    assert [t.phone_number for t in created.sms_targets] == ["+15550001"]
    assert created.telegram_targets == ()
    assert service.count("create_target_group") == 1
    assert service.count("update_target_group") == 0
    assert client.data.target_groups == (created,)
    assert len(client.data.email_targets) == 1


def test_target_group_drift_is_updated(client, service) -> None:
    async def scenario():
        created = await client.ensure_target_group("watch", TargetSpec(email_address="a@x.io"))
        updated = await client.ensure_target_group("watch", TargetSpec(telegram_id="tg-user"))
        return created, updated

    created, updated = asyncio.run(scenario())

    assert updated.id == created.id
    assert updated.email_targets == ()
    assert [t.telegram_id for t in updated.telegram_targets] == ["tg-user"]
    args = service.call_args["update_target_group"][0]
    assert args["email_target_ids"] == []
    assert len(args["telegram_target_ids"]) == 1
    assert client.data.target_groups == (updated,)


def test_target_group_members_compared_regardless_of_listing_order(client, service) -> None:
    email = EmailTarget(id="E1", name="a@x.io", email_address="a@x.io")
    sms = SmsTarget(id="P1", name="+15550001", phone_number="+15550001")
    telegram = TelegramTarget(id="T1", name="tg-user", telegram_id="tg-user")
    service.email_targets.append(email)
    service.sms_targets.append(sms)
    service.telegram_targets.append(telegram)
    # The server repeats members and lists them in its own order.
    existing = TargetGroup(
        id="TG1",
        name="watch",
        email_targets=(email, email),
        sms_targets=(sms,),
        telegram_targets=(telegram, telegram),
    )
    service.target_groups.append(existing)

    group = asyncio.run(
        client.ensure_target_group(
            "watch",
            TargetSpec(telegram_id="tg-user", phone_number="+15550001", email_address="A@x.io"),
        )
    )

    assert group is existing
    assert service.count("update_target_group") == 0
    assert service.count("create_target_group") == 0
    assert service.count("create_email_target") == 0
