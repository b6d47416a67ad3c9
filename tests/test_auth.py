from __future__ import annotations

import asyncio

import pytest

from core.errors import InvalidArgumentError, ProtocolError, SequenceError, UnauthorizedError
from core.models import EmailTarget, User
from core.signing import build_signing_payload, challenge_log_value
from conftest import DAPP, NOW, WALLET
from fakes import FakeSigner


def test_complete_before_begin_is_a_sequence_error(client, service) -> None:
    with pytest.raises(SequenceError):
        asyncio.run(client.complete_challenge("tx-signature"))
    assert service.count("complete_log_in_by_transaction") == 0


def test_challenge_round_trip_authenticates_and_refreshes(client, service) -> None:
    service.email_targets = [EmailTarget(id="E9", name="x", email_address="x@example.com")]

    async def scenario():
        log_value = await client.begin_challenge()
        nonce = client.auth.pending_nonce
        user = await client.complete_challenge("tx-signature")
        return log_value, nonce, user

    log_value, nonce, user = asyncio.run(scenario())

    assert log_value == challenge_log_value("server-nonce", nonce)
    args = service.call_args["complete_log_in_by_transaction"][0]
    assert args["random_uuid"] == nonce
    assert args["transaction_signature"] == "tx-signature"
    assert args["wallet_address"] == WALLET
    assert args["dapp_address"] == DAPP

    assert user is service.user
    assert client.auth.token == "jwt-token"
    assert service.jwt == "jwt-token"
    assert client.auth.pending_nonce is None
    assert client.data.email_targets == tuple(service.email_targets)


def test_nonce_is_single_use(client, service) -> None:
    async def scenario():
        await client.begin_challenge()
        await client.complete_challenge("tx-signature")
        await client.complete_challenge("tx-signature")

    with pytest.raises(SequenceError):
        asyncio.run(scenario())
    assert service.count("complete_log_in_by_transaction") == 1


def test_second_begin_replaces_pending_nonce(client, service) -> None:
    async def scenario():
        await client.begin_challenge()
        first = client.auth.pending_nonce
        await client.begin_challenge()
        second = client.auth.pending_nonce
        await client.complete_challenge("tx-signature")
        return first, second

    first, second = asyncio.run(scenario())

    assert first != second
    assert service.call_args["complete_log_in_by_transaction"][0]["random_uuid"] == second


def test_missing_server_nonce_is_a_protocol_error(client, service) -> None:
    service.nonce = None
    with pytest.raises(ProtocolError):
        asyncio.run(client.begin_challenge())
    assert client.auth.pending_nonce is None


def test_nonce_is_consumed_when_completion_fails(client, service) -> None:
    service.failures["complete_log_in_by_transaction"] = ProtocolError("rejected")

    async def scenario():
        await client.begin_challenge()
        await client.complete_challenge("tx-signature")

    with pytest.raises(ProtocolError):
        asyncio.run(scenario())
    assert client.auth.pending_nonce is None
    assert not client.auth.is_authenticated


def test_direct_login_signs_payload_with_rounded_timestamp(client, service) -> None:
    signer = FakeSigner()

    asyncio.run(client.log_in(signer))

    timestamp = round(NOW)
    assert signer.messages == [build_signing_payload(WALLET, DAPP, timestamp)]
    args = service.call_args["log_in_from_dapp"][0]
    assert args["timestamp"] == timestamp
    assert args["wallet_public_key"] == WALLET
    assert client.auth.is_authenticated
    assert client.auth.roles == ("UserMessenger",)


def test_direct_login_without_signer(client, service) -> None:
    with pytest.raises(InvalidArgumentError):
        asyncio.run(client.log_in(None))
    assert service.count("log_in_from_dapp") == 0


def test_login_without_token_leaves_session_anonymous(client, service) -> None:
    service.user = User()

    asyncio.run(client.log_in(FakeSigner()))

    assert not client.auth.is_authenticated
    assert service.jwt is None
    assert client.data is not None


def test_logout_clears_token_and_mirror(client, service) -> None:
    asyncio.run(client.log_in(FakeSigner()))

    client.log_out()

    assert client.auth.token is None
    assert client.auth.roles == ()
    assert service.jwt is None
    assert client.data is None


def test_require_role(client) -> None:
    with pytest.raises(UnauthorizedError):
        client.auth.require_role("UserMessenger")

    asyncio.run(client.log_in(FakeSigner()))
    client.auth.require_role("UserMessenger")
