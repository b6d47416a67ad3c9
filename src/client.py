"""Notifi client factory.

We explicitly build the HTTP adapter and mirror here so it is obvious which
endpoint a session talks to and how much state it caches. Callers own the
service and must close it when done.
"""

from __future__ import annotations

import logging

import settings
from adapters.graphql_service import GraphQLNotifiService, gql_url_for
from core.client import NotifiClient
from core.config import SessionConfig
from core.mirror import DataMirror


def build_client() -> NotifiClient:
    """Create a NotifiClient from config.json and environment variables.

    The wallet address is read via python-dotenv to keep per-user identity
    out of the repo.
    """

    # Fail fast on missing identity to avoid an ambiguous login challenge.
    if not settings.WALLET_ADDRESS:
        raise RuntimeError("Missing NOTIFI_WALLET_ADDRESS in environment")
    if not settings.DAPP_ADDRESS:
        raise RuntimeError("notifi.dapp_address is required in config.json")

    gql_url = settings.GQL_URL_OVERRIDE or gql_url_for(settings.ENVIRONMENT)
    logging.getLogger(__name__).info("Initializing Notifi client for %s", gql_url)

    service = GraphQLNotifiService(gql_url, timeout=settings.TIMEOUT_SECONDS)
    mirror = DataMirror.from_strategy(settings.MIRROR, settings.MIRROR_COLLECTIONS)
    config = SessionConfig(
        dapp_address=settings.DAPP_ADDRESS,
        wallet_address=settings.WALLET_ADDRESS,
        wallet_blockchain=settings.WALLET_BLOCKCHAIN,
    )
    return NotifiClient(config, service, mirror=mirror)
