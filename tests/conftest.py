from __future__ import annotations

import pytest

from core.client import NotifiClient
from core.config import SessionConfig
from core.mirror import DataMirror
from core.models import InternalData
from fakes import FakeNotifiService

WALLET = "WaLLetAddr3ss"
DAPP = "dapp-address"
NOW = 1_700_000_000.4


@pytest.fixture
def config() -> SessionConfig:
    return SessionConfig(dapp_address=DAPP, wallet_address=WALLET)


@pytest.fixture
def service() -> FakeNotifiService:
    return FakeNotifiService()


@pytest.fixture
def mirror() -> DataMirror:
    # Start from a loaded, empty snapshot as if a login refresh already ran.
    mirror = DataMirror.full()
    mirror.load(InternalData())
    return mirror


@pytest.fixture
def client(config, service, mirror) -> NotifiClient:
    return NotifiClient(config, service, mirror=mirror, clock=lambda: NOW)
