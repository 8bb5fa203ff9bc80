"""Shared fixtures for the rules engine tests."""
from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from dispatch_rules.core.config import ConfigManager
from dispatch_rules.data.models import Cargo, Driver, Load, LoadStatus, Vehicle
from dispatch_rules.data.store import InMemoryLoadStore
from dispatch_rules.errors.handler import DispatchErrorHandler
from dispatch_rules.rules.availability import AvailabilityChecker
from dispatch_rules.rules.validator import LoadValidator

NOW = datetime(2026, 3, 2, 12, 0, 0)
ORG = "org-acme"


def make_load(load_id: str | None = "L2", **overrides) -> Load:
    fields = {
        "load_id": load_id,
        "organization_id": ORG,
        "reference_number": f"REF-{load_id}" if load_id else None,
        "status": LoadStatus.PENDING,
        "cargo": Cargo(weight=30000, equipment_type="dry_van"),
    }
    fields.update(overrides)
    return Load(**fields)


@pytest.fixture
def config_manager(tmp_path) -> ConfigManager:
    """Config with defaults only (no config.yaml in the directory)."""
    return ConfigManager(config_dir=tmp_path)


@pytest.fixture
def store() -> InMemoryLoadStore:
    store = InMemoryLoadStore()
    store.add_driver(
        Driver(
            driver_id="D1",
            organization_id=ORG,
            name="Dana Reyes",
            license_expiration=NOW + timedelta(days=400),
            medical_card_expiration=NOW + timedelta(days=200),
        )
    )
    store.add_vehicle(
        Vehicle(
            vehicle_id="V1",
            organization_id=ORG,
            unit_number="TRK-101",
            vehicle_type="dry_van",
            max_weight=40000,
            next_inspection_due=NOW + timedelta(days=90),
        )
    )
    return store


@pytest.fixture
def availability(store, config_manager) -> AvailabilityChecker:
    return AvailabilityChecker(store, config_manager=config_manager, clock=lambda: NOW)


@pytest.fixture
def validator(store, config_manager) -> LoadValidator:
    return LoadValidator(store, config_manager=config_manager, clock=lambda: NOW)


class RecordingSleep:
    """Async sleep replacement that records requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def handler(config_manager, sleep) -> DispatchErrorHandler:
    return DispatchErrorHandler(config_manager=config_manager, sleep=sleep)
