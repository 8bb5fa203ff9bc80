"""
Persistent store contract used by the rules engine.

The engine reads loads, drivers and vehicles through ``LoadStore`` only.
Every call is scoped by organization. Lookups return ``None`` for records
that do not exist and raise for every other failure.

``InMemoryLoadStore`` is the reference implementation. Its write methods
enforce the invariants the validators only pre-check: one active load per
driver and per vehicle, unique reference numbers per organization, and no
changes to paid or cancelled loads.
"""

import asyncio
from typing import Iterable, Optional, Protocol, runtime_checkable

import structlog

from dispatch_rules.data.models.load import ACTIVE_ASSIGNMENT_STATUSES, Load, LoadStatus
from dispatch_rules.data.models.resources import Driver, Vehicle
from dispatch_rules.errors.exceptions import (
    AssignmentConflictError,
    DuplicateReferenceError,
    LoadImmutableError,
    RecordNotFoundError,
)


@runtime_checkable
class LoadStore(Protocol):
    """Read contract the validators depend on."""

    async def get_load(self, load_id: str, organization_id: str) -> Optional[Load]: ...

    async def get_driver(self, driver_id: str, organization_id: str) -> Optional[Driver]: ...

    async def get_vehicle(self, vehicle_id: str, organization_id: str) -> Optional[Vehicle]: ...

    async def find_loads(
        self,
        organization_id: str,
        *,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        statuses: Optional[Iterable[LoadStatus]] = None,
        exclude_load_id: Optional[str] = None,
    ) -> list[Load]: ...


class InMemoryLoadStore:
    """
    Dictionary-backed store.

    Writes are serialized with an asyncio lock so the conflict check and the
    assignment happen atomically with respect to other writers.
    """

    def __init__(self, logger: Optional[structlog.BoundLogger] = None) -> None:
        self.logger = logger or structlog.get_logger(component="in_memory_store")
        self._loads: dict[str, Load] = {}
        self._drivers: dict[str, Driver] = {}
        self._vehicles: dict[str, Vehicle] = {}
        self._write_lock = asyncio.Lock()

    # Seeding

    def add_load(self, load: Load) -> Load:
        if not load.load_id:
            raise ValueError("load_id is required to store a load")
        self._loads[load.load_id] = load.model_copy(deep=True)
        return load

    def add_driver(self, driver: Driver) -> Driver:
        self._drivers[driver.driver_id] = driver.model_copy(deep=True)
        return driver

    def add_vehicle(self, vehicle: Vehicle) -> Vehicle:
        self._vehicles[vehicle.vehicle_id] = vehicle.model_copy(deep=True)
        return vehicle

    # Reads

    async def get_load(self, load_id: str, organization_id: str) -> Optional[Load]:
        load = self._loads.get(load_id)
        if load is None or load.organization_id != organization_id:
            return None
        return load.model_copy(deep=True)

    async def get_driver(self, driver_id: str, organization_id: str) -> Optional[Driver]:
        driver = self._drivers.get(driver_id)
        if driver is None or driver.organization_id != organization_id:
            return None
        return driver.model_copy(deep=True)

    async def get_vehicle(self, vehicle_id: str, organization_id: str) -> Optional[Vehicle]:
        vehicle = self._vehicles.get(vehicle_id)
        if vehicle is None or vehicle.organization_id != organization_id:
            return None
        return vehicle.model_copy(deep=True)

    async def find_loads(
        self,
        organization_id: str,
        *,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        statuses: Optional[Iterable[LoadStatus]] = None,
        exclude_load_id: Optional[str] = None,
    ) -> list[Load]:
        status_set = set(statuses) if statuses is not None else None
        matches = []
        for load in self._loads.values():
            if load.organization_id != organization_id:
                continue
            if driver_id is not None and load.driver_id != driver_id:
                continue
            if vehicle_id is not None and load.vehicle_id != vehicle_id:
                continue
            if status_set is not None and load.status not in status_set:
                continue
            if exclude_load_id is not None and load.load_id == exclude_load_id:
                continue
            matches.append(load.model_copy(deep=True))
        return matches

    # Writes

    async def save_load(self, load: Load) -> Load:
        """
        Insert or replace a load.

        Replacing requires the same organization. Reference numbers stay
        unique per organization, and a load saved in an active-assignment
        status must not share its driver or vehicle with another active load.
        """
        async with self._write_lock:
            existing = self._loads.get(load.load_id or "")
            if existing is not None:
                if existing.organization_id != load.organization_id:
                    raise RecordNotFoundError(f"Load {load.load_id} not found")
                if existing.is_terminal:
                    raise LoadImmutableError()

            if load.status in ACTIVE_ASSIGNMENT_STATUSES:
                self._ensure_exclusive(
                    load.load_id, load.organization_id, load.driver_id, load.vehicle_id
                )

            if load.reference_number:
                for other in self._loads.values():
                    if (
                        other.load_id != load.load_id
                        and other.organization_id == load.organization_id
                        and other.reference_number == load.reference_number
                    ):
                        raise DuplicateReferenceError(
                            f"Reference {load.reference_number} already exists"
                        )

            self.add_load(load)
            self.logger.info("load_saved", load_id=load.load_id, status=load.status.value)
            return load

    async def assign_resources(
        self,
        load_id: str,
        organization_id: str,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        status: Optional[LoadStatus] = None,
    ) -> Load:
        """
        Attach a driver and/or vehicle to a load, optionally moving it to
        ``status`` in the same write.

        Conditional write: fails with AssignmentConflictError when either
        resource already holds another load in an active-assignment status.
        """
        async with self._write_lock:
            load = self._get_mutable(load_id, organization_id)
            self._ensure_exclusive(
                load_id,
                organization_id,
                driver_id or load.driver_id,
                vehicle_id or load.vehicle_id,
            )

            if driver_id is not None:
                load.driver_id = driver_id
            if vehicle_id is not None:
                load.vehicle_id = vehicle_id
            if status is not None:
                load.status = status

            self.logger.info(
                "resources_assigned",
                load_id=load_id,
                driver_id=driver_id,
                vehicle_id=vehicle_id,
                status=load.status.value,
            )
            return load.model_copy(deep=True)

    async def update_status(
        self, load_id: str, organization_id: str, status: LoadStatus
    ) -> Load:
        """Persist a status change. Validation is the caller's job."""
        async with self._write_lock:
            load = self._get_mutable(load_id, organization_id)
            if status in ACTIVE_ASSIGNMENT_STATUSES:
                self._ensure_exclusive(load_id, organization_id, load.driver_id, load.vehicle_id)
            load.status = status
            self.logger.info("load_status_updated", load_id=load_id, status=status.value)
            return load.model_copy(deep=True)

    def _get_mutable(self, load_id: str, organization_id: str) -> Load:
        load = self._loads.get(load_id)
        if load is None or load.organization_id != organization_id:
            raise RecordNotFoundError(f"Load {load_id} not found")
        if load.is_terminal:
            raise LoadImmutableError()
        return load

    def _ensure_exclusive(
        self,
        load_id: str,
        organization_id: str,
        driver_id: Optional[str],
        vehicle_id: Optional[str],
    ) -> None:
        """Raise if another active load in the organization holds either resource."""
        for resource, resource_id in (("driver", driver_id), ("vehicle", vehicle_id)):
            if resource_id is None:
                continue
            holders = [
                other.display_reference
                for other in self._loads.values()
                if other.load_id != load_id
                and other.organization_id == organization_id
                and other.status in ACTIVE_ASSIGNMENT_STATUSES
                and getattr(other, f"{resource}_id") == resource_id
            ]
            if holders:
                self.logger.warning(
                    "assignment_conflict_rejected",
                    load_id=load_id,
                    resource=resource,
                    resource_id=resource_id,
                    conflicts=holders,
                )
                raise AssignmentConflictError(resource, resource_id, holders)
