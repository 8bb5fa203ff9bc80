"""
Load validator - the single call action handlers make before mutating a load.

Combines the status state machine, assignment requirements, modification
rules, schedule sanity and (for saved loads with resources attached)
availability and compatibility checks. Every check runs and contributes to
one aggregated BusinessRuleResult; nothing short-circuits.
"""

from datetime import datetime
from typing import Any, Optional

import structlog

from dispatch_rules.core.clock import as_utc
from dispatch_rules.data.models.load import Load, LoadStatus
from dispatch_rules.data.models.results import BusinessRuleResult
from dispatch_rules.data.store import LoadStore
from dispatch_rules.rules.assignment import (
    validate_driver_assignment,
    validate_load_modification,
    validate_schedule,
    validate_vehicle_assignment,
)
from dispatch_rules.rules.availability import AvailabilityChecker
from dispatch_rules.rules.base import BaseRuleValidator
from dispatch_rules.rules.compatibility import check_vehicle_compatibility
from dispatch_rules.rules.transitions import validate_status_transition


class LoadValidator(BaseRuleValidator):
    """
    Orchestrates every business rule for a load.

    Usage:
        validator = LoadValidator(store)
        result = await validator.validate_load(load, LoadStatus.ASSIGNED)
        if result.is_valid:
            await store.update_status(load.load_id, load.organization_id, LoadStatus.ASSIGNED)
    """

    def __init__(
        self,
        store: LoadStore,
        availability: Optional[AvailabilityChecker] = None,
        **kwargs: Any,
    ) -> None:
        super().__init__("load", store, **kwargs)
        self.availability = availability or AvailabilityChecker(
            store,
            config_manager=self.config_manager,
            clock=self.clock,
        )

    async def validate(self, load: Load, new_status: Optional[LoadStatus] = None) -> BusinessRuleResult:
        return await self.validate_load(load, new_status)

    async def validate_load(
        self,
        load: Load,
        new_status: Optional[LoadStatus] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BusinessRuleResult:
        """
        Validate a load snapshot, optionally with a requested status change.

        Args:
            load: Current state of the load, including any proposed assignment
            new_status: Status the caller wants to move to
            now: Reference time for date-based checks (defaults to the clock)

        Returns:
            Aggregated BusinessRuleResult of all checks
        """
        result = BusinessRuleResult.passed()
        target_status = new_status or load.status

        if new_status is not None and new_status != load.status:
            result.merge(validate_status_transition(load.status, new_status))

        result.merge(validate_driver_assignment(target_status, load.driver_id))
        result.merge(validate_vehicle_assignment(target_status, load.vehicle_id))
        result.merge(validate_load_modification(load.status))
        result.merge(validate_schedule(load))

        if load.load_id and (load.driver_id or load.vehicle_id):
            result.merge(
                await self._validate_assignment(
                    load, load.driver_id, load.vehicle_id, load.organization_id, now
                )
            )

        self.log_result(
            "load_validated",
            result,
            load_id=load.load_id,
            current_status=load.status.value,
            target_status=target_status.value,
        )
        return result

    async def validate_load_assignment(
        self,
        load_id: str,
        organization_id: str,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BusinessRuleResult:
        """
        Validate proposing a driver and/or vehicle for a stored load.

        Args:
            load_id: Load to assign to
            organization_id: Organization scope of the load and resources
            driver_id: Proposed driver
            vehicle_id: Proposed vehicle
            now: Reference time for date-based checks

        Returns:
            BusinessRuleResult; "Load not found" if the load does not exist
        """
        try:
            load = await self.store.get_load(load_id, organization_id)
        except Exception as e:
            self.logger.error("load_lookup_failed", load_id=load_id, error=str(e))
            return BusinessRuleResult.failed("Failed to validate load assignment")

        if load is None:
            return BusinessRuleResult.failed("Load not found")

        result = await self._validate_assignment(load, driver_id, vehicle_id, organization_id, now)
        self.log_result(
            "load_assignment_validated",
            result,
            load_id=load_id,
            driver_id=driver_id,
            vehicle_id=vehicle_id,
        )
        return result

    async def _validate_assignment(
        self,
        load: Load,
        driver_id: Optional[str],
        vehicle_id: Optional[str],
        organization_id: str,
        now: Optional[datetime],
    ) -> BusinessRuleResult:
        result = BusinessRuleResult.passed()
        today = self.now(now)

        if driver_id:
            result.merge(
                await self.availability.validate_driver_availability(
                    driver_id, organization_id, load.load_id, now=today
                )
            )

        if vehicle_id:
            result.merge(
                await self.availability.validate_vehicle_availability(
                    vehicle_id, organization_id, load.load_id, now=today
                )
            )

            try:
                vehicle = await self.store.get_vehicle(vehicle_id, organization_id)
            except Exception as e:
                self.logger.error(
                    "compatibility_lookup_failed", load_id=load.load_id, vehicle_id=vehicle_id, error=str(e)
                )
                result.add_error("Failed to validate load assignment")
                vehicle = None

            if vehicle is not None:
                result.merge(check_vehicle_compatibility(load.cargo, vehicle))

        pickup, delivery = as_utc(load.pickup_time), as_utc(load.delivery_time)
        if pickup is not None and pickup < today:
            result.add_warning("Pickup date is in the past")
        if delivery is not None and delivery < today:
            result.add_warning("Delivery date is in the past")

        return result


def validate_and_report(
    result: BusinessRuleResult,
    context: str,
    logger: Optional[structlog.BoundLogger] = None,
) -> bool:
    """
    Log a validation outcome for an action handler and gate the write.

    Args:
        result: Outcome of a validation call
        context: What was being attempted (e.g., "assign_driver")
        logger: Optional structured logger

    Returns:
        True when the operation may proceed
    """
    log = logger or structlog.get_logger(context=context)

    if not result.is_valid:
        for error in result.errors:
            log.warning("validation_error", context=context, error=error)
        return False

    for warning in result.warnings:
        log.info("validation_warning", context=context, warning=warning)

    return True


def main() -> None:
    """Example usage of the load validator."""
    import asyncio
    from datetime import timedelta, timezone

    from dispatch_rules.core.logging import configure_logging
    from dispatch_rules.data.models.load import Cargo
    from dispatch_rules.data.models.resources import Driver, Vehicle
    from dispatch_rules.data.store import InMemoryLoadStore

    configure_logging(json_output=False)

    now = datetime.now(timezone.utc)
    store = InMemoryLoadStore()
    store.add_driver(
        Driver(
            driver_id="DRV-001",
            organization_id="org-demo",
            name="Sam Ortiz",
            license_expiration=now + timedelta(days=20),
            medical_card_expiration=now + timedelta(days=300),
        )
    )
    store.add_vehicle(
        Vehicle(
            vehicle_id="TRK-001",
            organization_id="org-demo",
            vehicle_type="dry_van",
            max_weight=40000,
            next_inspection_due=now + timedelta(days=60),
        )
    )
    store.add_load(
        Load(
            load_id="LOAD-001",
            organization_id="org-demo",
            reference_number="PO-88213",
            status=LoadStatus.DISPATCHED,
            driver_id="DRV-001",
            vehicle_id="TRK-001",
        )
    )

    load = Load(
        load_id="LOAD-002",
        organization_id="org-demo",
        reference_number="PO-88240",
        status=LoadStatus.PENDING,
        driver_id="DRV-001",
        vehicle_id="TRK-001",
        cargo=Cargo(weight=42000, equipment_type="reefer"),
        scheduled_pickup=now + timedelta(days=1),
        scheduled_delivery=now + timedelta(days=2),
    )
    store.add_load(load)

    validator = LoadValidator(store)
    result = asyncio.run(validator.validate_load(load, LoadStatus.ASSIGNED))

    print("\n" + "=" * 80)
    print("LOAD VALIDATION RESULTS")
    print("=" * 80)
    print(f"Load: {load.display_reference} ({load.status.value} -> assigned)")
    print(f"Valid: {result.is_valid}")
    if result.errors:
        print("\nErrors:")
        for error in result.errors:
            print(f"  - {error}")
    if result.warnings:
        print("\nWarnings:")
        for warning in result.warnings:
            print(f"  - {warning}")
    print("\n" + "=" * 80)


if __name__ == "__main__":
    main()
