"""
Resource availability checks.

A driver or vehicle is available for a load when it exists in the
organization, is active, is not committed to another active load, and its
compliance dates (license, medical card, inspection) have not passed.
Deadlines inside the warning window produce warnings only.

Store failures are folded into a hard validation failure so callers always
get a BusinessRuleResult back. These checks are a pre-check: the store's
conditional assignment write is what actually enforces exclusivity.
"""

from datetime import datetime, timedelta
from typing import Any, Literal, Optional

from dispatch_rules.core.clock import as_utc
from dispatch_rules.data.models.load import ACTIVE_ASSIGNMENT_STATUSES
from dispatch_rules.data.models.results import BusinessRuleResult
from dispatch_rules.data.store import LoadStore
from dispatch_rules.rules.base import BaseRuleValidator

Resource = Literal["driver", "vehicle"]


class AvailabilityChecker(BaseRuleValidator):
    """Checks drivers and vehicles for double-booking and compliance."""

    def __init__(self, store: LoadStore, **kwargs: Any) -> None:
        super().__init__("availability", store, **kwargs)

    async def validate(
        self,
        resource: Resource,
        resource_id: str,
        organization_id: str,
        exclude_load_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BusinessRuleResult:
        if resource == "driver":
            return await self.validate_driver_availability(
                resource_id, organization_id, exclude_load_id, now=now
            )
        if resource == "vehicle":
            return await self.validate_vehicle_availability(
                resource_id, organization_id, exclude_load_id, now=now
            )
        raise ValueError(f"Unknown resource: {resource}")

    async def validate_driver_availability(
        self,
        driver_id: str,
        organization_id: str,
        exclude_load_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BusinessRuleResult:
        """
        Check that a driver can take a load.

        Args:
            driver_id: Driver to check
            organization_id: Organization the driver must belong to
            exclude_load_id: Load being re-validated, ignored in conflict detection
            now: Reference time for compliance checks (defaults to the clock)

        Returns:
            BusinessRuleResult with conflicts and expired credentials as errors
        """
        result = BusinessRuleResult.passed()
        today = self.now(now)

        try:
            driver = await self.store.get_driver(driver_id, organization_id)
            if driver is None or not driver.is_active:
                result.add_error("Driver not found or inactive")
                self.log_result("driver_availability_checked", result, driver_id=driver_id)
                return result

            await self._check_conflicts(
                result, "driver", driver_id, organization_id, exclude_load_id
            )

            self._check_deadline(
                result, driver.medical_card_expiration, today,
                expired="Driver medical card is expired",
                expiring="Driver medical card expires within {days} days",
            )
            self._check_deadline(
                result, driver.license_expiration, today,
                expired="Driver license is expired",
                expiring="Driver license expires within {days} days",
            )

        except Exception as e:
            self.logger.error(
                "driver_availability_check_failed",
                driver_id=driver_id,
                organization_id=organization_id,
                error=str(e),
            )
            result.add_error("Failed to validate driver availability")

        self.log_result("driver_availability_checked", result, driver_id=driver_id)
        return result

    async def validate_vehicle_availability(
        self,
        vehicle_id: str,
        organization_id: str,
        exclude_load_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> BusinessRuleResult:
        """
        Check that a vehicle can take a load.

        Args:
            vehicle_id: Vehicle to check
            organization_id: Organization the vehicle must belong to
            exclude_load_id: Load being re-validated, ignored in conflict detection
            now: Reference time for the inspection check (defaults to the clock)

        Returns:
            BusinessRuleResult with conflicts and overdue inspection as errors
        """
        result = BusinessRuleResult.passed()
        today = self.now(now)

        try:
            vehicle = await self.store.get_vehicle(vehicle_id, organization_id)
            if vehicle is None or not vehicle.is_active:
                result.add_error("Vehicle not found or inactive")
                self.log_result("vehicle_availability_checked", result, vehicle_id=vehicle_id)
                return result

            await self._check_conflicts(
                result, "vehicle", vehicle_id, organization_id, exclude_load_id
            )

            self._check_deadline(
                result, vehicle.next_inspection_due, today,
                expired="Vehicle inspection is overdue",
                expiring="Vehicle inspection due within {days} days",
            )

        except Exception as e:
            self.logger.error(
                "vehicle_availability_check_failed",
                vehicle_id=vehicle_id,
                organization_id=organization_id,
                error=str(e),
            )
            result.add_error("Failed to validate vehicle availability")

        self.log_result("vehicle_availability_checked", result, vehicle_id=vehicle_id)
        return result

    async def _check_conflicts(
        self,
        result: BusinessRuleResult,
        resource: Resource,
        resource_id: str,
        organization_id: str,
        exclude_load_id: Optional[str],
    ) -> None:
        """Add an error naming every other active load holding the resource."""
        filters = {f"{resource}_id": resource_id}
        conflicting = await self.store.find_loads(
            organization_id,
            statuses=ACTIVE_ASSIGNMENT_STATUSES,
            exclude_load_id=exclude_load_id,
            **filters,
        )
        if conflicting:
            references = ", ".join(load.display_reference for load in conflicting)
            result.add_error(
                f"{resource.capitalize()} is already assigned to active loads: {references}"
            )

    def _check_deadline(
        self,
        result: BusinessRuleResult,
        deadline: Optional[datetime],
        today: datetime,
        expired: str,
        expiring: str,
    ) -> None:
        if deadline is None:
            return

        deadline = as_utc(deadline)
        window_days = self.rules_config.compliance_warning_days
        if deadline < today:
            result.add_error(expired)
        elif deadline < today + timedelta(days=window_days):
            result.add_warning(expiring.format(days=window_days))
