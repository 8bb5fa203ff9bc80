"""
Driver and vehicle data models - the resources assigned to loads.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class DriverStatus(str, Enum):
    """Driver employment status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    ON_LEAVE = "on_leave"
    TERMINATED = "terminated"


class VehicleStatus(str, Enum):
    """Vehicle fleet status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    MAINTENANCE = "maintenance"
    OUT_OF_SERVICE = "out_of_service"


class Driver(BaseModel):
    """A driver and the credentials that gate assignment."""

    driver_id: str
    organization_id: str
    name: Optional[str] = None
    status: DriverStatus = DriverStatus.ACTIVE

    # Compliance
    license_expiration: Optional[datetime] = None
    medical_card_expiration: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == DriverStatus.ACTIVE


class Vehicle(BaseModel):
    """A power unit with its capacity and inspection schedule."""

    vehicle_id: str
    organization_id: str
    unit_number: Optional[str] = None
    status: VehicleStatus = VehicleStatus.ACTIVE

    # Capacity
    vehicle_type: Optional[str] = Field(None, description="Equipment type (e.g., 'dry_van')")
    max_weight: Optional[float] = Field(None, gt=0, description="Max cargo weight in pounds")

    # Compliance
    next_inspection_due: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == VehicleStatus.ACTIVE
