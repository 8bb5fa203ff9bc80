"""
Load data model - represents a freight shipment moving through dispatch.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class LoadStatus(str, Enum):
    """Load lifecycle status."""

    DRAFT = "draft"
    PENDING = "pending"
    POSTED = "posted"
    BOOKED = "booked"
    CONFIRMED = "confirmed"
    ASSIGNED = "assigned"
    DISPATCHED = "dispatched"
    IN_TRANSIT = "in_transit"
    AT_PICKUP = "at_pickup"
    PICKED_UP = "picked_up"
    EN_ROUTE = "en_route"
    AT_DELIVERY = "at_delivery"
    DELIVERED = "delivered"
    POD_REQUIRED = "pod_required"
    COMPLETED = "completed"
    INVOICED = "invoiced"
    PAID = "paid"
    CANCELLED = "cancelled"
    PROBLEM = "problem"


TERMINAL_STATUSES: frozenset[LoadStatus] = frozenset({LoadStatus.PAID, LoadStatus.CANCELLED})

# Statuses in which a driver and vehicle are committed to the load
# for double-booking purposes.
ACTIVE_ASSIGNMENT_STATUSES: tuple[LoadStatus, ...] = (
    LoadStatus.ASSIGNED,
    LoadStatus.DISPATCHED,
    LoadStatus.IN_TRANSIT,
    LoadStatus.AT_PICKUP,
    LoadStatus.PICKED_UP,
    LoadStatus.EN_ROUTE,
)


class Cargo(BaseModel):
    """What is being hauled and what it needs."""

    weight: Optional[float] = Field(None, gt=0, description="Weight in pounds")
    equipment_type: Optional[str] = Field(
        None, description="Required equipment (e.g., 'reefer', 'dry_van')"
    )
    description: Optional[str] = None


class Load(BaseModel):
    """
    Represents a freight load tracked from booking to payment.

    The engine only reads loads; the store owns their persistence.
    """

    # Identification
    load_id: Optional[str] = Field(None, description="Unique load identifier")
    organization_id: str = Field(..., frozen=True, description="Owning organization")
    reference_number: Optional[str] = Field(None, description="Customer-facing reference")

    # Status and assignment
    status: LoadStatus = Field(LoadStatus.DRAFT, description="Current load status")
    driver_id: Optional[str] = None
    vehicle_id: Optional[str] = None

    cargo: Cargo = Field(default_factory=Cargo)

    # Timing
    scheduled_pickup: Optional[datetime] = None
    scheduled_delivery: Optional[datetime] = None
    actual_pickup: Optional[datetime] = None
    actual_delivery: Optional[datetime] = None

    @property
    def is_terminal(self) -> bool:
        """True once the load is paid or cancelled."""
        return self.status in TERMINAL_STATUSES

    @property
    def pickup_time(self) -> Optional[datetime]:
        return self.actual_pickup or self.scheduled_pickup

    @property
    def delivery_time(self) -> Optional[datetime]:
        return self.actual_delivery or self.scheduled_delivery

    @property
    def display_reference(self) -> str:
        """Reference shown to users; falls back to the load id."""
        return self.reference_number or self.load_id or "<unsaved>"
