"""
Pydantic models for the TurboVax dashboard payload.

Pydantic-модели ответа дашборда: районы, порталы, локации и снимок состояния.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
)

from .errors import DecodeError


class Area(str, Enum):
    """Region of a location. Values are the exact strings used by the dashboard."""

    BRONX = "Bronx"
    BROOKLYN = "Brooklyn"
    MANHATTAN = "Manhattan"
    QUEENS = "Queens"
    STATEN_ISLAND = "Staten Island"
    LONG_ISLAND = "Long Island"
    MID_HUDSON = "Mid-Hudson"

    def __str__(self) -> str:
        return self.value


class PortalType(str, Enum):
    CLINIC = "clinic"
    GOVERNMENT = "government"
    PHARMACY = "pharmacy"

    def __str__(self) -> str:
        return self.value


class Appointments(BaseModel):
    """Open slots at a location."""

    model_config = ConfigDict(frozen=True)

    count: Annotated[int, Field(strict=True, ge=0)]
    summary: Optional[StrictStr] = None


class Location(BaseModel):
    """Single appointment site as reported in one snapshot."""

    model_config = ConfigDict(frozen=True)

    id: StrictStr
    name: StrictStr
    area: Area
    portal: StrictStr
    active: StrictBool
    available: StrictBool
    appointments: Appointments
    last_available_at: Optional[AwareDatetime] = None
    updated_at: Optional[AwareDatetime] = None


class Portal(BaseModel):
    """Booking channel referenced by ``Location.portal``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: StrictStr
    name: StrictStr
    url: StrictStr
    portal_type: PortalType = Field(alias="type")


class Snapshot(BaseModel):
    """Full dashboard state for one poll cycle."""

    model_config = ConfigDict(frozen=True)

    last_updated_at: AwareDatetime
    locations: List[Location]
    portals: List[Portal]

    def find_portal(self, key: str) -> Optional[Portal]:
        """Return the first portal with ``key`` or None; dangling references are normal."""
        return next((portal for portal in self.portals if portal.key == key), None)


class MonitorState(BaseModel):
    """State of monitoring loop, used internally."""

    cycles_count: int = 0
    last_cycle_at: Optional[datetime] = None
    last_snapshot_at: Optional[datetime] = None
    notifications_sent: int = 0


def _describe(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        loc = ".".join(str(p) for p in item["loc"]) or "<root>"
        parts.append(f"{loc}: {item['msg']}")
    return "; ".join(parts)


def decode_snapshot(text: str | bytes) -> Snapshot:
    """
    Decode raw dashboard JSON into a Snapshot.

    Raises DecodeError naming each violated field (missing, wrong type, unknown enum value).
    """
    try:
        return Snapshot.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"Malformed dashboard payload: {_describe(e)}") from e


__all__ = [
    "Area",
    "PortalType",
    "Appointments",
    "Location",
    "Portal",
    "Snapshot",
    "MonitorState",
    "decode_snapshot",
]
