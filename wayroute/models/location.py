from typing import Any, List
from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from wayroute.models.base import format_number


class GeoPoint(BaseModel):
    """A geographic coordinate. Documents carry it as a [longitude, latitude] pair."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def from_coordinate_pair(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            if len(data) != 2:
                raise ValueError(
                    f"Expected a [longitude, latitude] pair, got {len(data)} values"
                )
            longitude, latitude = data
            return {"latitude": latitude, "longitude": longitude}
        return data

    @model_serializer
    def to_coordinate_pair(self) -> List[float]:
        return [self.longitude, self.latitude]

    def request_description(self, precision: int = 6) -> str:
        return (
            f"{format_number(self.longitude, precision)},"
            f"{format_number(self.latitude, precision)}"
        )


class LocationReading(BaseModel):
    """A position fix reported by the device's location services."""
    coordinate: GeoPoint
    horizontal_accuracy: float = Field(
        default=-1, description="Radius of uncertainty in meters; negative if unknown"
    )


class HeadingReading(BaseModel):
    """A compass reading. Negative values mean the reading is unavailable."""
    true_heading: float = Field(default=-1, description="Degrees clockwise from true north")
    magnetic_heading: float = Field(default=-1, description="Degrees clockwise from magnetic north")
