from typing import Any, Optional, Union
from pydantic import ConfigDict, Field, field_validator

from wayroute.models.base import DocumentModel, format_number
from wayroute.models.location import GeoPoint, HeadingReading, LocationReading


class Waypoint(DocumentModel):
    """
    A location a route visits: its origin, its destination or a stop in between.

    Accuracy and heading fields use a negative value to mean "unconstrained";
    the service expects exactly that convention, so it is kept as-is.
    """

    coordinate: GeoPoint = Field(..., alias="location")
    coordinate_accuracy: float = Field(
        default=-1,
        alias="coordinateAccuracy",
        description="Maximum distance in meters the route may pass from the coordinate",
    )
    heading: float = Field(
        default=-1,
        description="Direction of approach in degrees clockwise from true north",
    )
    heading_accuracy: float = Field(
        default=-1,
        alias="headingAccuracy",
        description="Allowed deviation from the heading in degrees, either direction",
    )
    name: Optional[str] = Field(
        default=None, description="Label to tell waypoints apart; does not affect the route"
    )
    allows_arriving_on_opposite_side: bool = Field(
        default=True, alias="allowsArrivingOnOppositeSide"
    )
    separates_legs: bool = Field(
        default=True,
        alias="separatesLegs",
        description="Whether the route should end a leg at this waypoint",
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("coordinate_accuracy", "heading", "heading_accuracy", mode="before")
    @classmethod
    def null_is_unconstrained(cls, v: Any) -> Any:
        return -1 if v is None else v

    @field_validator("name")
    @classmethod
    def empty_name_is_absent(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    @classmethod
    def from_location(
        cls,
        location: LocationReading,
        heading: Union[HeadingReading, float, None] = None,
        name: Optional[str] = None,
    ) -> "Waypoint":
        """
        Build a waypoint from a device position fix and an optional heading.

        The fix's horizontal accuracy becomes the coordinate accuracy. A heading
        reading contributes its true heading, falling back to the magnetic
        heading when the true heading is unavailable; negative readings leave
        the heading unconstrained.
        """
        waypoint = cls(
            coordinate=location.coordinate,
            coordinate_accuracy=location.horizontal_accuracy,
            name=name,
        )
        if isinstance(heading, HeadingReading):
            if heading.true_heading >= 0:
                waypoint.heading = heading.true_heading
            elif heading.magnetic_heading >= 0:
                waypoint.heading = heading.magnetic_heading
        elif heading is not None and heading >= 0:
            waypoint.heading = heading
        return waypoint

    @property
    def heading_description(self) -> str:
        if self.heading >= 0 and self.heading_accuracy >= 0:
            return f"{format_number(self.heading % 360)},{format_number(min(self.heading_accuracy, 180))}"
        return ""

    def __eq__(self, other: object) -> bool:
        # Heading and approach flags are request hints, not part of identity
        if not isinstance(other, Waypoint):
            return NotImplemented
        return (
            self.coordinate == other.coordinate
            and self.name == other.name
            and self.coordinate_accuracy == other.coordinate_accuracy
        )

    def __str__(self) -> str:
        if self.name:
            return self.name
        return f"<latitude: {self.coordinate.latitude}; longitude: {self.coordinate.longitude}>"
