from wayroute.models.base import (
    DecodingError,
    MissingFieldError,
    RoutingModelError,
    UnrecognizedLaneIndicationError,
)
from wayroute.models.bounds import BoundingBox
from wayroute.models.instructions import SpokenInstruction
from wayroute.models.lanes import Lane, LaneIndication
from wayroute.models.location import GeoPoint, HeadingReading, LocationReading
from wayroute.models.options import (
    AttributeOption,
    CoordinateFormat,
    DirectionsProfileIdentifier,
    MatchOptions,
    MeasurementSystem,
    Options,
    OptionsKind,
    QueryItem,
    RouteShapeResolution,
    ShapeFormat,
)
from wayroute.models.waypoint import Waypoint
