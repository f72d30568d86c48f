"""
Request options for the directions and map matching endpoints.

`Options` is the shared request record and doubles as the directions request;
`MatchOptions` adds the map matching fields. The two are a closed set of
variants tagged by `kind`, and everything that differs between them (leg
separators, extra query items, endpoint path, equality) is looked up in
`_VARIANTS` by that tag rather than overridden per class.
"""

import warnings
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Iterable, List, NamedTuple, Optional, Tuple

import polyline
from pydantic import ConfigDict, Field, ValidationError, field_validator, model_validator

from wayroute.core.settings import get_settings
from wayroute.models.base import DocumentModel, format_bool, format_number
from wayroute.models.location import GeoPoint, LocationReading
from wayroute.models.waypoint import Waypoint


class DirectionsProfileIdentifier(str, Enum):
    AUTOMOBILE = "mapbox/driving"
    AUTOMOBILE_AVOIDING_TRAFFIC = "mapbox/driving-traffic"
    CYCLING = "mapbox/cycling"
    WALKING = "mapbox/walking"


class OptionsKind(str, Enum):
    DIRECTIONS = "directions"
    MATCH = "match"


class ShapeFormat(str, Enum):
    GEOJSON = "geojson"
    POLYLINE = "polyline"
    POLYLINE6 = "polyline6"


class RouteShapeResolution(str, Enum):
    NONE = "none"
    LOW = "low"
    FULL = "full"


class AttributeOption(str, Enum):
    DISTANCE = "distance"
    EXPECTED_TRAVEL_TIME = "duration"
    SPEED = "speed"
    CONGESTION_LEVEL = "congestion"
    MAXIMUM_SPEED_LIMIT = "maxspeed"


class MeasurementSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class CoordinateFormat(str, Enum):
    """How waypoint coordinates are written into the request path."""
    PLAIN = "plain"
    POLYLINE = "polyline"
    POLYLINE6 = "polyline6"


class QueryItem(NamedTuple):
    name: str
    value: str


_OVERVIEW_VALUES = {
    RouteShapeResolution.NONE: "false",
    RouteShapeResolution.LOW: "simplified",
    RouteShapeResolution.FULL: "full",
}

_POLYLINE_PRECISION = {
    CoordinateFormat.POLYLINE: 5,
    CoordinateFormat.POLYLINE6: 6,
}

# Fields compared by Options equality; map matching adds its own on top
_SHARED_FIELDS = (
    "waypoints",
    "profile_identifier",
    "includes_steps",
    "shape_format",
    "route_shape_resolution",
    "attribute_options",
    "locale",
    "includes_spoken_instructions",
    "distance_measurement_system",
    "includes_visual_instructions",
)


def _default_profile_identifier() -> str:
    return get_settings().DEFAULT_PROFILE_IDENTIFIER


class Options(DocumentModel):
    """
    Criteria for a directions request.

    The service requires between 2 and 25 waypoints; that range is left for
    the service to enforce and is not checked here.
    """

    kind: ClassVar[OptionsKind] = OptionsKind.DIRECTIONS

    waypoints: List[Waypoint] = Field(..., description="Ordered waypoints the route visits")
    profile_identifier: str = Field(
        default_factory=_default_profile_identifier,
        alias="profileIdentifier",
        description="Mode of travel, e.g. mapbox/driving",
    )
    includes_steps: bool = Field(default=False, alias="includesSteps")
    shape_format: ShapeFormat = Field(default=ShapeFormat.POLYLINE, alias="shapeFormat")
    route_shape_resolution: RouteShapeResolution = Field(
        default=RouteShapeResolution.LOW, alias="routeShapeResolution"
    )
    attribute_options: List[AttributeOption] = Field(
        default_factory=list, alias="attributeOptions"
    )
    locale: str = Field(default="en", description="Language of instructions")
    includes_spoken_instructions: bool = Field(
        default=False, alias="includesSpokenInstructions"
    )
    distance_measurement_system: MeasurementSystem = Field(
        default=MeasurementSystem.METRIC, alias="distanceMeasurementSystem"
    )
    includes_visual_instructions: bool = Field(
        default=False, alias="includesVisualInstructions"
    )

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("profile_identifier", mode="before")
    @classmethod
    def profile_identifier_value(cls, v: Any) -> Any:
        if isinstance(v, Enum):
            return v.value
        return v

    @field_validator("waypoints")
    @classmethod
    def own_waypoints(cls, v: List[Waypoint]) -> List[Waypoint]:
        # Options hold their waypoints by value
        return [waypoint.model_copy(deep=True) for waypoint in v]

    @classmethod
    def from_coordinates(
        cls, coordinates: Iterable[GeoPoint], profile_identifier: Optional[str] = None, **kwargs
    ) -> "Options":
        """Build options with one default waypoint per coordinate."""
        waypoints = [Waypoint(coordinate=coordinate) for coordinate in coordinates]
        return cls._with_waypoints(waypoints, profile_identifier, **kwargs)

    @classmethod
    def from_locations(
        cls, locations: Iterable[LocationReading], profile_identifier: Optional[str] = None, **kwargs
    ) -> "Options":
        """Build options with one waypoint per device position fix."""
        waypoints = [Waypoint.from_location(location) for location in locations]
        return cls._with_waypoints(waypoints, profile_identifier, **kwargs)

    @classmethod
    def _with_waypoints(
        cls, waypoints: List[Waypoint], profile_identifier: Optional[str], **kwargs
    ) -> "Options":
        if profile_identifier is not None:
            kwargs["profile_identifier"] = profile_identifier
        return cls(waypoints=waypoints, **kwargs)

    @property
    def leg_separators(self) -> List[Waypoint]:
        """The waypoints at which the resulting routes end one leg and start the next."""
        return _VARIANTS[self.kind].leg_separators(self)

    @property
    def url_query_items(self) -> List[QueryItem]:
        return _shared_query_items(self) + _VARIANTS[self.kind].extra_query_items(self)

    @property
    def abridged_path(self) -> str:
        return f"{_VARIANTS[self.kind].path_segment}/{self.profile_identifier}"

    def coordinates_description(
        self, coordinate_format: CoordinateFormat = CoordinateFormat.PLAIN, precision: Optional[int] = None
    ) -> str:
        coordinate_format = CoordinateFormat(coordinate_format)
        if coordinate_format is CoordinateFormat.PLAIN:
            if precision is None:
                precision = get_settings().COORDINATE_PRECISION
            return ";".join(
                waypoint.coordinate.request_description(precision) for waypoint in self.waypoints
            )

        encoded = polyline.encode(
            [(waypoint.coordinate.latitude, waypoint.coordinate.longitude) for waypoint in self.waypoints],
            _POLYLINE_PRECISION[coordinate_format],
        )
        return f"{coordinate_format.value}({encoded})"

    def path(
        self, coordinate_format: CoordinateFormat = CoordinateFormat.PLAIN, precision: Optional[int] = None
    ) -> str:
        """Request path, relative to the API host and without the query string."""
        return f"{self.abridged_path}/{self.coordinates_description(coordinate_format, precision)}.json"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Options):
            return NotImplemented
        if self.kind != other.kind:
            return False
        equality_key = _VARIANTS[self.kind].equality_key
        return equality_key(self) == equality_key(other)


class MatchOptions(Options):
    """Criteria for matching a trace of locations against the road network."""

    kind: ClassVar[OptionsKind] = OptionsKind.MATCH
    _required_document_keys: ClassVar[Tuple[str, ...]] = ("tidy",)

    resamples_traces: bool = Field(
        default=False,
        alias="tidy",
        description="Whether the service re-samples the input locations before matching",
    )
    # Deprecated: set Waypoint.separates_legs instead. When present this takes
    # precedence over every waypoint's separates_legs flag.
    waypoint_indices: Optional[List[int]] = Field(
        default=None,
        alias="waypointIndices",
        description="Deprecated. Indices of the waypoints that separate legs",
    )

    @field_validator("waypoint_indices")
    @classmethod
    def normalize_waypoint_indices(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        if v is None:
            return None
        warnings.warn(
            "MatchOptions.waypoint_indices is deprecated; use Waypoint.separates_legs instead.",
            DeprecationWarning,
        )
        return sorted(set(v))

    @model_validator(mode="after")
    def check_waypoint_indices(self) -> "MatchOptions":
        _check_waypoint_indices(self.waypoint_indices, len(self.waypoints))
        return self

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in _INDEX_BOUND_FIELDS:
            super().__setattr__(name, value)
            return

        # Either field can invalidate the other; keep the old value until both agree
        previous = self.__dict__.get(name)
        try:
            super().__setattr__(name, value)
        except ValidationError:
            self.__dict__[name] = previous
            raise
        try:
            _check_waypoint_indices(self.waypoint_indices, len(self.waypoints))
        except ValueError as e:
            self.__dict__[name] = previous
            raise ValidationError.from_exception_data(
                type(self).__name__,
                [{"type": "value_error", "loc": (name,), "input": value, "ctx": {"error": e}}],
            ) from e


_INDEX_BOUND_FIELDS = ("waypoints", "waypoint_indices")


def _check_waypoint_indices(indices: Optional[List[int]], waypoint_count: int) -> None:
    if indices is None:
        return

    last_index = waypoint_count - 1
    out_of_range = [index for index in indices if index < 0 or index > last_index]
    if out_of_range:
        raise ValueError(
            f"waypoint_indices {out_of_range} are outside the {waypoint_count} waypoints"
        )
    if not indices or indices[0] != 0 or indices[-1] != last_index:
        raise ValueError(
            f"waypoint_indices must contain the first (0) and last ({last_index}) index"
        )


# Variant behaviour


class _VariantBehavior(NamedTuple):
    leg_separators: Callable[[Options], List[Waypoint]]
    extra_query_items: Callable[[Options], List[QueryItem]]
    path_segment: str
    equality_key: Callable[[Options], Tuple[Any, ...]]


def _legacy_waypoint_indices(options: Options) -> Optional[List[int]]:
    return getattr(options, "waypoint_indices", None)


def _flagged_separator_indices(options: Options) -> List[int]:
    # The first and last waypoint always separate legs, whatever their flag says
    last_index = len(options.waypoints) - 1
    return [
        index
        for index, waypoint in enumerate(options.waypoints)
        if index in (0, last_index) or waypoint.separates_legs
    ]


def _flagged_leg_separators(options: Options) -> List[Waypoint]:
    return [options.waypoints[index] for index in _flagged_separator_indices(options)]


def _match_leg_separators(options: MatchOptions) -> List[Waypoint]:
    indices = _legacy_waypoint_indices(options)
    if indices is None:
        return _flagged_leg_separators(options)
    return [options.waypoints[index] for index in indices]


def _radius(waypoint: Waypoint) -> str:
    if waypoint.coordinate_accuracy >= 0:
        return format_number(waypoint.coordinate_accuracy)
    return "unlimited"


def _shared_query_items(options: Options) -> List[QueryItem]:
    waypoints = options.waypoints
    query_items = [
        QueryItem("geometries", options.shape_format.value),
        QueryItem("overview", _OVERVIEW_VALUES[options.route_shape_resolution]),
        QueryItem("steps", format_bool(options.includes_steps)),
        QueryItem("language", options.locale),
    ]

    if any(not waypoint.allows_arriving_on_opposite_side for waypoint in waypoints):
        approaches = [
            "unrestricted" if waypoint.allows_arriving_on_opposite_side else "curb"
            for waypoint in waypoints
        ]
        query_items.append(QueryItem("approaches", ";".join(approaches)))

    if options.includes_spoken_instructions:
        query_items.append(QueryItem("voice_instructions", format_bool(True)))
        query_items.append(QueryItem("voice_units", options.distance_measurement_system.value))

    if options.includes_visual_instructions:
        query_items.append(QueryItem("banner_instructions", format_bool(True)))

    if any(waypoint.heading >= 0 for waypoint in waypoints):
        bearings = [waypoint.heading_description for waypoint in waypoints]
        query_items.append(QueryItem("bearings", ";".join(bearings)))

    if any(waypoint.coordinate_accuracy >= 0 for waypoint in waypoints):
        query_items.append(QueryItem("radiuses", ";".join(_radius(w) for w in waypoints)))

    if options.attribute_options:
        annotations = [attribute.value for attribute in options.attribute_options]
        query_items.append(QueryItem("annotations", ",".join(annotations)))

    # A legacy index set is emitted by the match variant instead
    if _legacy_waypoint_indices(options) is None:
        indices = _flagged_separator_indices(options)
        if len(indices) < len(waypoints):
            query_items.append(QueryItem("waypoints", ";".join(str(i) for i in indices)))

    if any(waypoint.name for waypoint in waypoints):
        names = [waypoint.name or "" for waypoint in options.leg_separators]
        query_items.append(QueryItem("waypoint_names", ";".join(names)))

    return query_items


def _match_query_items(options: MatchOptions) -> List[QueryItem]:
    query_items = [QueryItem("tidy", format_bool(options.resamples_traces))]

    indices = _legacy_waypoint_indices(options)
    if indices is not None:
        query_items.append(QueryItem("waypoints", ";".join(str(index) for index in indices)))

    return query_items


def _shared_equality_key(options: Options) -> Tuple[Any, ...]:
    return tuple(getattr(options, field) for field in _SHARED_FIELDS)


def _match_equality_key(options: MatchOptions) -> Tuple[Any, ...]:
    return _shared_equality_key(options) + (options.abridged_path, options.resamples_traces)


_VARIANTS: Dict[OptionsKind, _VariantBehavior] = {
    OptionsKind.DIRECTIONS: _VariantBehavior(
        leg_separators=_flagged_leg_separators,
        extra_query_items=lambda options: [],
        path_segment="directions/v5",
        equality_key=_shared_equality_key,
    ),
    OptionsKind.MATCH: _VariantBehavior(
        leg_separators=_match_leg_separators,
        extra_query_items=_match_query_items,
        path_segment="matching/v5",
        equality_key=_match_equality_key,
    ),
}
