"""Tests for directions request options: leg separators, query items, paths."""

import pytest

from wayroute.models import (
    AttributeOption,
    CoordinateFormat,
    DirectionsProfileIdentifier,
    GeoPoint,
    LocationReading,
    MatchOptions,
    MeasurementSystem,
    MissingFieldError,
    Options,
    QueryItem,
    RouteShapeResolution,
    ShapeFormat,
    Waypoint,
)

DEFAULT_QUERY_ITEMS = [
    QueryItem("geometries", "polyline"),
    QueryItem("overview", "simplified"),
    QueryItem("steps", "false"),
    QueryItem("language", "en"),
]


def query_dict(options):
    items = options.url_query_items
    names = [item.name for item in items]
    assert len(names) == len(set(names)), f"Duplicate query items: {names}"
    return dict(items)


class TestLegSeparators:
    def test_every_waypoint_by_default(self, waypoints):
        options = Options(waypoints=waypoints)
        assert options.leg_separators == waypoints

    def test_first_and_last_always_included(self, waypoints):
        for waypoint in waypoints:
            waypoint.separates_legs = False
        options = Options(waypoints=waypoints)
        assert options.leg_separators == [waypoints[0], waypoints[-1]]

    def test_middle_flags_respected(self, waypoints):
        waypoints[1].separates_legs = False
        waypoints[3].separates_legs = False
        options = Options(waypoints=waypoints)
        assert options.leg_separators == [waypoints[0], waypoints[2], waypoints[4]]

    def test_two_waypoints(self, waypoints):
        first, last = waypoints[0], waypoints[-1]
        first.separates_legs = False
        last.separates_legs = False
        assert Options(waypoints=[first, last]).leg_separators == [first, last]

    def test_single_waypoint_not_validated_locally(self, waypoints):
        options = Options(waypoints=waypoints[:1])
        assert options.leg_separators == waypoints[:1]


class TestQueryItems:
    def test_defaults(self, waypoints):
        assert Options(waypoints=waypoints).url_query_items == DEFAULT_QUERY_ITEMS

    def test_shared_attributes(self, waypoints):
        options = Options(
            waypoints=waypoints,
            includes_steps=True,
            shape_format=ShapeFormat.POLYLINE6,
            route_shape_resolution=RouteShapeResolution.FULL,
            locale="de",
            attribute_options=[AttributeOption.CONGESTION_LEVEL, AttributeOption.SPEED],
        )
        items = query_dict(options)
        assert items["geometries"] == "polyline6"
        assert items["overview"] == "full"
        assert items["steps"] == "true"
        assert items["language"] == "de"
        assert items["annotations"] == "congestion,speed"

    def test_no_overview(self, waypoints):
        options = Options(waypoints=waypoints, route_shape_resolution=RouteShapeResolution.NONE)
        assert query_dict(options)["overview"] == "false"

    def test_spoken_and_visual_instructions(self, waypoints):
        options = Options(
            waypoints=waypoints,
            includes_spoken_instructions=True,
            distance_measurement_system=MeasurementSystem.IMPERIAL,
            includes_visual_instructions=True,
        )
        items = query_dict(options)
        assert items["voice_instructions"] == "true"
        assert items["voice_units"] == "imperial"
        assert items["banner_instructions"] == "true"

    def test_approaches(self, waypoints):
        waypoints[2].allows_arriving_on_opposite_side = False
        items = query_dict(Options(waypoints=waypoints))
        assert items["approaches"] == "unrestricted;unrestricted;curb;unrestricted;unrestricted"

    def test_bearings(self, waypoints):
        waypoints[0].heading = 90
        waypoints[0].heading_accuracy = 45
        items = query_dict(Options(waypoints=waypoints))
        assert items["bearings"] == "90,45;;;;"

    def test_radiuses(self, waypoints):
        waypoints[1].coordinate_accuracy = 12.5
        waypoints[4].coordinate_accuracy = 0
        items = query_dict(Options(waypoints=waypoints))
        assert items["radiuses"] == "unlimited;12.5;unlimited;unlimited;0"

    def test_leg_separator_indices(self, waypoints):
        waypoints[1].separates_legs = False
        waypoints[3].separates_legs = False
        items = query_dict(Options(waypoints=waypoints))
        assert items["waypoints"] == "0;2;4"

    def test_waypoint_names_follow_leg_separators(self, waypoints):
        waypoints[0].name = "Logan Circle"
        waypoints[1].separates_legs = False
        waypoints[4].name = "Arlington"
        items = query_dict(Options(waypoints=waypoints))
        assert items["waypoint_names"] == "Logan Circle;;;Arlington"

    def test_optional_items_omitted(self, waypoints):
        items = query_dict(Options(waypoints=waypoints))
        for name in ("approaches", "bearings", "radiuses", "annotations", "waypoints", "waypoint_names"):
            assert name not in items


class TestPaths:
    def test_abridged_path(self, waypoints):
        assert Options(waypoints=waypoints).abridged_path == "directions/v5/mapbox/driving"

    def test_profile_enum_stored_as_string(self, waypoints):
        options = Options(waypoints=waypoints, profile_identifier=DirectionsProfileIdentifier.CYCLING)
        assert options.profile_identifier == "mapbox/cycling"
        assert options.abridged_path == "directions/v5/mapbox/cycling"

    def test_default_profile_from_settings(self, waypoints, monkeypatch):
        monkeypatch.setenv("DEFAULT_PROFILE_IDENTIFIER", "mapbox/walking")
        assert Options(waypoints=waypoints).profile_identifier == "mapbox/walking"

    def test_plain_coordinates(self):
        options = Options.from_coordinates([
            GeoPoint(latitude=38.9131752, longitude=-77.0324047),
            GeoPoint(latitude=38.8906, longitude=-77.0102),
        ])
        assert options.path() == "directions/v5/mapbox/driving/-77.032405,38.913175;-77.0102,38.8906.json"

    def test_coordinate_precision(self):
        options = Options.from_coordinates([
            GeoPoint(latitude=38.9131752, longitude=-77.0324047),
            GeoPoint(latitude=38.8906, longitude=-77.0102),
        ])
        assert options.coordinates_description(precision=2) == "-77.03,38.91;-77.01,38.89"

    def test_coordinates_near_zero_in_fixed_point(self):
        options = Options.from_coordinates([
            GeoPoint(latitude=0.00001, longitude=0.00002),
            GeoPoint(latitude=1, longitude=-0.0000001),
        ])
        assert options.path() == "directions/v5/mapbox/driving/0.00002,0.00001;0,1.json"

    def test_polyline_coordinates(self):
        options = Options.from_coordinates([
            GeoPoint(latitude=38.5, longitude=-120.2),
            GeoPoint(latitude=40.7, longitude=-120.95),
            GeoPoint(latitude=43.252, longitude=-126.453),
        ])
        assert options.coordinates_description(CoordinateFormat.POLYLINE) == "polyline(_p~iF~ps|U_ulLnnqC_mqNvxq`@)"
        assert options.path(CoordinateFormat.POLYLINE6).startswith("directions/v5/mapbox/driving/polyline6(")


class TestConstruction:
    def test_from_coordinates(self, coordinates):
        options = Options.from_coordinates(coordinates, profile_identifier="mapbox/walking")
        assert [w.coordinate for w in options.waypoints] == coordinates
        assert options.profile_identifier == "mapbox/walking"

    def test_from_locations(self, coordinates):
        locations = [LocationReading(coordinate=c, horizontal_accuracy=10) for c in coordinates]
        options = Options.from_locations(locations)
        assert all(w.coordinate_accuracy == 10 for w in options.waypoints)
        assert query_dict(options)["radiuses"] == "10;10;10;10;10"

    def test_waypoints_copied(self, waypoints):
        options = Options(waypoints=waypoints)
        waypoints[0].name = "Changed"
        waypoints[1].separates_legs = False
        assert options.waypoints[0].name is None
        assert options.waypoints[1].separates_legs is True

    def test_copies_independent(self, waypoints):
        options = Options(waypoints=waypoints)
        copy = options.model_copy(deep=True)
        copy.waypoints[0].name = "Changed"
        assert options.waypoints[0].name is None


class TestEquality:
    def test_equal(self, waypoints):
        assert Options(waypoints=waypoints) == Options(waypoints=waypoints)

    def test_waypoint_headings_ignored(self, waypoints):
        first = Options(waypoints=waypoints)
        waypoints[0].heading = 45
        assert first == Options(waypoints=waypoints)

    def test_profile_differs(self, waypoints):
        assert Options(waypoints=waypoints) != Options(waypoints=waypoints, profile_identifier="mapbox/walking")

    def test_attribute_differs(self, waypoints):
        assert Options(waypoints=waypoints) != Options(waypoints=waypoints, includes_steps=True)

    def test_variants_never_equal(self, waypoints):
        assert Options(waypoints=waypoints) != MatchOptions(waypoints=waypoints)


class TestDocument:
    def test_round_trip(self, waypoints):
        waypoints[2].name = "White House"
        options = Options(
            waypoints=waypoints,
            profile_identifier="mapbox/cycling",
            includes_steps=True,
            attribute_options=[AttributeOption.DISTANCE],
        )
        document = options.to_document()
        assert document["profileIdentifier"] == "mapbox/cycling"
        assert document["includesSteps"] is True
        assert document["attributeOptions"] == ["distance"]
        assert document["waypoints"][2]["name"] == "White House"
        assert Options.from_document(document) == options

    def test_missing_waypoints(self):
        with pytest.raises(MissingFieldError) as exc_info:
            Options.from_document({"profileIdentifier": "mapbox/driving"})
        assert exc_info.value.field == "waypoints"

    def test_nested_waypoint_error_names_path(self):
        with pytest.raises(MissingFieldError) as exc_info:
            Options.from_document({"waypoints": [{"location": [1.5, 2.5]}, {"name": "x"}]})
        assert exc_info.value.field == "waypoints.1.location"
