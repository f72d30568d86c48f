from functools import reduce
from typing import Iterable, Tuple
from pydantic import ConfigDict, Field

from wayroute.models.base import DocumentModel
from wayroute.models.location import GeoPoint

# (minimum latitude, maximum latitude, minimum longitude, maximum longitude)
_Extent = Tuple[float, float, float, float]

# Inverted extrema, so the first real point always tightens every bound
_EMPTY_EXTENT: _Extent = (90.0, -90.0, 180.0, -180.0)


def _extend(extent: _Extent, point: GeoPoint) -> _Extent:
    min_lat, max_lat, min_lon, max_lon = extent
    return (
        min(min_lat, point.latitude),
        max(max_lat, point.latitude),
        min(min_lon, point.longitude),
        max(max_lon, point.longitude),
    )


class BoundingBox(DocumentModel):
    """
    A rectangular geographic region.

    Corners passed to the constructors are taken as given; only
    `from_coordinates` guarantees a south-west corner that is actually
    south-west of the north-east one.
    """

    south_west: GeoPoint = Field(..., alias="southWest")
    north_east: GeoPoint = Field(..., alias="northEast")

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_corners(cls, north_west: GeoPoint, south_east: GeoPoint) -> "BoundingBox":
        """Build a box from its north-west and south-east corners."""
        return cls(
            south_west=GeoPoint(latitude=south_east.latitude, longitude=north_west.longitude),
            north_east=GeoPoint(latitude=north_west.latitude, longitude=south_east.longitude),
        )

    @classmethod
    def from_coordinates(cls, coordinates: Iterable[GeoPoint]) -> "BoundingBox":
        """
        Build the smallest box containing every coordinate.

        Raises ValueError when fewer than two coordinates are given; callers
        are expected to check this beforehand.
        """
        coordinates = list(coordinates)
        if len(coordinates) < 2:
            raise ValueError("coordinates must consist of at least two coordinates")

        min_lat, max_lat, min_lon, max_lon = reduce(_extend, coordinates, _EMPTY_EXTENT)
        return cls(
            south_west=GeoPoint(latitude=min_lat, longitude=min_lon),
            north_east=GeoPoint(latitude=max_lat, longitude=max_lon),
        )

    def contains(self, point: GeoPoint) -> bool:
        return (
            self.south_west.latitude <= point.latitude <= self.north_east.latitude
            and self.south_west.longitude <= point.longitude <= self.north_east.longitude
        )

    def __str__(self) -> str:
        return (
            f"{self.south_west.longitude},{self.south_west.latitude};"
            f"{self.north_east.longitude},{self.north_east.latitude}"
        )
