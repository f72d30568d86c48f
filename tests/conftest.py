"""
Shared pytest fixtures for wayroute tests.
"""

import pytest

from wayroute.core.settings import get_settings
from wayroute.models import GeoPoint, Waypoint


@pytest.fixture(autouse=True)
def fresh_settings():
    """Settings are cached per process; drop the cache around every test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def coordinates():
    return [
        GeoPoint(latitude=38.9131752, longitude=-77.0324047),
        GeoPoint(latitude=38.8906, longitude=-77.0102),
        GeoPoint(latitude=38.8977, longitude=-77.0365),
        GeoPoint(latitude=38.8893, longitude=-77.0502),
        GeoPoint(latitude=38.8816, longitude=-77.0910),
    ]


@pytest.fixture
def waypoints(coordinates):
    return [Waypoint(coordinate=coordinate) for coordinate in coordinates]
