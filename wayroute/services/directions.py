from typing import Any, List, Mapping, Optional
from urllib.parse import quote, urlencode
import logging

from wayroute.core.settings import Settings, get_settings
from wayroute.models.base import DecodingError, MissingFieldError
from wayroute.models.options import CoordinateFormat, Options, QueryItem
from wayroute.models.waypoint import Waypoint

logger = logging.getLogger(__name__)

# Separators the service reads literally inside path segments and query values
_SAFE_CHARACTERS = ";,()"


class DirectionsRequestBuilder:
    """
    Turns request options into request URLs and response documents back into
    waypoints. Sending the request is left to the caller's HTTP client.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def query_items(self, options: Options) -> List[QueryItem]:
        query_items = list(options.url_query_items)
        if self.settings.ACCESS_TOKEN:
            query_items.append(QueryItem("access_token", self.settings.ACCESS_TOKEN))
        return query_items

    def url(self, options: Options, coordinate_format: CoordinateFormat = CoordinateFormat.PLAIN) -> str:
        """Full request URL for the options, including the access token if configured."""
        path = options.path(coordinate_format, precision=self.settings.COORDINATE_PRECISION)
        logger.info(
            f"Building {options.kind.value} request for {len(options.waypoints)} waypoints "
            f"with profile '{options.profile_identifier}'"
        )
        if not self.settings.ACCESS_TOKEN:
            logger.warning("No ACCESS_TOKEN configured; the request URL carries no credentials")

        query = urlencode(self.query_items(options), safe=_SAFE_CHARACTERS, quote_via=quote)
        return f"{self.settings.API_BASE_URL}/{quote(path, safe='/' + _SAFE_CHARACTERS)}?{query}"

    def decode_waypoints(self, document: Mapping[str, Any]) -> List[Waypoint]:
        """Decode the `waypoints` array of a response document."""
        if not isinstance(document, Mapping):
            logger.error(f"Response document is a {type(document).__name__}, not an object")
            raise DecodingError(
                f"Expected a response object, got {type(document).__name__}"
            )
        if "waypoints" not in document:
            logger.error("Response document has no 'waypoints' array")
            raise MissingFieldError("waypoints", "response")

        waypoint_documents = document["waypoints"]
        if not isinstance(waypoint_documents, list):
            logger.error(f"Response 'waypoints' is a {type(waypoint_documents).__name__}, not an array")
            raise DecodingError(
                f"Expected 'waypoints' to be an array, got {type(waypoint_documents).__name__}",
                field="waypoints",
            )

        waypoints = []
        for index, waypoint_document in enumerate(waypoint_documents):
            try:
                waypoints.append(Waypoint.from_document(waypoint_document))
            except DecodingError as e:
                field = f"waypoints.{index}" + (f".{e.field}" if e.field else "")
                logger.error(f"Failed to decode response waypoint {index}: {e}")
                raise DecodingError(f"Invalid waypoint at index {index}: {e}", field=field) from e

        logger.info(f"Decoded {len(waypoints)} waypoints from response")
        return waypoints
