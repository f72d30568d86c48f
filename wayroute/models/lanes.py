from enum import IntFlag
from functools import reduce
from typing import Annotated, Any, Iterable, List, Tuple
from pydantic import Field, PlainSerializer, PlainValidator

from wayroute.models.base import DocumentModel, UnrecognizedLaneIndicationError

# Token the service sends for a lane without markings
NO_INDICATION = "none"


class LaneIndication(IntFlag):
    """The directions a lane marking allows. Bit 0 is unused."""

    SHARP_RIGHT = 1 << 1
    RIGHT = 1 << 2
    SLIGHT_RIGHT = 1 << 3
    STRAIGHT_AHEAD = 1 << 4
    SLIGHT_LEFT = 1 << 5
    LEFT = 1 << 6
    SHARP_LEFT = 1 << 7
    U_TURN = 1 << 8

    @classmethod
    def from_descriptions(cls, descriptions: Iterable[str]) -> "LaneIndication":
        """
        Decode the service's description strings.

        Raises UnrecognizedLaneIndicationError on any token outside the
        documented set, since that means the API changed underneath us.
        """
        return reduce(_insert_description, descriptions, cls(0))

    @property
    def descriptions(self) -> List[str]:
        return [description for flag, description in _CANONICAL_DESCRIPTIONS if flag in self]

    def __str__(self) -> str:
        return ",".join(self.descriptions)


# Emission order of the wire encoding, shared by encoding and decoding
_CANONICAL_DESCRIPTIONS: Tuple[Tuple[LaneIndication, str], ...] = (
    (LaneIndication.SHARP_RIGHT, "sharp right"),
    (LaneIndication.RIGHT, "right"),
    (LaneIndication.SLIGHT_RIGHT, "slight right"),
    (LaneIndication.STRAIGHT_AHEAD, "straight"),
    (LaneIndication.SLIGHT_LEFT, "slight left"),
    (LaneIndication.LEFT, "left"),
    (LaneIndication.SHARP_LEFT, "sharp left"),
    (LaneIndication.U_TURN, "uturn"),
)

_FLAGS_BY_DESCRIPTION = {description: flag for flag, description in _CANONICAL_DESCRIPTIONS}


def _insert_description(indication: LaneIndication, description: str) -> LaneIndication:
    if description == NO_INDICATION:
        return indication
    try:
        return indication | _FLAGS_BY_DESCRIPTION[description]
    except (KeyError, TypeError):
        raise UnrecognizedLaneIndicationError(description) from None


def _validate_indications(value: Any) -> LaneIndication:
    if isinstance(value, LaneIndication):
        return value
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Expected a list of lane indication strings, got {type(value).__name__}")
    return LaneIndication.from_descriptions(value)


LaneIndications = Annotated[
    LaneIndication,
    PlainValidator(_validate_indications),
    PlainSerializer(lambda indication: indication.descriptions, return_type=List[str]),
]


class Lane(DocumentModel):
    """One lane of a road at an intersection."""

    indications: LaneIndications
    is_valid: bool = Field(
        ..., alias="valid", description="Whether the lane can be taken to follow the route"
    )
