from pydantic import ConfigDict, Field

from wayroute.models.base import DocumentModel


class SpokenInstruction(DocumentModel):
    """
    An instruction about an upcoming maneuver, optimized for speech synthesis.

    `distance_along_step` is measured from the beginning of the step that
    carries this instruction, while `text` and `ssml_text` describe the
    maneuver of the following step.
    """

    distance_along_step: float = Field(
        ...,
        alias="distanceAlongGeometry",
        description="Distance in meters from the start of the step at which to speak",
    )
    text: str = Field(..., alias="announcement", description="Plain-text instruction")
    ssml_text: str = Field(
        ..., alias="ssmlAnnouncement", description="Instruction marked up as SSML"
    )

    model_config = ConfigDict(frozen=True)
