from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type, TypeVar
from pydantic import BaseModel, ConfigDict, ValidationError
import logging

logger = logging.getLogger(__name__)

DocumentModelT = TypeVar("DocumentModelT", bound="DocumentModel")


# Custom Exception Hierarchy
class RoutingModelError(Exception):
    """Base class for routing request/response model errors."""
    pass


class DecodingError(RoutingModelError, ValueError):
    """A response or options document could not be decoded."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class MissingFieldError(DecodingError):
    """A required wire key is absent from a document."""

    def __init__(self, field: str, document_name: str):
        super().__init__(
            f"Missing required field '{field}' in {document_name} document", field=field
        )


class UnrecognizedLaneIndicationError(DecodingError):
    """The service sent a lane indication token this client does not know."""

    def __init__(self, token: str, field: Optional[str] = None):
        super().__init__(f"Unrecognized lane indication token: {token!r}", field=field)
        self.token = token


def format_number(value: float, precision: int = 6) -> str:
    """Render a number for the wire in fixed point, dropping trailing zeros."""
    text = f"{float(value):.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    # Values that round to zero lose their sign
    return "0" if text == "-0" else text


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def _decoding_error(error: ValidationError, document_name: str) -> DecodingError:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or None

    # Errors raised by our own validators travel inside the pydantic context
    cause = first.get("ctx", {}).get("error")
    if isinstance(cause, DecodingError):
        cause.field = cause.field or field
        return cause

    if first["type"] == "missing":
        return MissingFieldError(field, document_name)
    return DecodingError(
        f"Invalid value for field '{field}' in {document_name} document: {first['msg']}",
        field=field,
    )


class DocumentModel(BaseModel):
    """Base class for models with a structured (camelCase keyed) document form."""

    model_config = ConfigDict(populate_by_name=True)

    # Keys that must be present in a document even though the field has a default
    _required_document_keys: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def from_document(cls: Type[DocumentModelT], document: Mapping[str, Any]) -> DocumentModelT:
        """Decode a document, failing atomically with a DecodingError."""
        document_name = cls.__name__
        if not isinstance(document, Mapping):
            raise DecodingError(
                f"Expected a mapping for {document_name} document, got {type(document).__name__}"
            )

        for key in cls._required_document_keys:
            if key not in document:
                logger.error(f"Missing required field '{key}' in {document_name} document")
                raise MissingFieldError(key, document_name)

        try:
            return cls.model_validate(document)
        except ValidationError as e:
            logger.error(f"Failed to decode {document_name} document: {e}", exc_info=True)
            raise _decoding_error(e, document_name) from e

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
