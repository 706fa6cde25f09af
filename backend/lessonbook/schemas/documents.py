"""
LessonBook Backend — Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models for the two domain record kinds (lesson, order) and
       for the JSON bodies the API returns.
How:   Domain validators run incoming payloads through the lesson/order
       models; route decorators use the response models for OpenAPI docs.

Documents are schema-less in storage, so the domain models allow extra
fields and only constrain the ones the booking flow depends on.
"""

from typing import Annotated, Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _not_blank(v: str) -> str:
    if not v.strip():
        raise ValueError("must not be blank")
    return v


NonNegativeNumber = Union[
    Annotated[int, Field(strict=True, ge=0)],
    Annotated[float, Field(strict=True, ge=0)],
]


# ══════════════════════════════════════════════════════════════════════════
# Domain Models — Lesson
# ══════════════════════════════════════════════════════════════════════════


class LessonFields(BaseModel):
    """
    Known lesson attributes, all optional (lesson writes are partial).

    `price` and `spaces` are strict so booleans and numeric strings are
    rejected (a string price would sort above every number in MongoDB).
    Both are bounded at zero.
    """
    model_config = ConfigDict(extra="allow")

    subject: Optional[str] = None
    location: Optional[str] = None
    price: Optional[NonNegativeNumber] = None
    spaces: Optional[int] = Field(default=None, ge=0, strict=True)
    image: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Domain Models — Order (two sub-kinds)
# ══════════════════════════════════════════════════════════════════════════


class _OrderBase(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = Field(description="Customer name")
    phone: str = Field(description="Customer phone number")

    @field_validator("name", "phone")
    @classmethod
    def validate_contact(cls, v: str) -> str:
        return _not_blank(v)


class SpacesOrder(_OrderBase):
    """
    Canonical order shape: the lessons booked and a total space count.

    Example:
        {"name": "Alice", "phone": "12345", "lessonIDs": ["a1"], "spaces": 2}
    """
    lessonIDs: List[str] = Field(min_length=1, description="Identifiers of the booked lessons")
    spaces: int = Field(ge=1, strict=True, description="Total spaces booked")


class OrderLine(BaseModel):
    """One lesson reference with its own quantity."""
    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Lesson identifier")
    quantity: int = Field(ge=1, strict=True)


class AddressOrder(_OrderBase):
    """
    Compatibility order shape: per-lesson quantities plus a postal address.

    Example:
        {"name": "Bob", "phone": "555", "address": "1 High St",
         "lessons": [{"id": "a1", "quantity": 2}]}
    """
    address: str
    lessons: List[OrderLine] = Field(min_length=1)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _not_blank(v)


class OrderFields(BaseModel):
    """
    Known order attributes, all optional, for partial updates through the
    generic collection routes. Supplied fields obey the same rules as on
    create; none of them may be set to null.
    """
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    lessonIDs: Optional[List[str]] = Field(default=None, min_length=1)
    spaces: Optional[int] = Field(default=None, ge=1, strict=True)
    lessons: Optional[List[OrderLine]] = Field(default=None, min_length=1)

    @field_validator("name", "phone", "address", "lessonIDs", "spaces", "lessons", mode="before")
    @classmethod
    def reject_null(cls, v: Any) -> Any:
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("name", "phone", "address")
    @classmethod
    def validate_text(cls, v: str) -> str:
        return _not_blank(v)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class CreatedResponse(BaseModel):
    """Returned by every create route with HTTP 201."""
    message: str
    id: str = Field(description="Store-assigned document identifier (24-char hex)")


class UpdatedResponse(BaseModel):
    message: str
    matched: int = Field(description="Documents matched by the id filter (0 or 1)")
    modified: int = Field(description="Documents actually changed (0 when values were identical)")


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Error body shared by every failure path.

    Example:
        {"error": "Collection \\"widgets\\" does not exist."}

    The request id is returned in the X-Request-ID header, not the body.
    """
    error: str = Field(description="Human-readable error description")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
