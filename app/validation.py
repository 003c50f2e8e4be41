"""
Document schemas for the ticketing collections.

Each collection has a list of required fields and a strict pydantic model
describing the type of every known field. Validation runs from SQLAlchemy
mapper events (see app.models), so every ORM write is checked before it
reaches the database; NOT NULL / CHECK / UNIQUE constraints back it up for
writes that bypass the ORM.

A value of None is treated as an absent field.

Type checks live only in this layer. Inserts that bypass the ORM (Core
insert(), raw SQL) are still held to NOT NULL, CHECK and UNIQUE, but on a
dynamically typed engine such as SQLite they can store a wrong-typed value,
e.g. a string customer_id or images=[1].
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Literal, Optional, Tuple, Type

from pydantic import BaseModel, Field, ValidationError

ADMIN_ROLES = ("admin", "super_admin")
PAYMENT_STATUSES = ("pending", "completed", "failed")
CHECK_IN_STATUSES = ("not_checked_in", "checked_in")


class DocumentValidationError(ValueError):
    """A document does not match its collection schema."""

    def __init__(self, collection: str, errors: List[str]):
        self.collection = collection
        self.errors = errors
        super().__init__(
            f"Document failed validation for '{collection}': " + "; ".join(errors)
        )


class AdminDocument(BaseModel):
    username: Optional[str] = None
    password_hash: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[Literal["admin", "super_admin"]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        strict = True


class CustomerDocument(BaseModel):
    email: Optional[str] = None
    password_hash: Optional[str] = None
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        strict = True


class EventDocument(BaseModel):
    event_name: Optional[str] = None
    event_date: Optional[datetime] = None
    description: Optional[str] = None
    ticket_limit: Optional[int] = Field(default=None, ge=1)
    images: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        strict = True


class TicketDocument(BaseModel):
    customer_id: Optional[int] = None
    event_id: Optional[int] = None
    qr_code_data: Optional[str] = None
    payment_status: Optional[Literal["pending", "completed", "failed"]] = None
    check_in_status: Optional[Literal["not_checked_in", "checked_in"]] = None
    checked_in_at: Optional[datetime] = None
    checked_in_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        strict = True


@dataclass(frozen=True)
class CollectionSchema:
    required: Tuple[str, ...]
    properties: Type[BaseModel]


COLLECTION_SCHEMAS: Dict[str, CollectionSchema] = {
    "admins": CollectionSchema(
        required=("username", "password_hash", "role"),
        properties=AdminDocument,
    ),
    "customers": CollectionSchema(
        required=("email", "password_hash", "full_name"),
        properties=CustomerDocument,
    ),
    "events": CollectionSchema(
        required=("event_name", "event_date", "ticket_limit"),
        properties=EventDocument,
    ),
    "tickets": CollectionSchema(
        required=("customer_id", "event_id", "qr_code_data", "payment_status", "check_in_status"),
        properties=TicketDocument,
    ),
}


def validate_document(collection: str, document: dict, partial: bool = False) -> dict:
    """
    Validate a document against its collection schema.

    With partial=True only the fields present in the document are checked,
    which is what an update of an already stored row needs. Keys that the
    schema does not describe (such as the primary key) are ignored.
    Returns the validated fields with absent ones dropped.
    """
    schema = COLLECTION_SCHEMAS.get(collection)
    if schema is None:
        raise KeyError(f"Unknown collection: {collection}")

    if partial:
        missing = [f for f in schema.required if f in document and document[f] is None]
    else:
        missing = [f for f in schema.required if document.get(f) is None]
    errors = [f"{f}: field is required" for f in missing]

    present = {
        key: value
        for key, value in document.items()
        if value is not None and key in schema.properties.model_fields
    }
    try:
        validated = schema.properties.model_validate(present)
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            errors.append(f"{field}: {err['msg']}")
        validated = None

    if errors:
        raise DocumentValidationError(collection, errors)

    return validated.model_dump(exclude_none=True)
