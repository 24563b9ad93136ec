"""Customer-related schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Identifiers are stored as signed 64-bit integers.
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


class CustomerPayload(BaseModel):
    """Customer attributes sent by clients on create and full replace.

    Any identifier in the payload is ignored; the server assigns it on create
    and takes it from the path on update.
    """

    name: str = Field(min_length=1, max_length=200)
    email: str | None = Field(default=None, max_length=320)
    phone: str | None = Field(default=None, max_length=50)
    address: str | None = Field(default=None, max_length=500)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        """Reject whitespace-only names."""
        _ = cls
        if not v.strip():
            raise ValueError("Name must not be empty or whitespace-only")
        return v


class CustomerResponse(BaseModel):
    """Stored customer record."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str | None = None
    phone: str | None = None
    address: str | None = None


class ContactCard(BaseModel):
    """Contact summary; every field is required to render a card."""

    name: str
    email: str
