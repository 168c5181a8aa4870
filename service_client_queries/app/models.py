"""
Client data models for the Client Queries service.
"""

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ClientRecord(BaseModel):
    """A client as stored in PostgreSQL and mirrored into the cache.

    ``document`` is the unique key. The cached copy is derived and disposable;
    it serializes with camelCase names (``documentType``, ``creditCard``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    document: str = Field(..., description="Client document number")
    document_type: Optional[str] = Field(None, description="Document type, e.g. CC")
    name: Optional[str] = Field(None, description="Full name")
    phone: Optional[str] = Field(None, description="Phone number")
    email: Optional[str] = Field(None, description="Email address")
    address: Optional[str] = Field(None, description="Postal address")
    credit_card: Optional[str] = Field(None, description="Payment instrument")

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ClientRecord":
        """Convert a database row to a ClientRecord."""
        return cls(
            document=row["document"],
            document_type=row["document_type"],
            name=row["name"],
            phone=row["phone"],
            email=row["email"],
            address=row["address"],
            credit_card=row["credit_card"],
        )

    def to_cache_payload(self) -> str:
        """Serialize to the cache storage representation."""
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_cache_payload(cls, payload: str) -> "ClientRecord":
        """Deserialize from the cache storage representation."""
        return cls.model_validate_json(payload)


class ResponseHeader(BaseModel):
    """Header of the standard response envelope."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    response_code: int
    response_message: str


class ResponseBody(BaseModel):
    """Standard response envelope wrapping a client payload."""

    header: ResponseHeader
    body: Optional[ClientRecord] = None

    @classmethod
    def build(cls, code: int, message: str, body: Optional[ClientRecord] = None) -> "ResponseBody":
        return cls(header=ResponseHeader(response_code=code, response_message=message), body=body)
