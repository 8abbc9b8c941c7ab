"""Shared Pydantic models: the user record and the response envelope."""

from __future__ import annotations

from typing import Any, Generic, Literal, Mapping, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class UserBase(BaseModel):
    """Client-supplied fields. Unknown keys, ``id`` included, are ignored."""

    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    title: str = Field(min_length=1)

    def to_document(self) -> dict[str, str]:
        return {"name": self.name, "location": self.location, "title": self.title}


class User(BaseModel):
    # defaults make User() the zero-value record returned for unmatched ids
    id: str = ""
    name: str = ""
    location: str = ""
    title: str = ""

    @classmethod
    def from_document(cls, doc: Mapping[str, Any]) -> "User":
        fields = {k: v for k, v in doc.items() if k != "_id"}
        if "_id" in doc:
            fields["id"] = str(doc["_id"])
        return cls.model_validate(fields)


class InsertResult(BaseModel):
    inserted_id: str


class HealthResponse(BaseModel):
    status: str
    service: str


class Envelope(BaseModel, Generic[T]):
    status: int
    message: Literal["success", "error"]
    data: T

    @classmethod
    def success(cls, status: int, data: Any) -> "Envelope":
        return cls(status=status, message="success", data=data)

    @classmethod
    def error(cls, status: int, detail: str) -> "Envelope[str]":
        return Envelope[str](status=status, message="error", data=detail)
