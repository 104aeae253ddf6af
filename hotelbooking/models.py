"""Request and response bodies of the booking API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class ClientRepr:
    """A client as returned by the API."""

    id: int
    full_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "fullName": self.full_name}


@dataclass(frozen=True)
class CreateClient:
    """Body of a request that registers a client."""

    full_name: str = ""


@dataclass(frozen=True)
class BookingRepr:
    """A booking as returned by the API."""

    id: int
    hotel_name: str
    price: str
    currency: str
    client: ClientRepr
    paid: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "hotelName": self.hotel_name,
            "price": self.price,
            "currency": self.currency,
            "client": self.client.to_dict(),
            "paid": self.paid,
        }


@dataclass(frozen=True)
class Book:
    """Body of a request that books a hotel."""

    hotel_name: str = ""
    price: str = ""
    currency: str = ""
    client_id: int = 0


def _decode(data: str | bytes) -> dict[str, Any]:
    value = json.loads(data)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError("expected a JSON object")
    return value


def _lookup(obj: dict[str, Any], key: str) -> Any:
    found = None
    wanted = key.lower()
    for name, value in obj.items():
        if name.lower() == wanted:
            found = value
    return found


def _string(obj: dict[str, Any], key: str) -> str:
    value = _lookup(obj, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{key}: expected a string")
    return value


def _int64(obj: dict[str, Any], key: str) -> int:
    value = _lookup(obj, key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key}: expected an integer")
    if not _INT64_MIN <= value <= _INT64_MAX:
        raise ValueError(f"{key}: integer out of range")
    return value


def parse_create_client(data: str | bytes) -> CreateClient:
    """Decode a client registration body; raises ValueError when it is invalid."""
    obj = _decode(data)
    return CreateClient(full_name=_string(obj, "fullName"))


def parse_book(data: str | bytes) -> Book:
    """Decode a booking request body; raises ValueError when it is invalid."""
    obj = _decode(data)
    return Book(
        hotel_name=_string(obj, "hotelName"),
        price=_string(obj, "price"),
        currency=_string(obj, "currency"),
        client_id=_int64(obj, "clientId"),
    )