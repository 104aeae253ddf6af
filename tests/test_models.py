import json

import pytest

from hotelbooking.models import (
    Book,
    BookingRepr,
    ClientRepr,
    CreateClient,
    parse_book,
    parse_create_client,
)


def test_client_repr_to_dict():
    assert ClientRepr(3, "Alice Example").to_dict() == {
        "id": 3,
        "fullName": "Alice Example",
    }


def test_booking_repr_to_dict_nests_client():
    client = ClientRepr(3, "Alice Example")
    booking = BookingRepr(7, "Grand Hotel", "100.50", "USD", client, True)
    data = booking.to_dict()
    assert set(data) == {"id", "hotelName", "price", "currency", "client", "paid"}
    assert data["client"] == client.to_dict()
    assert data["hotelName"] == "Grand Hotel"
    assert data["paid"] is True


def test_parse_book_reads_fields():
    body = json.dumps(
        {"hotelName": "Grand Hotel", "price": "100.50", "currency": "USD", "clientId": 4}
    ).encode()
    assert parse_book(body) == Book("Grand Hotel", "100.50", "USD", 4)


def test_parse_book_defaults():
    assert parse_book(b"{}") == Book()
    assert parse_book("null") == Book()


def test_parse_book_ignores_unknown_and_case():
    assert parse_book('{"HotelName": "Inn", "extra": 1}') == Book(hotel_name="Inn")


@pytest.mark.parametrize(
    "body",
    [
        "not json",
        "[1]",
        '{"clientId": "1"}',
        '{"clientId": 1.5}',
        '{"clientId": true}',
        '{"clientId": 9223372036854775808}',
        '{"price": 100}',
    ],
)
def test_parse_book_rejects_invalid(body):
    with pytest.raises(ValueError):
        parse_book(body)


@pytest.mark.parametrize("name", ["Alice Example", "", "Zoë Ünïcode"])
def test_parse_create_client_round_trip(name):
    assert parse_create_client(json.dumps({"fullName": name})) == CreateClient(name)


def test_parse_create_client_rejects_wrong_type():
    with pytest.raises(ValueError):
        parse_create_client('{"fullName": 5}')