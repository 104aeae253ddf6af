from unittest import mock

import pytest
import sqlalchemy as sa

from hotelbooking.config import DBConfig
from hotelbooking.db import (
    BookingDb,
    DBBooking,
    DBPayment,
    NotFoundError,
    PaymentStatus,
    connection_url,
    init_database,
)

TABLES = {"client", "booking", "payment"}


@pytest.fixture
def engine(tmp_path):
    eng = sa.create_engine(f"sqlite:///{tmp_path / 'booking.db'}")
    yield eng
    eng.dispose()


@pytest.fixture
def store(engine):
    db = BookingDb(engine)
    db.migrate()
    return db


def _client(store, name="Alice Example"):
    store.insert_client(name)
    return store.get_all_clients()[-1]


def test_migrate_is_idempotent(store, engine):
    client = _client(store)
    store.migrate()
    assert set(sa.inspect(engine).get_table_names()) == TABLES
    assert store.get_all_clients() == [client]


def test_insert_and_list_clients(store):
    assert store.get_all_clients() == []
    store.insert_client("Alice Example")
    store.insert_client("Bob Example")
    clients = store.get_all_clients()
    assert [c.full_name for c in clients] == ["Alice Example", "Bob Example"]
    assert len({c.id for c in clients}) == 2


def test_get_client_round_trip(store):
    client = _client(store)
    assert store.get_client(client.id) == client


def test_get_client_missing(store):
    with pytest.raises(NotFoundError, match="client not found"):
        store.get_client(42)


def test_register_and_get_booking(store):
    client = _client(store)
    booking_id = store.register_booking("Grand Hotel", "100.50", "USD", client.id)
    expected = DBBooking(booking_id, "Grand Hotel", "100.50", "USD", client.id)
    assert store.get_booking(booking_id) == expected
    assert store.get_all_bookings() == [expected]


def test_bookings_get_distinct_ids(store):
    client = _client(store)
    first = store.register_booking("Inn", "10", "EUR", client.id)
    second = store.register_booking("Lodge", "20", "EUR", client.id)
    assert first != second
    assert [b.id for b in store.get_all_bookings()] == [first, second]


def test_get_booking_missing(store):
    with pytest.raises(NotFoundError, match="booking not found"):
        store.get_booking(42)


def test_payment_lifecycle(store):
    client = _client(store)
    booking_id = store.register_booking("Grand Hotel", "100.50", "USD", client.id)
    payment_id = store.create_payment(booking_id)
    assert store.get_payment(booking_id) == DBPayment(payment_id, booking_id, "CREATED")
    store.update_payment(payment_id, PaymentStatus.FULFILLED)
    assert store.get_payment(booking_id).status == PaymentStatus.FULFILLED


def test_update_payment_accepts_plain_string(store):
    client = _client(store)
    booking_id = store.register_booking("Inn", "10", "EUR", client.id)
    payment_id = store.create_payment(booking_id)
    store.update_payment(payment_id, "PARTIALLY_FILLED")
    assert store.get_payment(booking_id).status == PaymentStatus.PARTIALLY_FILLED


def test_get_payment_missing(store):
    with pytest.raises(NotFoundError, match="payment not found"):
        store.get_payment(42)


def test_connection_url():
    password = "password"
    conf = DBConfig(
        host="localhost", port="5432", name="booking", user="user", password=password
    )
    url = connection_url(conf)
    assert url.drivername == "postgresql"
    assert (url.host, url.database, url.username) == ("localhost", "booking", "user")
    assert url.password == password
    assert url.port == int(conf.port)
    assert url.query["sslmode"] == "disable"


def test_connection_url_without_port():
    url = connection_url(DBConfig(host="localhost"))
    assert url.host == "localhost"
    assert url.port is None


def test_init_database_migrates(engine):
    with mock.patch("sqlalchemy.create_engine", return_value=engine) as factory:
        db = init_database(DBConfig(host="localhost", name="booking"))
    assert factory.call_args.args[0].drivername == "postgresql"
    assert db.engine is engine
    assert set(sa.inspect(engine).get_table_names()) == TABLES