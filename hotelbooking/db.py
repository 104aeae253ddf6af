"""Persistence of clients, bookings and payments."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

import sqlalchemy as sa
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import DBConfig

log = logging.getLogger(__name__)


class PaymentStatus(str, Enum):
    """States of a booking's payment."""

    CREATED = "CREATED"
    PARTIALLY_FILLED = "PARTIALLY_FILLED"
    FULFILLED = "FULFILLED"


class NotFoundError(LookupError):
    """The requested record does not exist."""


@dataclass(frozen=True)
class DBClient:
    id: int
    full_name: str


@dataclass(frozen=True)
class DBBooking:
    id: int
    hotel_name: str
    price: str
    currency: str
    client_id: int


@dataclass(frozen=True)
class DBPayment:
    id: int
    booking_id: int
    status: str


def _id_type() -> sa.types.TypeEngine:
    return sa.BigInteger().with_variant(sa.Integer(), "sqlite")


_metadata = sa.MetaData()

_clients = sa.Table(
    "client",
    _metadata,
    sa.Column("id", _id_type(), nullable=False, autoincrement=True),
    sa.Column("fullname", sa.String(512), nullable=False),
    sa.PrimaryKeyConstraint("id", name="client_pk"),
)

_bookings = sa.Table(
    "booking",
    _metadata,
    sa.Column("id", _id_type(), nullable=False, autoincrement=True),
    sa.Column("hotel_name", sa.String(512), nullable=False),
    sa.Column("price", sa.String(256), nullable=False),
    sa.Column("currency", sa.CHAR(3), nullable=False),
    sa.Column("client_id", sa.BigInteger(), nullable=False),
    sa.PrimaryKeyConstraint("id", name="booking_pk"),
    sa.ForeignKeyConstraint(["client_id"], ["client.id"], name="booking_fk"),
)

_payments = sa.Table(
    "payment",
    _metadata,
    sa.Column("id", _id_type(), nullable=False, autoincrement=True),
    sa.Column("booking_id", sa.BigInteger(), nullable=False),
    sa.Column("state", sa.String(16), nullable=False),
    sa.PrimaryKeyConstraint("id", name="payment_pk"),
    sa.ForeignKeyConstraint(["booking_id"], ["booking.id"], name="payment_fk"),
)

_MIGRATIONS = (
    (_clients, "Clients migrated!"),
    (_bookings, "Booking migrated!"),
    (_payments, "Payment migrated!"),
)


class BookingDb:
    """Access to the booking database through an SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    def migrate(self) -> None:
        """Create the tables that do not exist yet."""
        for table, message in _MIGRATIONS:
            table.create(self.engine, checkfirst=True)
            log.debug(message)

    def get_all_clients(self) -> list[DBClient]:
        stmt = sa.select(_clients.c.id, _clients.c.fullname).order_by(_clients.c.id)
        with self.engine.connect() as conn:
            return [DBClient(row.id, row.fullname) for row in conn.execute(stmt)]

    def insert_client(self, full_name: str) -> None:
        with self.engine.begin() as conn:
            conn.execute(_clients.insert().values(fullname=full_name))

    def get_client(self, client_id: int) -> DBClient:
        stmt = sa.select(_clients.c.id, _clients.c.fullname).where(
            _clients.c.id == client_id
        )
        with self.engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            raise NotFoundError("client not found")
        return DBClient(row.id, row.fullname)

    def _booking_query(self) -> sa.Select:
        return sa.select(
            _bookings.c.id,
            _bookings.c.hotel_name,
            _bookings.c.price,
            _bookings.c.currency,
            _bookings.c.client_id,
        )

    def get_all_bookings(self) -> list[DBBooking]:
        stmt = self._booking_query().order_by(_bookings.c.id)
        with self.engine.connect() as conn:
            return [DBBooking(*row) for row in conn.execute(stmt)]

    def get_booking(self, booking_id: int) -> DBBooking:
        stmt = self._booking_query().where(_bookings.c.id == booking_id)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            raise NotFoundError("booking not found")
        return DBBooking(*row)

    def register_booking(
        self, hotel_name: str, price: str, currency: str, client_id: int
    ) -> int:
        """Store a booking and return its id."""
        stmt = _bookings.insert().values(
            hotel_name=hotel_name, price=price, currency=currency, client_id=client_id
        )
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
            return int(result.inserted_primary_key[0])

    def create_payment(self, booking_id: int) -> int:
        """Open a payment in state CREATED for a booking and return its id."""
        stmt = _payments.insert().values(
            booking_id=booking_id, state=PaymentStatus.CREATED.value
        )
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
            return int(result.inserted_primary_key[0])

    def get_payment(self, booking_id: int) -> DBPayment:
        stmt = sa.select(
            _payments.c.id, _payments.c.booking_id, _payments.c.state
        ).where(_payments.c.booking_id == booking_id)
        with self.engine.connect() as conn:
            row = conn.execute(stmt).first()
        if row is None:
            raise NotFoundError("payment not found")
        return DBPayment(*row)

    def update_payment(self, payment_id: int, status: PaymentStatus | str) -> None:
        state = status.value if isinstance(status, PaymentStatus) else str(status)
        stmt = _payments.update().where(_payments.c.id == payment_id).values(state=state)
        with self.engine.begin() as conn:
            conn.execute(stmt)


def connection_url(conf: DBConfig) -> URL:
    """Build the PostgreSQL connection URL described by ``conf``."""
    return URL.create(
        "postgresql",
        username=conf.user or None,
        password=conf.password or None,
        host=conf.host or None,
        port=int(conf.port) if conf.port else None,
        database=conf.name or None,
        query={"sslmode": "disable"},
    )


def init_database(conf: DBConfig) -> BookingDb:
    """Open the database and bring its schema up to date."""
    db = BookingDb(sa.create_engine(connection_url(conf)))
    try:
        db.migrate()
    except SQLAlchemyError as exc:
        log.error("Cannot migrate database! %s", exc)
    return db