"""HTTP handlers for clients and bookings."""

from __future__ import annotations

import json
import logging
import re
import threading
import time
from typing import Any

from flask import Flask, Response, request

from .db import BookingDb, DBBooking, PaymentStatus
from .models import BookingRepr, ClientRepr, parse_book, parse_create_client
from .payment import PaymentClient

log = logging.getLogger(__name__)

_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE"]
_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _text(body: str, status: int = 200) -> Response:
    return Response(body, status=status, mimetype="text/plain")


def _method_not_allowed() -> Response:
    return _text("Method not allowed!", 405)


def _internal_server_error() -> Response:
    return _text("Internal server error!", 500)


def _bad_request() -> Response:
    return _text("Bad request!", 400)


def _accepted() -> Response:
    return _text("Accepted", 202)


def _to_json(value: Any) -> str:
    """Encode compactly, escaping HTML-sensitive characters inside strings."""
    encoded = json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return "".join(_HTML_ESCAPES.get(char, char) for char in encoded)


def _parse_id(text: str) -> int | None:
    if not _ID_PATTERN.fullmatch(text):
        return None
    value = int(text)
    if not _INT64_MIN <= value <= _INT64_MAX:
        return None
    return value


class ClientHandler:
    """Lists and registers clients."""

    def __init__(self, db: BookingDb) -> None:
        self.db = db

    def handle_clients(self) -> Response:
        if request.method == "GET":
            return self._retrieve_clients()
        if request.method == "POST":
            return self._create_client()
        return _method_not_allowed()

    def _retrieve_clients(self) -> Response:
        try:
            rows = self.db.get_all_clients()
        except Exception as exc:
            log.error("Cannot get all clients! %s", exc)
            return _internal_server_error()
        clients = [ClientRepr(row.id, row.full_name).to_dict() for row in rows]
        return _text(_to_json(clients))

    def _create_client(self) -> Response:
        body = request.get_data()
        try:
            create = parse_create_client(body)
        except ValueError as exc:
            log.error("Invalid body! %s", exc)
            return _bad_request()
        try:
            self.db.insert_client(create.full_name)
        except Exception as exc:
            log.error("Cannot insert client! %s", exc)
            return _internal_server_error()
        return _accepted()


class BookingHandler:
    """Lists, shows and creates bookings, and follows their payments."""

    def __init__(
        self, db: BookingDb, payment: PaymentClient, poll_interval: float = 1.0
    ) -> None:
        self.db = db
        self.payment = payment
        self.poll_interval = poll_interval

    def handle_bookings(self) -> Response:
        if request.method == "GET":
            return self._retrieve_bookings()
        if request.method == "POST":
            return self._perform_book()
        return _method_not_allowed()

    def handle_booking(self, booking_id: str) -> Response:
        if request.method != "GET":
            return _method_not_allowed()
        parsed = _parse_id(booking_id)
        if parsed is None:
            log.debug("Invalid id!")
            return _bad_request()
        try:
            booking = self.db.get_booking(parsed)
        except Exception as exc:
            log.error("Cannot get booking! %s", exc)
            return _internal_server_error()
        try:
            result = self._describe(booking)
        except Exception:
            return _internal_server_error()
        return _text(_to_json(result.to_dict()))

    def _describe(self, booking: DBBooking) -> BookingRepr:
        try:
            client = self.db.get_client(booking.client_id)
        except Exception as exc:
            log.error("Cannot get client! %s", exc)
            raise
        try:
            payment = self.db.get_payment(booking.id)
        except Exception as exc:
            log.error("Cannot get payment! %s", exc)
            raise
        return BookingRepr(
            id=booking.id,
            hotel_name=booking.hotel_name,
            price=booking.price,
            currency=booking.currency,
            client=ClientRepr(client.id, client.full_name),
            paid=payment.status == PaymentStatus.FULFILLED.value,
        )

    def _retrieve_bookings(self) -> Response:
        try:
            bookings = self.db.get_all_bookings()
        except Exception:
            log.debug("Cannot get all bookings!")
            return _internal_server_error()
        try:
            result = [self._describe(booking).to_dict() for booking in bookings]
        except Exception:
            return _internal_server_error()
        return _text(_to_json(result))

    def _perform_book(self) -> Response:
        body = request.get_data()
        try:
            book = parse_book(body)
        except ValueError as exc:
            log.warning("Cannot read body! %s", exc)
            return _bad_request()
        try:
            self.db.get_client(book.client_id)
        except Exception as exc:
            log.warning("Invalid client id! %s", exc)
            return _bad_request()
        try:
            booking_id = self.db.register_booking(
                book.hotel_name, book.price, book.currency, book.client_id
            )
        except Exception as exc:
            log.error("Cannot save booking! %s", exc)
            return _internal_server_error()
        try:
            payment_id = self.db.create_payment(booking_id)
        except Exception as exc:
            log.error("Cannot create payment! %s", exc)
            return _internal_server_error()
        reference = str(payment_id)
        try:
            self.payment.create_invoice(reference, book.price, book.currency)
        except Exception as exc:
            log.error("Cannot create invoice! %s", exc)
            return _internal_server_error()

        threading.Thread(
            target=self._await_payment,
            args=(payment_id, reference),
            name=f"payment-{reference}",
            daemon=True,
        ).start()
        return _text("")

    def _await_payment(self, payment_id: int, reference: str) -> None:
        while True:
            time.sleep(self.poll_interval)
            try:
                paid = self.payment.check_payment(reference)
            except Exception as exc:
                log.error("%s", exc)
                continue
            if paid:
                try:
                    self.db.update_payment(payment_id, PaymentStatus.FULFILLED)
                except Exception as exc:
                    log.error("%s", exc)
                return


def create_app(
    db: BookingDb, payment: PaymentClient, poll_interval: float = 1.0
) -> Flask:
    """Build the web application serving /client and /booking."""
    app = Flask(__name__)
    clients = ClientHandler(db)
    bookings = BookingHandler(db, payment, poll_interval)
    app.add_url_rule(
        "/client",
        endpoint="clients",
        view_func=clients.handle_clients,
        methods=_ALL_METHODS,
        provide_automatic_options=False,
    )
    app.add_url_rule(
        "/booking",
        endpoint="bookings",
        view_func=bookings.handle_bookings,
        methods=_ALL_METHODS,
        provide_automatic_options=False,
    )
    app.add_url_rule(
        "/booking/<booking_id>",
        endpoint="booking",
        view_func=bookings.handle_booking,
        methods=_ALL_METHODS,
        provide_automatic_options=False,
    )
    return app