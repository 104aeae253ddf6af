"""HTTP client for the external payment service."""

from __future__ import annotations

import json

import requests

from .config import PaymentConfig

_FULFILLED = "FULFILLED"


class PaymentError(Exception):
    """The payment service could not be reached or answered unexpectedly."""


class PaymentClient:
    """Creates invoices and checks their state on the payment service."""

    def __init__(self, base_url: str, session: requests.Session | None = None) -> None:
        self.base_url = base_url
        self.session = session if session is not None else requests.Session()

    def create_invoice(self, reference: str, volume: str, currency: str) -> None:
        """Create an invoice; the service must answer 202 Accepted."""
        body = json.dumps(
            {"reference": reference, "volume": volume, "currency": currency},
            separators=(",", ":"),
        )
        try:
            response = self.session.post(
                f"{self.base_url}/payment",
                data=body,
                headers={"Content-Type": "application/json"},
            )
        except requests.RequestException as exc:
            raise PaymentError(str(exc)) from exc
        with response:
            if response.status_code != 202:
                raise PaymentError("status is not accepted")

    def check_payment(self, reference: str) -> bool:
        """Return whether the invoice with ``reference`` is fully paid."""
        try:
            response = self.session.get(f"{self.base_url}/payment/{reference}")
        except requests.RequestException as exc:
            raise PaymentError(str(exc)) from exc
        with response:
            if response.status_code != 200:
                raise PaymentError("unsuccessful status code of check payment response")
            try:
                invoice = response.json()
            except ValueError as exc:
                raise PaymentError(f"invalid invoice: {exc}") from exc
        if invoice is None:
            return False
        if not isinstance(invoice, dict):
            raise PaymentError("invalid invoice: expected a JSON object")
        status = invoice.get("status")
        if status is not None and not isinstance(status, str):
            raise PaymentError("invalid invoice: status is not a string")
        return status == _FULFILLED


def create_payment(conf: PaymentConfig) -> PaymentClient:
    """Build a payment client from configuration."""
    return PaymentClient(conf.url)