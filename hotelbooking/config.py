"""Service configuration loaded from a JSON file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any

ENV_VAR = "BOOKING_CONFIG_PATH"

_DB_FIELDS = ("host", "port", "name", "user", "password")


@dataclass(frozen=True)
class DBConfig:
    """Connection settings for the booking database."""

    host: str = ""
    port: str = ""
    name: str = ""
    user: str = ""
    password: str = ""


@dataclass(frozen=True)
class PaymentConfig:
    """Location of the payment service."""

    url: str = ""


@dataclass(frozen=True)
class Config:
    """Complete service configuration."""

    db: DBConfig = field(default_factory=DBConfig)
    payment: PaymentConfig = field(default_factory=PaymentConfig)


def _lookup(obj: dict[str, Any], key: str) -> Any:
    """Find a key without regard to case; the last matching key wins."""
    found = None
    wanted = key.lower()
    for name, value in obj.items():
        if name.lower() == wanted:
            found = value
    return found


def _object(value: Any, where: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"{where}: expected a JSON object")
    return value


def _string(obj: dict[str, Any], key: str, where: str) -> str:
    value = _lookup(obj, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"{where}.{key}: expected a string")
    return value


def load_config(path: str | os.PathLike[str]) -> Config:
    """Read and validate the configuration stored at ``path``."""
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    root = _object(data, "config")
    db = _object(_lookup(root, "db"), "db")
    payment = _object(_lookup(root, "payment"), "payment")
    db_values = {key: _string(db, key, "db") for key in _DB_FIELDS}
    return Config(
        db=DBConfig(**db_values),
        payment=PaymentConfig(url=_string(payment, "url", "payment")),
    )


def init_config() -> Config:
    """Load the configuration from the file named by ``BOOKING_CONFIG_PATH``."""
    return load_config(os.environ.get(ENV_VAR, ""))