import json
from unittest.mock import patch

import pytest
import sqlalchemy

from hotelbooking.app import build_app, main
from hotelbooking.config import ENV_VAR, Config, DBConfig, PaymentConfig


def last_log_entry(output):
    lines = [line for line in output.splitlines() if line.strip()]
    return json.loads(lines[-1])


def test_main_without_config_file(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv(ENV_VAR, str(tmp_path / "missing.json"))
    with pytest.raises(FileNotFoundError):
        main([])
    entry = last_log_entry(capsys.readouterr().out)
    assert entry["level"] == "error"
    assert entry["msg"].startswith("Error on loading config!")


def test_main_with_bad_database_port(tmp_path, monkeypatch, capsys):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "db": {"host": "localhost", "port": "abc", "name": "booking"},
                "payment": {"url": "http://payments.example.com"},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv(ENV_VAR, str(path))
    with pytest.raises(ValueError):
        main([])
    entry = last_log_entry(capsys.readouterr().out)
    assert entry["level"] == "error"
    assert entry["msg"].startswith("Error on initializing database!")


def test_main_rejects_unknown_arguments():
    with pytest.raises(SystemExit) as info:
        main(["--unknown"])
    assert info.value.code == 2


def test_build_app_serves_clients(tmp_path):
    real_create_engine = sqlalchemy.create_engine
    database_url = f"sqlite:///{tmp_path / 'booking.db'}"
    config = Config(
        db=DBConfig(host="localhost", port="5432", name="booking", user="user"),
        payment=PaymentConfig(url="http://payments.example.com"),
    )
    with patch(
        "sqlalchemy.create_engine",
        side_effect=lambda url: real_create_engine(database_url),
    ) as fake_create:
        app = build_app(config)

    url = fake_create.call_args.args[0]
    assert url.host == "localhost"
    assert url.port == 5432
    assert url.database == "booking"
    assert url.query["sslmode"] == "disable"

    client = app.test_client()
    assert client.get("/client").data == b"[]"
    assert client.post("/client", data=json.dumps({"fullName": "Ann Lee"})).status_code == 202
    listed = json.loads(client.get("/client").data)
    assert [entry["fullName"] for entry in listed] == ["Ann Lee"]