from __future__ import annotations

import logging
import os

import pytest

from gridsense.shared.env import load_secret_file_variables


def _unset(monkeypatch: pytest.MonkeyPatch, key: str) -> None:
    monkeypatch.delenv(key, raising=False)


def test_load_secret_file_variables_reads_content(tmp_path, monkeypatch):
    secret_file = tmp_path / "secret.txt"
    secret_file.write_text("s3cr3t\n", encoding="utf-8")

    monkeypatch.setenv("REDIS_PASSWORD_FILE", str(secret_file))
    _unset(monkeypatch, "REDIS_PASSWORD")

    loaded = load_secret_file_variables()

    assert os.environ["REDIS_PASSWORD"] == "s3cr3t"
    assert "REDIS_PASSWORD" in loaded


def test_load_secret_file_variables_logs_missing_file(monkeypatch, caplog):
    monkeypatch.setenv("MISSING_SECRET_FILE", "/tmp/gridsense-does-not-exist")
    _unset(monkeypatch, "MISSING_SECRET")

    with caplog.at_level(logging.WARNING):
        load_secret_file_variables()

    assert "MISSING_SECRET" not in os.environ
    assert any(
        record.message == "env.secret_file.unreadable" for record in caplog.records
    )


def test_load_secret_file_variables_handles_decode_error(tmp_path, monkeypatch, caplog):
    binary_file = tmp_path / "binary.bin"
    binary_file.write_bytes(b"\xff\xfe\xfd")

    monkeypatch.setenv("BINARY_SECRET_FILE", str(binary_file))
    _unset(monkeypatch, "BINARY_SECRET")

    with caplog.at_level(logging.WARNING):
        load_secret_file_variables()

    assert "BINARY_SECRET" not in os.environ
    assert any(
        record.message == "env.secret_file.unreadable" for record in caplog.records
    )


def test_load_secret_file_variables_skips_existing_target(monkeypatch):
    monkeypatch.setenv("EXISTING_SECRET", "present")
    monkeypatch.setenv("EXISTING_SECRET_FILE", "/tmp/ignored")

    load_secret_file_variables()

    assert os.environ["EXISTING_SECRET"] == "present"


def test_load_secret_file_variables_uses_given_mapping(tmp_path):
    secret_file = tmp_path / "token"
    secret_file.write_text("abc", encoding="utf-8")
    environ = {"TOKEN_FILE": str(secret_file), "EMPTY_FILE": ""}

    loaded = load_secret_file_variables(environ)

    assert loaded == ["TOKEN"]
    assert environ["TOKEN"] == "abc"
    assert "EMPTY" not in environ
