from __future__ import annotations

import os
from pathlib import Path

import pytest

from db.config import load_env_files, normalize_postgres_url, resolve_database_url


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgres://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql+psycopg2://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
        ("postgresql+psycopg://u:p@h/db", "postgresql+psycopg://u:p@h/db"),
    ],
)
def test_normalize_postgres_url(raw: str, expected: str) -> None:
    assert normalize_postgres_url(raw) == expected


def test_database_url_wins(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "postgres://direct/db")
    monkeypatch.setenv("LOCAL_DATABASE_URL", "postgres://local/db")
    assert resolve_database_url() == "postgresql+psycopg://direct/db"


def test_cloud_url_requires_cloud_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("CLOUD_DATABASE_URL", "postgres://cloud/db")
    monkeypatch.setenv("LOCAL_DATABASE_URL", "postgres://local/db")

    monkeypatch.setenv("ENVIRONMENT", "local")
    assert resolve_database_url() == "postgresql+psycopg://local/db"

    monkeypatch.setenv("ENVIRONMENT", "production")
    assert resolve_database_url() == "postgresql+psycopg://cloud/db"


def test_env_file_does_not_override_process_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text(
        "# comment\nLISTING_TEST_A=from-file\nLISTING_TEST_B=\"quoted\"\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("LISTING_TEST_A", "from-process")
    monkeypatch.delenv("LISTING_TEST_B", raising=False)

    load_env_files(tmp_path)

    assert os.environ["LISTING_TEST_A"] == "from-process"
    assert os.environ["LISTING_TEST_B"] == "quoted"
    monkeypatch.delenv("LISTING_TEST_B")
