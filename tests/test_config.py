import os

import pytest

from hostel_feedback.config import (
    DEFAULT_DATA_FILE,
    get_data_file,
    get_database_url,
    load_env_file_fallback,
    normalize_database_url,
)


@pytest.mark.parametrize(
    "url, expected",
    [
        ("postgres://u:p@db:5432/feedback", "postgresql+asyncpg://u:p@db:5432/feedback"),
        ("postgresql://u:p@db/feedback", "postgresql+asyncpg://u:p@db/feedback"),
        ("postgresql+asyncpg://u:p@db/feedback", "postgresql+asyncpg://u:p@db/feedback"),
        ("sqlite+aiosqlite:///feedback.db", "sqlite+aiosqlite:///feedback.db"),
    ],
)
def test_normalize_database_url(url, expected):
    assert normalize_database_url(url) == expected


def test_database_url_prefers_database_url(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgres://a@one/db")
    monkeypatch.setenv("POSTGRES_URL", "postgres://a@two/db")

    assert get_database_url() == "postgresql+asyncpg://a@one/db"


def test_database_url_absent(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("POSTGRES_URL", raising=False)

    assert get_database_url() is None


def test_data_file_default(monkeypatch):
    monkeypatch.delenv("FEEDBACK_DATA_FILE", raising=False)

    assert get_data_file() == DEFAULT_DATA_FILE


def test_env_file_fallback_does_not_override(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment line\n"
        "\n"
        "HF_TEST_QUOTED=\"quoted value\"\n"
        "HF_TEST_SINGLE='single'\n"
        "HF_TEST_EXISTING=from-file\n"
        "not a pair\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("HF_TEST_EXISTING", "from-env")
    monkeypatch.delenv("HF_TEST_QUOTED", raising=False)
    monkeypatch.delenv("HF_TEST_SINGLE", raising=False)

    try:
        loaded = load_env_file_fallback([tmp_path / "missing.env", env_file])

        assert loaded == 2
        assert os.environ["HF_TEST_QUOTED"] == "quoted value"
        assert os.environ["HF_TEST_SINGLE"] == "single"
        assert os.environ["HF_TEST_EXISTING"] == "from-env"
    finally:
        os.environ.pop("HF_TEST_QUOTED", None)
        os.environ.pop("HF_TEST_SINGLE", None)


def test_env_file_fallback_without_files(tmp_path):
    assert load_env_file_fallback([tmp_path / "nope.env"]) == 0
