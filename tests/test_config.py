"""Tests for the config module."""

import pytest

from family_plate.config import (
    DEFAULT_API_URL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_TIMEOUT,
    get_api_url,
    get_log_level,
    get_store_path,
    get_timeout,
)


@pytest.fixture
def clean_env(monkeypatch):
    """Clear any FamilyPlate environment settings."""
    for name in (
        "FAMILY_PLATE_API_URL",
        "FAMILY_PLATE_TIMEOUT",
        "FAMILY_PLATE_STORE",
        "FAMILY_PLATE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


# ============================================================================
# Extraction Proxy Settings
# ============================================================================


class TestApiSettings:
    """Tests for get_api_url and get_timeout."""

    def test_default_url(self, clean_env):
        assert get_api_url() == DEFAULT_API_URL

    def test_url_from_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("FAMILY_PLATE_API_URL", "https://plate.example.com/api/")

        assert get_api_url() == "https://plate.example.com/api"

    def test_default_timeout(self, clean_env):
        assert get_timeout() == DEFAULT_TIMEOUT

    def test_timeout_from_environment(self, clean_env, monkeypatch):
        monkeypatch.setenv("FAMILY_PLATE_TIMEOUT", "12.5")

        assert get_timeout() == 12.5

    def test_invalid_timeout_falls_back(self, clean_env, monkeypatch):
        monkeypatch.setenv("FAMILY_PLATE_TIMEOUT", "soon")

        assert get_timeout() == DEFAULT_TIMEOUT


# ============================================================================
# Store Location
# ============================================================================


class TestStorePath:
    """Tests for get_store_path."""

    def test_default_location(self, clean_env, tmp_path, monkeypatch):
        store_file = tmp_path / ".family-plate" / "store.json"
        monkeypatch.setattr("family_plate.config.STORE_FILE", store_file)

        path = get_store_path()

        assert path == store_file
        assert path.parent.is_dir()

    def test_override_from_environment(self, clean_env, tmp_path, monkeypatch):
        target = tmp_path / "elsewhere" / "recipes.json"
        monkeypatch.setenv("FAMILY_PLATE_STORE", str(target))

        path = get_store_path()

        assert path == target
        assert target.parent.is_dir()
        assert not target.exists()


# ============================================================================
# Logging
# ============================================================================


class TestLogLevel:
    """Tests for get_log_level."""

    def test_default(self, clean_env):
        assert get_log_level() == DEFAULT_LOG_LEVEL

    def test_from_environment_uppercased(self, clean_env, monkeypatch):
        monkeypatch.setenv("FAMILY_PLATE_LOG_LEVEL", "debug")

        assert get_log_level() == "DEBUG"
