"""Tests for Settings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from drivepath.core.config import Settings


class TestSettings:
    """Tests for environment-driven configuration."""

    def test_defaults(self):
        """Test the built-in defaults."""
        config = Settings(_env_file=None)

        assert config.provider_name == "google_drive"
        assert config.shared_prefix == "Shared"
        assert config.page_size == 100
        assert config.max_pages == 1000
        assert config.ambiguity_policy == "first"

    def test_env_prefix(self, monkeypatch):
        """Test values are read from DRIVEPATH_ variables."""
        monkeypatch.setenv("DRIVEPATH_PAGE_SIZE", "250")
        monkeypatch.setenv("DRIVEPATH_AMBIGUITY_POLICY", "error")
        monkeypatch.setenv("DRIVEPATH_SHARED_PREFIX", "Incoming")

        config = Settings(_env_file=None)

        assert config.page_size == 250
        assert config.ambiguity_policy == "error"
        assert config.shared_prefix == "Incoming"

    @pytest.mark.parametrize("page_size", [0, 1001])
    def test_page_size_bounds(self, page_size):
        """Test page size is limited to what the API accepts."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, page_size=page_size)

    def test_unknown_policy(self):
        """Test only known ambiguity policies are accepted."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, ambiguity_policy="random")
