"""Tests for config/settings.py"""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from config.settings import Settings
from lens.errors import ConfigurationError


class TestSettings:
    @patch.dict(os.environ, {"ANTHROPIC_API_KEY": ""})
    def test_missing_key_fails_validation(self):
        with pytest.raises(ConfigurationError):
            Settings().validate()

    @patch.dict(os.environ, {"ANTHROPIC_API_KEY": "test-key"})
    def test_key_from_environment(self):
        settings = Settings()
        settings.validate()
        assert settings.anthropic_api_key == "test-key"

    @patch.dict(os.environ, {"DB_PATH": "/tmp/lens-test.db", "MAX_WEB_SEARCHES": "5"})
    def test_overrides_from_environment(self):
        settings = Settings()
        assert settings.db_path == Path("/tmp/lens-test.db")
        assert settings.max_web_searches == 5

    def test_configuration_error_is_value_error(self):
        assert issubclass(ConfigurationError, ValueError)
