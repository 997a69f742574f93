"""
Tests for environment-driven settings.
"""

import os

import pytest
from unittest.mock import patch

from src.data import config


class TestEnvHelpers:

    @patch.dict(os.environ, {"SOME_INT": "42"})
    def test_get_env_int(self):
        assert config.get_env_int("SOME_INT", 1) == 42

    @patch.dict(os.environ, {"SOME_INT": "forty"})
    def test_get_env_int_invalid(self):
        with pytest.raises(ValueError):
            config.get_env_int("SOME_INT", 1)

    @patch.dict(os.environ, {"SOME_FLAG": "Yes"})
    def test_get_env_bool(self):
        assert config.get_env_bool("SOME_FLAG", False) is True
        assert config.get_env_bool("MISSING_FLAG", False) is False

    @patch.dict(os.environ, {}, clear=True)
    def test_required(self):
        with pytest.raises(ValueError):
            config.get_env("SOME_KEY", required=True)


class TestSettings:

    def teardown_method(self):
        config.reset_settings()

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        settings = config.load_settings()
        assert settings.youtube.api_key is None
        assert settings.youtube.is_configured is False
        assert settings.youtube.max_results == 10
        assert settings.transcript.server_url == "http://localhost:4000"
        assert settings.analysis.max_pros == 3
        assert settings.analysis.max_quotes == 2
        assert settings.is_production() is False

    @patch.dict(os.environ, {"YOUTUBE_DATA_API_KEY": "data-key"}, clear=True)
    def test_alternate_youtube_key(self):
        assert config.YouTubeConfig().api_key == "data-key"

    @patch.dict(os.environ, {"YOUTUBE_API_KEY": "main", "YOUTUBE_DATA_API_KEY": "data"}, clear=True)
    def test_primary_youtube_key_wins(self):
        assert config.YouTubeConfig().api_key == "main"

    @patch.dict(os.environ, {"YOUTUBE_MAX_RESULTS": "80"}, clear=True)
    def test_max_results_bounds(self):
        with pytest.raises(ValueError):
            config.YouTubeConfig()

    @patch.dict(os.environ, {"DATABASE_POOL_MIN": "5", "DATABASE_POOL_MAX": "2"}, clear=True)
    def test_pool_bounds(self):
        with pytest.raises(ValueError):
            config.DatabaseConfig()

    @patch.dict(os.environ, {"ANALYSIS_MAX_CONS": "-1"}, clear=True)
    def test_negative_caps(self):
        with pytest.raises(ValueError):
            config.AnalysisConfig()

    @patch.dict(os.environ, {"DATABASE_NAME": "reviews_test", "DATABASE_PORT": "6543"}, clear=True)
    def test_connection_dict(self):
        params = config.DatabaseConfig().connection_dict
        assert params["dbname"] == "reviews_test"
        assert params["port"] == 6543

    @patch.dict(os.environ, {"ENVIRONMENT": "production"}, clear=True)
    def test_singleton(self):
        config.reset_settings()
        settings = config.get_settings()
        assert config.get_settings() is settings
        assert settings.is_production() is True

    @patch.dict(os.environ, {"LOG_FILE": "", "LOG_BACKUP_COUNT": "2"}, clear=True)
    def test_empty_log_file_means_console_only(self):
        logging_config = config.LoggingConfig()
        assert logging_config.log_file is None
        assert logging_config.backup_count == 2
