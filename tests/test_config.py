"""Tests for configuration management."""

import os
from unittest.mock import patch

import pytest

from src.utils.config import Config, QuoteAPIConfig, WatchlistConfig


def test_quote_api_defaults_to_demo_key():
    config = QuoteAPIConfig()
    assert config.api_key == "demo"
    assert config.is_demo_key
    assert config.base_url == "https://www.alphavantage.co/query"


def test_watchlist_config_default_key():
    assert WatchlistConfig().storage_key == "stock-analyzer-watchlist"


def test_config_reads_environment():
    with patch.dict(
        os.environ,
        {
            "ALPHA_VANTAGE_API_KEY": "real-key",
            "QUOTE_REQUEST_TIMEOUT": "2.5",
            "WATCHLIST_STORAGE_KEY": "my-list",
            "LOG_LEVEL": "debug",
        },
    ):
        config = Config()

    assert config.quote_api.api_key == "real-key"
    assert not config.quote_api.is_demo_key
    assert config.quote_api.request_timeout == 2.5
    assert config.watchlist.storage_key == "my-list"
    assert config.logging.level == "DEBUG"


def test_empty_api_key_falls_back_to_demo():
    with patch.dict(os.environ, {"ALPHA_VANTAGE_API_KEY": ""}):
        assert Config().quote_api.is_demo_key


def test_config_validation_invalid_timeout():
    with patch.dict(os.environ, {"QUOTE_REQUEST_TIMEOUT": "0"}):
        config = Config()

        with pytest.raises(ValueError, match="QUOTE_REQUEST_TIMEOUT"):
            config.validate()


def test_config_validation_invalid_log_level():
    with patch.dict(os.environ, {"LOG_LEVEL": "chatty"}):
        config = Config()

        with pytest.raises(ValueError, match="LOG_LEVEL"):
            config.validate()


def test_config_validation_empty_base_url():
    with patch.dict(os.environ, {"ALPHA_VANTAGE_BASE_URL": ""}):
        config = Config()

        with pytest.raises(ValueError, match="ALPHA_VANTAGE_BASE_URL"):
            config.validate()


def test_config_validation_passes_with_defaults():
    with patch.dict(
        os.environ,
        {"QUOTE_REQUEST_TIMEOUT": "10", "LOG_LEVEL": "INFO", "ALPHA_VANTAGE_BASE_URL": "https://x.test"},
    ):
        assert Config().validate() is True
