"""
Unit Tests - Configuration
"""
import logging

import pytest
from pydantic import ValidationError

from analytics_buddy.config.logging import configure_logging, redact_secrets
from analytics_buddy.config.settings import AggregationSettings, Settings, ShopifySettings


class TestSettings:
    """Tests for environment-driven settings"""
    
    def test_shop_domain_normalized(self):
        settings = ShopifySettings(shop_domain="https://demo.myshopify.com/")
        assert settings.shop_domain == "demo.myshopify.com"
    
    def test_aggregation_env_prefix(self, monkeypatch):
        monkeypatch.setenv("AGGREGATION_PAGE_SIZE", "50")
        monkeypatch.setenv("AGGREGATION_DEFAULT_RANGE", "7days")
        
        settings = AggregationSettings()
        
        assert settings.page_size == 50
        assert settings.default_range == "7days"
        assert settings.max_records is None
    
    def test_page_size_bounded(self):
        with pytest.raises(ValidationError):
            AggregationSettings(page_size=500)
    
    def test_app_env_validated(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "Production")
        assert Settings().is_production
        
        monkeypatch.setenv("APP_ENV", "moon")
        with pytest.raises(ValidationError):
            Settings()


class TestLogging:
    """Tests for log processors"""
    
    def test_access_tokens_are_masked(self):
        event = redact_secrets(None, "info", {"event": "x", "access_token": "shpat_123", "shop": "demo"})
        
        assert event["access_token"] == "***"
        assert event["shop"] == "demo"
    
    def test_configure_logging_quiets_httpx(self):
        configure_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
