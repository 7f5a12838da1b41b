# -*- coding: utf-8 -*-
"""
Tests for the onboarding flow configuration.
"""

from dataclasses import fields

from app.config import Config, OnboardingConfig


class TestOnboardingConfig:
    """OnboardingConfig.from_config."""

    def test_mirrors_application_config(self):
        config = OnboardingConfig.from_config()
        assert config.auto_save == Config.ONBOARDING_AUTO_SAVE
        assert config.auto_save_interval_ms == Config.ONBOARDING_AUTO_SAVE_INTERVAL_MS
        assert config.allow_skip == Config.ONBOARDING_ALLOW_SKIP
        assert config.storage_key == Config.ONBOARDING_STORAGE_KEY
        assert config.storage_version == Config.ONBOARDING_STORAGE_VERSION

    def test_only_engine_settings(self):
        """Test the flow configuration carries no widget-layer switches."""
        assert {f.name for f in fields(OnboardingConfig)} == {
            "auto_save", "auto_save_interval_ms", "allow_skip", "real_time_validation",
            "strict_validation", "restore_on_start", "storage_key", "storage_version",
        }
