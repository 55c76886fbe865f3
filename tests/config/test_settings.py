"""
Dice Duel - Settings Tests

Tests for environment-driven settings and logging configuration.
"""

import logging

import pytest
from pydantic import ValidationError

from src.config.settings import Settings, configure_logging, get_settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("DEFAULT_STARTING_DICE", "LATEST_GAMES_LIMIT", "RNG_SEED",
                 "POLL_INTERVAL", "DEBUG", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.default_starting_dice == [4, 6, 8, 10, 20]
        assert settings.latest_games_limit == 10
        assert settings.rng_seed is None
        assert settings.poll_interval == 2.0
        assert settings.debug is False
        assert settings.log_level == "INFO"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_STARTING_DICE", "[6, 6, 12]")
        monkeypatch.setenv("RNG_SEED", "7")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        settings = Settings(_env_file=None)
        assert settings.default_starting_dice == [6, 6, 12]
        assert settings.rng_seed == 7
        assert settings.log_level == "DEBUG"

    def test_unknown_log_level(self):
        with pytest.raises(ValidationError, match="Unknown log level"):
            Settings(_env_file=None, log_level="chatty")

    @pytest.mark.parametrize("dice", [[], [0, 6], [6] * 21])
    def test_bad_starting_dice(self, dice):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_starting_dice=dice)

    def test_limit_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, latest_games_limit=0)


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_cache_clear_rereads(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("LATEST_GAMES_LIMIT", "3")
        get_settings.cache_clear()
        second = get_settings()
        assert first is not second
        assert second.latest_games_limit == 3


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def _restore_root_level(self):
        root = logging.getLogger()
        level = root.level
        yield
        root.setLevel(level)

    def test_sets_level(self):
        configure_logging(Settings(_env_file=None, log_level="warning"))
        assert logging.getLogger().level == logging.WARNING

    def test_debug_overrides_level(self):
        configure_logging(Settings(_env_file=None, debug=True, log_level="ERROR"))
        assert logging.getLogger().level == logging.DEBUG
