import logging
from pathlib import Path

import pytest

from nightskychart.compute import WINDOWS
from nightskychart.config import Settings, configure_logging
from nightskychart.i18n import t

_ENV_KEYS = (
    "NIGHTSKY_RESOURCES_DIR",
    "NIGHTSKY_EPHEMERIS",
    "NIGHTSKY_RA_UNIT",
    "NIGHTSKY_LOG_LEVEL",
    "NIGHTSKY_USER_AGENT",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestSettings:
    def test_defaults(self, clean_env):
        settings = Settings.from_env()
        assert settings.ephemeris_file == "de421.bsp"
        assert settings.ra_unit == "hours"
        assert settings.log_level == "INFO"
        assert settings.resources_dir.name == "resources"
        assert settings.user_agent == "NightSkyChart/1.0 (you@example.com)"

    def test_overrides(self, clean_env, tmp_path):
        clean_env.setenv("NIGHTSKY_RESOURCES_DIR", str(tmp_path))
        clean_env.setenv("NIGHTSKY_EPHEMERIS", "de440s.bsp")
        clean_env.setenv("NIGHTSKY_RA_UNIT", " Degrees ")
        clean_env.setenv("NIGHTSKY_LOG_LEVEL", "debug")
        settings = Settings.from_env()
        assert settings.resources_dir == Path(tmp_path)
        assert settings.ephemeris_file == "de440s.bsp"
        assert settings.ra_unit == "degrees"
        assert settings.log_level == "DEBUG"

    def test_bad_ra_unit(self, clean_env):
        clean_env.setenv("NIGHTSKY_RA_UNIT", "radians")
        with pytest.raises(ValueError, match="NIGHTSKY_RA_UNIT"):
            Settings.from_env()

    def test_bad_log_level(self, clean_env):
        clean_env.setenv("NIGHTSKY_LOG_LEVEL", "LOUD")
        with pytest.raises(ValueError, match="NIGHTSKY_LOG_LEVEL"):
            Settings.from_env()


class TestConfigureLogging:
    def test_single_handler_on_repeat(self, settings):
        logger = logging.getLogger("nightskychart")
        before = list(logger.handlers)
        try:
            logger.handlers.clear()
            configure_logging(settings)
            configure_logging(settings)
            assert len(logger.handlers) == 1
            assert logger.level == logging.DEBUG
        finally:
            logger.handlers[:] = before


class TestTranslations:
    def test_english(self):
        assert t("btn_generate", "en") == "Generate Chart"

    def test_korean(self):
        assert t("btn_generate", "ko") == "차트 만들기"

    def test_unknown_language_falls_back_to_english(self):
        assert t("label_date", "fr") == "Observation Date"

    def test_unknown_key(self):
        assert t("no_such_key", "en") == "no_such_key"

    def test_error_template(self):
        assert (
            t("error_generate", "en").format(error="Invalid input format")
            == "Error generating chart: Invalid input format"
        )

    @pytest.mark.parametrize("lang", ["en", "ko"])
    @pytest.mark.parametrize("window", WINDOWS)
    def test_every_window_has_a_label(self, window, lang):
        assert t(f"window_{window}", lang) != f"window_{window}"
