"""
Tests for runtime settings loaded from the environment.
"""

import logging

import pytest

from signcalc.core.settings import EngineSettings, configure_logging

_VARS = ("SIGNCALC_LOG_LEVEL", "SIGNCALC_OPT_WORKERS", "SIGNCALC_OPT_STEP")


@pytest.fixture
def clean_env(monkeypatch):
    """Register every setting with monkeypatch so values loaded from .env are undone."""
    for name in _VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


class TestEngineSettings:

    def test_defaults(self, clean_env):
        settings = EngineSettings.from_env()
        assert settings.log_level == "WARNING"
        assert settings.opt_workers == 1
        assert settings.opt_step == pytest.approx(0.05)

    def test_from_environment(self, clean_env):
        clean_env.setenv("SIGNCALC_LOG_LEVEL", "debug")
        clean_env.setenv("SIGNCALC_OPT_WORKERS", "4")
        clean_env.setenv("SIGNCALC_OPT_STEP", "0.1")

        settings = EngineSettings.from_env()
        assert settings.log_level == "DEBUG"
        assert settings.opt_workers == 4
        assert settings.opt_step == pytest.approx(0.1)

    def test_from_env_file(self, clean_env, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("SIGNCALC_OPT_WORKERS=3\n", encoding="utf-8")

        assert EngineSettings.from_env(str(env_file)).opt_workers == 3

    def test_missing_env_file(self, clean_env, tmp_path):
        with pytest.raises(FileNotFoundError):
            EngineSettings.from_env(str(tmp_path / "missing.env"))

    def test_unparseable_value(self, clean_env):
        clean_env.setenv("SIGNCALC_OPT_WORKERS", "many")
        with pytest.raises(ValueError):
            EngineSettings.from_env()

    @pytest.mark.parametrize("kwargs", [
        {"log_level": "LOUD"},
        {"opt_workers": 0},
        {"opt_step": 0.0},
        {"opt_step": 0.6},
    ])
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            EngineSettings(**kwargs)


def test_configure_logging():
    configure_logging("info")
    package_logger = logging.getLogger("signcalc")

    assert package_logger.level == logging.INFO
    assert package_logger.handlers
    configure_logging("info")
    assert len(package_logger.handlers) == 1

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
