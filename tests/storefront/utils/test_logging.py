import logging

import pytest
from storefront.utils.logging import (
    ERROR_LOG_FILE,
    LOG_FILE,
    configure_logging,
    current_environment,
    get_log_level,
)


@pytest.fixture()
def root_logger():
    """Restore the root logger's handlers and level after reconfiguring it."""
    logger = logging.getLogger()
    handlers, level = logger.handlers[:], logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = handlers
    logger.setLevel(level)


@pytest.fixture()
def clean_env(monkeypatch):
    for name in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_environment_defaults_to_development(clean_env):
    assert current_environment() == "development"
    assert get_log_level() == "DEBUG"


@pytest.mark.parametrize("env, level", [("production", "INFO"), ("staging", "INFO"), ("test", "WARNING")])
def test_level_follows_environment(clean_env, env, level):
    clean_env.setenv("PROTEAN_ENV", env)
    assert get_log_level() == level


def test_explicit_level_wins(clean_env):
    clean_env.setenv("PROTEAN_ENV", "production")
    clean_env.setenv("LOG_LEVEL", "error")
    assert get_log_level() == "ERROR"


def test_configure_logging_writes_storefront_files(root_logger, tmp_path):
    configure_logging(level="INFO", log_dir=str(tmp_path / "logs"))

    files = sorted(handler.baseFilename for handler in root_logger.handlers if hasattr(handler, "baseFilename"))
    assert files == sorted([str(tmp_path / "logs" / LOG_FILE), str(tmp_path / "logs" / ERROR_LOG_FILE)])
    assert root_logger.level == logging.INFO

    error_handlers = [h for h in root_logger.handlers if getattr(h, "baseFilename", "").endswith(ERROR_LOG_FILE)]
    assert error_handlers[0].level == logging.ERROR
