import logging

import pytest

from wallet_dashboard import config


@pytest.fixture
def package_logger():
    logger = logging.getLogger("wallet_dashboard")
    previous = logger.level
    yield logger
    logger.setLevel(previous)


def test_configure_logging_applies_known_level(package_logger):
    config.configure_logging('debug')
    assert package_logger.level == logging.DEBUG


def test_configure_logging_unknown_level_falls_back_to_warning(package_logger):
    config.configure_logging('verbose')
    assert package_logger.level == logging.WARNING


def test_get_db_path_is_string():
    assert config.get_db_path() == str(config.DB_PATH)
