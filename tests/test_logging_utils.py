import logging

from idmfollow.utils.logging_utils import PACKAGE_LOGGER, get_logger


def test_get_logger_defaults_to_package_logger():
    logger = get_logger()
    assert logger.name == PACKAGE_LOGGER == "idmfollow"
    assert logger.level == logging.INFO


def test_get_logger_reuses_handler_and_applies_verbose():
    first = get_logger("idmfollow.test_cli")
    second = get_logger("idmfollow.test_cli", verbose=True)
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG
