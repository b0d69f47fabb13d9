"""Unit tests for log level selection."""

import logging

import pytest

from famshare.config import Settings
from famshare.util.logging import log_level_for


@pytest.mark.parametrize(
    "environment, debug, expected",
    [
        ("production", False, logging.INFO),
        ("development", False, logging.INFO),
        ("test", False, logging.WARNING),
        ("test", True, logging.DEBUG),
        ("production", True, logging.DEBUG),
    ],
)
def test_log_level_for(environment, debug, expected):
    settings = Settings(environment=environment, debug=debug)

    assert log_level_for(settings) == expected
