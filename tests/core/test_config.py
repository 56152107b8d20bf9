"""Unit tests for roguechess/core/config.py"""

import logging
from dataclasses import FrozenInstanceError

import pytest

from roguechess.core.config import RULES, RuleConfig, configure_logging


def test_default_rules() -> None:
    assert RULES == RuleConfig()
    assert RULES.upgrade_count == 2
    assert RULES.sniper_range == 3
    assert RULES.wall_lifetime == 2


def test_rules_are_frozen() -> None:
    with pytest.raises(FrozenInstanceError):
        RULES.upgrade_count = 5  # type: ignore[misc]


def test_configure_logging(caplog: pytest.LogCaptureFixture) -> None:
    configure_logging("debug")
    with caplog.at_level(logging.DEBUG, logger="roguechess"):
        logging.getLogger("roguechess.test").debug("hello")
    assert "hello" in caplog.text
