"""Shared test fixtures for postie address tests."""

from __future__ import annotations

import pytest

from postie.address import Address, ParserSettings, address


@pytest.fixture()
def simple_address() -> Address:
    return address(b"simple", b"example.com")


@pytest.fixture()
def shallow_settings() -> ParserSettings:
    """Settings that allow at most two levels of comment nesting."""
    return ParserSettings(max_comment_depth=2)
