"""Shared fixtures for lspace tests."""

from __future__ import annotations

import pytest

from lspace.manager import Manager


@pytest.fixture
def manager() -> Manager:
    """A fresh Manager independent of the default one."""
    return Manager(name="test")
