"""Shared fixtures for phone mode tests."""

import pytest

from src.db.phone_modes.service import PhoneModeService
from src.db.phone_modes.tests.fakes import InMemoryPhoneModeRepository


@pytest.fixture
def repository():
    """Create an empty in-memory repository."""
    return InMemoryPhoneModeRepository()


@pytest.fixture
def service(repository):
    """Create a PhoneModeService over the in-memory repository."""
    return PhoneModeService(repository)
