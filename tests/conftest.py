"""Pytest configuration and shared fixtures."""

import os

import pytest
from hypothesis import settings

if "LEAF_PROOF_ENV" not in os.environ:
    os.environ["LEAF_PROOF_ENV"] = "test"

# Create a profile named "no_deadline" with deadline disabled.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")


@pytest.fixture
def anyio_backend() -> str:
    """The client schedules retries with asyncio, so async tests run on asyncio only."""
    return "asyncio"
