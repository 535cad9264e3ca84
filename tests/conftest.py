# tests/conftest.py

import pytest

from reminder_config import load_settings

from .fakes import FULL_ENV, FakeMessenger, FakeTaskStore


@pytest.fixture
def env():
    return dict(FULL_ENV)


@pytest.fixture
def store():
    return FakeTaskStore()


@pytest.fixture
def messenger():
    return FakeMessenger()


@pytest.fixture
def settings(env):
    return load_settings(env)
