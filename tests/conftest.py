from __future__ import annotations

import pytest

from fontseek.config import InspectorConfig

from tests.fakes import FakeEngine


@pytest.fixture
def windows_engine() -> FakeEngine:
    return FakeEngine("windows")


@pytest.fixture
def mac_engine() -> FakeEngine:
    return FakeEngine("mac")


@pytest.fixture
def linux_engine() -> FakeEngine:
    return FakeEngine("linux")


@pytest.fixture
def config() -> InspectorConfig:
    return InspectorConfig()
