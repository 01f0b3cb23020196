import pytest

from .fakes import FakeCloudApi


@pytest.fixture
def fake_api():
    return FakeCloudApi()
