import pytest

from .helpers import build_fake_client


@pytest.fixture
def fake_client():
    return build_fake_client
