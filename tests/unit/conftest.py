import pytest

from fakes import FakeClient


@pytest.fixture
def session():
    return object()


@pytest.fixture
def client():
    return FakeClient()
