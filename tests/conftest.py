import pytest
from fastapi.testclient import TestClient

from clickbus.config import Settings
from clickbus.main import create_app


class RecordingSink:
    name = "recording"

    def __init__(self, fail=False):
        self.records = []
        self.fail = fail

    def send(self, record):
        if self.fail:
            raise RuntimeError("sink down")
        self.records.append(record)

    def ready(self):
        return not self.fail


@pytest.fixture
def settings():
    return Settings(POD_NAME="test-pod", POD_NAMESPACE="demo", POD_IP="10.0.0.7")


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def broken_sink():
    return RecordingSink(fail=True)


@pytest.fixture
def app(settings, sink):
    return create_app(settings, sink=sink)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_payload():
    def _make(**overrides):
        body = {"action": "tile_click", "guid": "g1", "details": "d1", "timestamp": "t1"}
        body.update(overrides)
        return body
    return _make
