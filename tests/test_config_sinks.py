import json

import pytest
from pydantic import ValidationError

from clickbus.config import Settings, load_settings
from clickbus.sinks import NullSink, RedisSink, build_sink


def test_defaults():
    s = load_settings({})
    assert s.POD_NAME == "backend-pod"
    assert s.POD_NAMESPACE == "clickbus"
    assert s.POD_IP == "unknown"
    assert s.LOG_BUFFER_SIZE == 100
    assert "http://localhost:5173" in s.ALLOWED_ORIGINS
    assert s.REDIS_URL is None


def test_environment_overrides():
    s = load_settings({
        "POD_NAME": "clickbus-backend-7f9",
        "POD_NAMESPACE": "prod",
        "POD_IP": "10.1.2.3",
        "LOG_BUFFER_SIZE": "25",
        "ALLOWED_ORIGINS": "https://a.example, https://b.example,",
    })
    assert s.POD_NAME == "clickbus-backend-7f9"
    assert s.POD_NAMESPACE == "prod"
    assert s.POD_IP == "10.1.2.3"
    assert s.LOG_BUFFER_SIZE == 25
    assert s.ALLOWED_ORIGINS == ["https://a.example", "https://b.example"]


def test_settings_are_frozen():
    s = Settings()
    with pytest.raises(ValidationError):
        s.POD_NAME = "x"


def test_buffer_size_must_be_positive():
    with pytest.raises(ValidationError):
        load_settings({"LOG_BUFFER_SIZE": "0"})


class FakeRedis:
    def __init__(self):
        self.lists = {}

    def rpush(self, key, value):
        self.lists.setdefault(key, []).append(value)

    def ping(self):
        return True


def test_redis_sink_pushes_json():
    client = FakeRedis()
    sink = RedisSink(client, "clickbus-queue")
    sink.send({"action": "tile_click", "requestNumber": 3})
    assert json.loads(client.lists["clickbus-queue"][0]) == {"action": "tile_click", "requestNumber": 3}
    assert sink.ready()


def test_null_sink_without_redis_url():
    sink = build_sink(Settings())
    assert isinstance(sink, NullSink)
    assert sink.send({"a": 1}) is None


def test_unreachable_redis_falls_back_to_null_sink():
    sink = build_sink(Settings(REDIS_URL="redis://127.0.0.1:1/0"))
    assert isinstance(sink, NullSink)


def test_non_numeric_buffer_size_is_validation_error():
    with pytest.raises(ValidationError):
        load_settings({"LOG_BUFFER_SIZE": "lots"})


def test_rate_limit_unset_by_default():
    assert load_settings({}).RATE_LIMIT is None
    assert load_settings({"RATE_LIMIT": "5/second"}).RATE_LIMIT == "5/second"
