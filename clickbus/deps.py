# clickbus/deps.py
from fastapi import Request

from .config import Settings
from .sinks import EventSink
from .state import PodState


def get_state(request: Request) -> PodState:
    return request.app.state.pod


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_sink(request: Request) -> EventSink:
    return request.app.state.sink
