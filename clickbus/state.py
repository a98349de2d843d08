# clickbus/state.py
import threading
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, List, Optional

from .logging_utils import format_entry, iso_z, utcnow

DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class PodIdentity:
    guid: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=utcnow)

    @property
    def start_time(self) -> str:
        return iso_z(self.started_at)

    def uptime_seconds(self, now: Optional[datetime] = None) -> int:
        now = now or utcnow()
        return max(0, int((now - self.started_at).total_seconds()))


@dataclass(frozen=True)
class Snapshot:
    requests: int
    entries: List[str]


@dataclass(frozen=True)
class Recorded:
    entry: str
    request_number: int
    server_timestamp: str


class PodState:
    """Pod identity, request counter and the bounded buffer of recent log lines.

    Mutation happens under a single lock so the counter bump and the
    append/truncate are seen together by readers.
    """

    def __init__(self, pod_name: str, capacity: int = DEFAULT_CAPACITY,
                 identity: Optional[PodIdentity] = None):
        self.pod_name = pod_name
        self.identity = identity or PodIdentity()
        self._requests = 0
        self._entries: Deque[str] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def guid(self) -> str:
        return self.identity.guid

    def record(self, action: str, details: str) -> Recorded:
        with self._lock:
            self._requests += 1
            server_ts = iso_z(utcnow())
            entry = format_entry(server_ts, self.pod_name, self.guid,
                                 action, details, self._requests)
            self._entries.append(entry)
            return Recorded(entry=entry, request_number=self._requests,
                            server_timestamp=server_ts)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return Snapshot(requests=self._requests, entries=list(self._entries))

    @property
    def requests(self) -> int:
        with self._lock:
            return self._requests

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
