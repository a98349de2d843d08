import logging
import sys
import uuid
from datetime import datetime, timezone

LOGGER_NAME = "clickbus"

logger = logging.getLogger(LOGGER_NAME)


def setup_logging(level: str = "INFO") -> logging.Logger:
    root = logging.getLogger(LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"))
        root.addHandler(handler)
    root.setLevel(level.upper())
    return root


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def iso_z(dt: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-05-01T10:00:00.123Z"""
    dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def now_iso() -> str:
    return iso_z(utcnow())


def new_req_id() -> str:
    return uuid.uuid4().hex[:12]


def new_log_id() -> str:
    return str(uuid.uuid4())


def format_entry(server_ts: str, pod_name: str, pod_guid: str,
                 action: str, details: str, request_number: int) -> str:
    return (f"{server_ts} | Pod: {pod_name} | GUID: {pod_guid} | "
            f"Action: {action} | Details: {details} | Req#: {request_number}")


def sanitize_entry(entry: str) -> str:
    return entry.replace("|", " -")
