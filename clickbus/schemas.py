from typing import List, Optional

from pydantic import BaseModel, StrictStr


class LogAction(BaseModel):
    action: StrictStr
    guid: StrictStr
    details: StrictStr
    timestamp: StrictStr
    podName: Optional[StrictStr] = None


class LogAck(BaseModel):
    success: bool
    message: str
    logId: Optional[str] = None


class PodGuidResponse(BaseModel):
    podGuid: str
    podName: str
    startTime: str
    requestsHandled: int
    timestamp: str
    uptime: str


class PodStatusResponse(BaseModel):
    deployment: str
    podName: str
    podGuid: str
    namespace: str
    podIP: str
    startTime: str
    uptime: int
    requestsProcessed: int
    logEntries: int
    timestamp: str
    note: str


class HealthResponse(BaseModel):
    status: str
    service: str
    timestamp: str
    podName: str
    podGuid: str
    uptime: str
    requestsProcessed: int
    deploymentReady: bool
    eventSink: str
    eventSinkReady: bool


class ServiceInfo(BaseModel):
    service: str
    version: str
    podGuid: str
    podName: str
    startTime: str
    requestsHandled: int
    endpoints: List[str]
    deploymentNote: str
