import os
import time
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .config import Settings, load_settings
from .deps import get_settings, get_sink, get_state
from .logging_utils import logger, new_log_id, new_req_id, now_iso, sanitize_entry, setup_logging
from .metrics import ACTIONS, LATENCY, LOG_BUFFER_ENTRIES, REQUESTS, SINK_ERRORS
from .schemas import HealthResponse, LogAck, LogAction, PodGuidResponse, PodStatusResponse, ServiceInfo
from .sinks import EventSink, build_sink
from .state import PodState

ENDPOINTS = [
    "/api/log",
    "/api/logs/guid",
    "/api/logs/data",
    "/api/health",
    "/api/pod-guid",
    "/api/pod-status",
]

REPLICA_NOTE = "In a 10-replica deployment, each pod will have a unique GUID and process different requests"
NO_ACTIVITY = "No activity logged yet on this pod."
NO_INTERACTIONS = (
    "No user interactions logged yet on this pod.\n\n"
    "Note: In a 10-replica deployment, you'll see different pod GUIDs serving "
    "different requests, demonstrating load distribution."
)


def guid_report(state: PodState) -> str:
    snap = state.snapshot()
    header = (
        "=== ClickBus Pod GUID Logs ===\n"
        f"Pod: {state.pod_name}\n"
        f"GUID: {state.guid}\n"
        f"Started: {state.identity.start_time}\n"
        f"Total Requests Processed: {snap.requests}\n\n"
        "=== Recent Activity ===\n"
    )
    if not snap.entries:
        return header + NO_ACTIVITY
    return header + "\n".join(snap.entries)


def data_report(state: PodState) -> str:
    snap = state.snapshot()
    header = (
        "=== ClickBus Data Activity Log ===\n"
        f"Pod Name: {state.pod_name}\n"
        f"Pod GUID: {state.guid}\n"
        f"Uptime: {state.identity.start_time}\n"
        f"Requests Handled: {snap.requests}\n\n"
    )
    if not snap.entries:
        return header + NO_INTERACTIONS
    return header + "\n".join(sanitize_entry(e) for e in snap.entries)


def create_app(settings: Optional[Settings] = None,
               state: Optional[PodState] = None,
               sink: Optional[EventSink] = None) -> FastAPI:
    if settings is None:
        settings = load_settings()
    setup_logging(settings.LOG_LEVEL)

    app = FastAPI(title="ClickBus Backend API", version=settings.APP_VERSION)
    app.state.settings = settings
    if state is None:
        state = PodState(settings.POD_NAME, capacity=settings.LOG_BUFFER_SIZE)
    if sink is None:
        sink = build_sink(settings)
    app.state.pod = state
    app.state.sink = sink
    logger.info("Pod initialized with GUID: %s at %s",
                app.state.pod.guid, app.state.pod.identity.start_time)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    limiter = Limiter(key_func=get_remote_address)
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    @app.exception_handler(RateLimitExceeded)
    def rate_limit_handler(request, exc):
        return PlainTextResponse("Too Many Requests", status_code=429)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")}
            for e in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Invalid log payload", "detail": errors},
        )

    def log_action(request: Request, payload: LogAction,
                   pod: PodState = Depends(get_state),
                   sink: EventSink = Depends(get_sink)):
        try:
            rec = pod.record(payload.action, payload.details)
            LOG_BUFFER_ENTRIES.set(len(pod))
            ACTIONS.labels(action=payload.action).inc()

            enriched = payload.model_dump(exclude_none=True)
            enriched.update(
                podName=pod.pod_name,
                podGuid=pod.guid,
                serverTimestamp=rec.server_timestamp,
                requestNumber=rec.request_number,
            )
            try:
                sink.send(enriched)
            except Exception:
                SINK_ERRORS.inc()
                logger.exception("Failed to forward event to %s sink", sink.name)

            logger.info("ClickBus Log: %s", enriched)
            return LogAck(success=True, message="Action logged successfully", logId=new_log_id())
        except Exception:
            logger.exception("Logging error")
            return JSONResponse(status_code=500,
                                content={"success": False, "message": "Failed to log action"})

    # rate limiting is opt-in; unset means every valid payload is accepted
    if settings.RATE_LIMIT:
        log_action = limiter.limit(settings.RATE_LIMIT)(log_action)
    app.post("/api/log", response_model=LogAck)(log_action)

    @app.get("/api/logs/guid", response_class=PlainTextResponse)
    def logs_guid(pod: PodState = Depends(get_state)):
        try:
            return PlainTextResponse(guid_report(pod))
        except Exception:
            logger.exception("Error reading GUID logs")
            return PlainTextResponse("Error reading GUID logs", status_code=500)

    @app.get("/api/logs/data", response_class=PlainTextResponse)
    def logs_data(pod: PodState = Depends(get_state)):
        try:
            return PlainTextResponse(data_report(pod))
        except Exception:
            logger.exception("Error reading data logs")
            return PlainTextResponse("Error reading data logs", status_code=500)

    @app.get("/api/pod-guid", response_model=PodGuidResponse)
    def pod_guid(pod: PodState = Depends(get_state)):
        return PodGuidResponse(
            podGuid=pod.guid,
            podName=pod.pod_name,
            startTime=pod.identity.start_time,
            requestsHandled=pod.requests,
            timestamp=now_iso(),
            uptime=f"{pod.identity.uptime_seconds()} seconds",
        )

    @app.get("/api/pod-status", response_model=PodStatusResponse)
    def pod_status(pod: PodState = Depends(get_state),
                   cfg: Settings = Depends(get_settings)):
        snap = pod.snapshot()
        return PodStatusResponse(
            deployment=cfg.SERVICE_NAME,
            podName=pod.pod_name,
            podGuid=pod.guid,
            namespace=cfg.POD_NAMESPACE,
            podIP=cfg.POD_IP,
            startTime=pod.identity.start_time,
            uptime=pod.identity.uptime_seconds(),
            requestsProcessed=snap.requests,
            logEntries=len(snap.entries),
            timestamp=now_iso(),
            note=REPLICA_NOTE,
        )

    @app.get("/api/health", response_model=HealthResponse)
    def health(pod: PodState = Depends(get_state),
               cfg: Settings = Depends(get_settings),
               sink: EventSink = Depends(get_sink)):
        return HealthResponse(
            status="healthy",
            service=cfg.SERVICE_NAME,
            timestamp=now_iso(),
            podName=pod.pod_name,
            podGuid=pod.guid,
            uptime=f"{pod.identity.uptime_seconds()}s",
            requestsProcessed=pod.requests,
            deploymentReady=True,
            eventSink=sink.name,
            eventSinkReady=sink.ready(),
        )

    @app.get("/", response_model=ServiceInfo)
    def index(pod: PodState = Depends(get_state),
              cfg: Settings = Depends(get_settings)):
        return ServiceInfo(
            service="ClickBus Backend API",
            version=cfg.APP_VERSION,
            podGuid=pod.guid,
            podName=pod.pod_name,
            startTime=pod.identity.start_time,
            requestsHandled=pod.requests,
            endpoints=ENDPOINTS,
            deploymentNote="Each pod in a 10-replica deployment will show a unique GUID",
        )

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.middleware("http")
    async def access_log_middleware(request: Request, call_next):
        rid = new_req_id()
        request.state.request_id = rid
        start = time.time()
        try:
            resp = await call_next(request)
        except Exception:
            dur = time.time() - start
            logger.exception("request_id=%s %s %s failed after %dms",
                             rid, request.method, request.url.path, int(dur * 1000))
            raise
        dur = time.time() - start
        logger.info("request_id=%s %s %s -> %d (%dms)",
                    rid, request.method, request.url.path, resp.status_code, int(dur * 1000))
        resp.headers["X-Request-ID"] = rid
        return resp

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        start = time.time()
        response = await call_next(request)
        elapsed = time.time() - start
        route = request.scope.get("route")
        endpoint = route.path if route is not None else "unmatched"
        LATENCY.labels(endpoint=endpoint, method=request.method).observe(elapsed)
        REQUESTS.labels(endpoint=endpoint, method=request.method, code=str(response.status_code)).inc()
        return response

    return app


app = create_app()


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 8000))
    uvicorn.run("clickbus.main:app", host="0.0.0.0", port=port, reload=False)
