import json
import logging
import time
import uuid

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pydantic import BaseModel, ValidationError

from commitbump.classify import classify
from commitbump.config import Settings
from commitbump.errors import BumpError
from commitbump.manifest import apply_bump
from commitbump.runner import SKIP_REASON
from commitbump.version import Bump

load_dotenv()

logger = logging.getLogger("commitbump")
if not logger.handlers:
    handler = logging.StreamHandler()
    logger.addHandler(handler)
logger.setLevel(logging.INFO)

app = FastAPI(title="commitbump", version="0.1.0")

SET = Settings.from_env()

try:
    METRIC_DECISIONS = Counter(
        "commitbump_decisions_total", "Bump decisions returned", ["endpoint", "decision"]
    )
    METRIC_ERRORS = Counter("commitbump_errors_total", "Rejected manifests", ["error"])
    METRIC_LATENCY = Histogram(
        "commitbump_request_latency_seconds",
        "Latency of API requests",
        buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1),
        labelnames=("path",),
    )
except ValueError:
    # Already registered (e.g., module reload in tests)
    METRIC_DECISIONS = None
    METRIC_ERRORS = None
    METRIC_LATENCY = None


@app.middleware("http")
async def request_id_middleware(request, call_next):  # type: ignore
    req_id = str(uuid.uuid4())
    request.state.request_id = req_id
    start = time.time()
    resp = await call_next(request)
    if METRIC_LATENCY and request.url.path.startswith("/v1/"):
        METRIC_LATENCY.labels(path=request.url.path).observe(time.time() - start)
    resp.headers["X-Request-ID"] = req_id
    return resp


class ClassifyRequest(BaseModel):
    message: str


class ClassifyResult(BaseModel):
    decision: Bump


class BumpRequest(BaseModel):
    message: str
    manifest: str


class BumpResult(BaseModel):
    decision: Bump
    skipped: bool
    reason: str | None = None
    old_version: str | None = None
    new_version: str | None = None
    manifest: str
    request_id: str | None = None


@app.get("/healthz")
def healthz():
    return {
        "ok": True,
        "version_key": SET.version_key,
        "auth": bool(SET.auth_token),
    }


@app.get("/readyz")
def readyz():
    return {"ok": True}


def require_auth(request: Request):
    if SET.auth_token:
        auth = request.headers.get("Authorization")
        if not auth or auth != f"Bearer {SET.auth_token}":
            raise HTTPException(status_code=401, detail="unauthorized")
    return True


async def _read_model(request: Request, model: type[BaseModel]):
    body = await request.body()
    if len(body) > SET.max_body_bytes:
        raise HTTPException(status_code=413, detail="payload too large")
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        raise HTTPException(
            status_code=422, detail=e.errors(include_url=False, include_input=False)
        ) from e


def _log(event: str, **fields) -> None:
    if SET.structured_logging:
        logger.info(json.dumps({"event": event, **fields}))


@app.post("/v1/classify")
async def classify_endpoint(request: Request, _: bool = Depends(require_auth)):
    req = await _read_model(request, ClassifyRequest)
    res = ClassifyResult(decision=classify(req.message))
    if METRIC_DECISIONS:
        METRIC_DECISIONS.labels(endpoint="classify", decision=res.decision.value).inc()
    return res


@app.post("/v1/bump")
async def bump_endpoint(request: Request, _: bool = Depends(require_auth)):
    req = await _read_model(request, BumpRequest)
    request_id = getattr(request.state, "request_id", None)
    decision = classify(req.message)
    if METRIC_DECISIONS:
        METRIC_DECISIONS.labels(endpoint="bump", decision=decision.value).inc()

    if decision == Bump.NONE:
        res = BumpResult(
            decision=decision,
            skipped=True,
            reason=SKIP_REASON,
            manifest=req.manifest,
            request_id=request_id,
        )
        _log("bump_skipped", request_id=request_id, decision=decision.value)
        return res

    try:
        old, new, updated = apply_bump(req.manifest, decision, SET.version_key)
    except BumpError as e:
        if METRIC_ERRORS:
            METRIC_ERRORS.labels(error=type(e).__name__).inc()
        _log(
            "bump_rejected",
            request_id=request_id,
            error=type(e).__name__,
            detail=str(e),
            status_code=422,
        )
        return Response(
            content=json.dumps({"error": type(e).__name__, "detail": str(e), "text": e.text}),
            media_type="application/json",
            status_code=422,
        )

    res = BumpResult(
        decision=decision,
        skipped=False,
        old_version=str(old),
        new_version=str(new),
        manifest=updated,
        request_id=request_id,
    )
    _log(
        "bump_planned",
        request_id=request_id,
        decision=decision.value,
        old_version=res.old_version,
        new_version=res.new_version,
    )
    return res


@app.get("/metrics")
def metrics():  # pragma: no cover
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def main():
    # Convenience CLI entrypoint: `commitbump-service`
    import os

    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8787"))
    uvicorn.run("services.commitbump.main:app", host=host, port=port, reload=False)
