from fastapi import APIRouter
from templab.core.observability.metrics import snapshot_named, snapshot_requests

router = APIRouter(tags=["metrics"])


@router.get("/metrics/snapshot")
def metrics_snapshot():
    req = snapshot_requests()
    body = {"requests": req}
    body.update(snapshot_named())

    for k in ("requests_total", "requests_GET"):
        if k in req:
            body[k] = req[k]

    return body
