"""Prometheus metrics endpoint."""

from fastapi import APIRouter, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

router = APIRouter()


@router.get("/metrics")
async def metrics() -> Response:
    """Expose registered Prometheus metrics:

    - gateway_latency_ms{operation, outcome}
    - gateway_errors_total{operation, reason}
    - booking_transitions_total{status}
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
