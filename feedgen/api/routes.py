"""
API route handlers.
"""
from fastapi import APIRouter, Depends

from feedgen import __version__
from feedgen.api.dependencies import get_generator
from feedgen.api.schemas import HealthResponse, StatsResponse
from feedgen.data.generator import EngineState, TradeFeedGenerator


router = APIRouter()


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check(generator: TradeFeedGenerator = Depends(get_generator)):
    """
    Health check endpoint.

    Reports the engine state; the service is healthy while it is generating.
    """
    snapshot = generator.stats.snapshot()
    healthy = generator.state in (EngineState.IDLE, EngineState.RUNNING)

    return HealthResponse(
        status="healthy" if healthy else "stopping",
        version=__version__,
        state=generator.state.value,
        uptime_seconds=max(0.0, snapshot.elapsed_seconds),
        publish_failures=generator.publish_failures,
    )


@router.get(
    "/stats",
    response_model=StatsResponse,
    tags=["Statistics"],
    summary="Live generation statistics",
    description="Snapshot of trade, fraud, volume and breakdown counters"
)
async def get_stats(generator: TradeFeedGenerator = Depends(get_generator)):
    return StatsResponse.from_snapshot(generator.stats.snapshot())
