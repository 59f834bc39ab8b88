"""
Pydantic schemas for the stats API responses.
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field

from feedgen.data.stats import StatsSnapshot


class StatsResponse(BaseModel):
    """Live generation statistics"""

    total_trades: int = Field(..., ge=0, description="Trades published so far")
    fraud_trades: int = Field(..., ge=0, description="Trades produced by fraud patterns")
    fraud_share: float = Field(..., ge=0, le=1, description="Fraud trades / total trades")
    tps: float = Field(..., ge=0, description="Average trades per second since start")
    volume: float = Field(..., ge=0, description="Cumulative notional volume")
    volume_minor_units: int = Field(..., ge=0, description="Cumulative notional volume in cents")
    elapsed_seconds: float = Field(..., ge=0, description="Seconds since generation started")
    by_category: Dict[str, int] = Field(default_factory=dict, description="Trades per profile category")
    by_symbol: Dict[str, int] = Field(default_factory=dict, description="Trades per symbol")

    @classmethod
    def from_snapshot(cls, snapshot: StatsSnapshot) -> "StatsResponse":
        return cls(
            total_trades=snapshot.total_trades,
            fraud_trades=snapshot.fraud_trades,
            fraud_share=snapshot.fraud_share,
            tps=snapshot.tps,
            volume=snapshot.volume,
            volume_minor_units=snapshot.volume_minor_units,
            elapsed_seconds=max(0.0, snapshot.elapsed_seconds),
            by_category=snapshot.by_category,
            by_symbol=snapshot.by_symbol,
        )

    model_config = {
        "json_schema_extra": {
            "example": {
                "total_trades": 1200,
                "fraud_trades": 64,
                "fraud_share": 0.053,
                "tps": 99.8,
                "volume": 24512345.67,
                "volume_minor_units": 2451234567,
                "elapsed_seconds": 12.02,
                "by_category": {"HFT": 220, "REGULAR": 801, "CASUAL": 115, "FRAUD": 64},
                "by_symbol": {"AAPL": 310, "TSLA": 188},
            }
        }
    }


class HealthResponse(BaseModel):
    """Response schema for health check"""

    status: str = Field(..., description="Service status")
    version: str = Field(..., description="Generator version")
    state: str = Field(..., description="Engine state (idle, running, draining, stopped)")
    uptime_seconds: float = Field(..., ge=0, description="Seconds since generation started")
    publish_failures: int = Field(0, ge=0, description="Trades the sink rejected")


class ErrorResponse(BaseModel):
    """Response schema for errors"""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
