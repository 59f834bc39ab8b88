"""
Trade record published to the event stream.
"""
from datetime import datetime
from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class TradeSide(str, Enum):
    """Direction of a trade"""
    BUY = "BUY"
    SELL = "SELL"


class Trade(BaseModel):
    """A single synthetic trade. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    trade_id: str = Field(..., description="Unique trade identifier (uuid4)")
    user_id: str = Field(..., description="Owning trader identity")
    symbol: str = Field(..., description="Instrument symbol")
    amount: float = Field(..., gt=0, description="Traded quantity (must be positive)")
    price: float = Field(..., gt=0, description="Price in currency units (must be positive)")
    side: TradeSide = Field(..., description="BUY or SELL")
    timestamp: datetime = Field(..., description="Trade time")

    @property
    def notional(self) -> float:
        return self.amount * self.price

    def to_stream_fields(self) -> Dict[str, str]:
        """Flatten the trade into the string field map written to the stream"""
        return {
            'id': self.trade_id,
            'user_id': self.user_id,
            'symbol': self.symbol,
            'amount': repr(self.amount),
            'price': repr(self.price),
            'type': self.side.value,
            'timestamp': self.timestamp.isoformat(),
        }
