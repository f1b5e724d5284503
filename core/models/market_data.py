"""
Market data models

Pydantic models for the RSI stream:
- TradeEvent: Single trade observed on the input topic
- IndicatorResult: RSI value published to the output topic
"""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field


class TradeEvent(BaseModel):
    """
    Raw trade event from the trade-data topic

    Only the wire names (token_address, price_in_sol, block_time) are accepted
    and the price must be a JSON number; unknown fields are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    asset_key: str = Field(alias="token_address", description="Token / asset identifier")
    price: float = Field(
        alias="price_in_sol",
        strict=True,
        allow_inf_nan=False,
        description="Trade price (quoted in SOL)",
    )
    observed_at: str = Field(alias="block_time", description="Block time as sent by the source")


class IndicatorResult(BaseModel):
    """
    RSI value for one asset, emitted once per qualifying trade
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    asset_key: str = Field(alias="token", description="Token / asset identifier")
    emitted_at: datetime = Field(
        alias="timestamp",
        default_factory=lambda: datetime.now(UTC),
        description="Emission time (UTC)",
    )
    rsi: float = Field(ge=0.0, le=100.0, description="Relative Strength Index (0-100)")

    def to_dict(self) -> dict:
        """Convert to the rsi-data wire shape (RFC 3339 timestamp)"""
        return {
            "token": self.asset_key,
            "timestamp": self.emitted_at.isoformat(),
            "rsi": self.rsi,
        }
