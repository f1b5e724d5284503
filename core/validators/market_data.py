"""
Trade payload validator for the real-time RSI stream

Validates:
- Payload presence (empty / tombstone messages)
- JSON decoding
- Schema (token_address, price_in_sol, block_time)
- Price sanity (logged, never rejected)
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from core.models.market_data import TradeEvent

logger = logging.getLogger(__name__)


def _reject_constant(name: str) -> float:
    # json accepts NaN/Infinity literals; the wire format does not
    raise ValueError(f"Non-finite number literal: {name}")


class TradeEventValidator:
    """
    Decode raw stream payloads into TradeEvent objects

    Features:
    - Accepts bytes, str or an already-decoded dict
    - Malformed payloads are reported, never raised
    - Non-positive prices are logged but passed through unchanged
    - Rejection tracking for diagnostics
    """

    def __init__(self):
        self.invalid_count = 0
        self.empty_count = 0
        self.suspicious_price_count = 0

    def parse(self, payload: bytes | str | dict[str, Any] | None) -> tuple[TradeEvent | None, str | None]:
        """
        Parse a raw payload

        Args:
            payload: Message value from the ingestion adapter

        Returns:
            (trade, error_message)
            - (TradeEvent, None) if valid
            - (None, "error reason") if the payload must be dropped

        Example:
            >>> validator = TradeEventValidator()
            >>> trade, error = validator.parse(b'{"token_address": "X", "price_in_sol": 1.0, "block_time": "t"}')
            >>> trade.asset_key
            'X'
        """
        if payload is None or (isinstance(payload, (bytes, bytearray, str)) and not payload.strip()):
            self.empty_count += 1
            return None, "Empty payload"

        data = payload
        if isinstance(payload, (bytes, bytearray)):
            try:
                data = payload.decode("utf-8")
            except UnicodeDecodeError as e:
                self.invalid_count += 1
                return None, f"Payload is not UTF-8: {e}"

        if isinstance(data, str):
            try:
                data = json.loads(data, parse_constant=_reject_constant)
            except ValueError as e:
                self.invalid_count += 1
                return None, f"Invalid JSON: {e}"

        if not isinstance(data, dict):
            self.invalid_count += 1
            return None, f"Expected JSON object, got {type(data).__name__}"

        try:
            trade = TradeEvent.model_validate(data)
        except ValidationError as e:
            self.invalid_count += 1
            fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in e.errors())
            return None, f"Schema mismatch ({fields})"

        if trade.price <= 0:
            self.suspicious_price_count += 1
            logger.warning(
                f"⚠️ Suspicious price for {trade.asset_key}: {trade.price} "
                f"(passed through unchanged)"
            )

        return trade, None

    def get_stats(self) -> dict[str, int]:
        """
        Get validation statistics

        Returns:
            Dictionary with invalid_count, empty_count, suspicious_price_count
        """
        return {
            "invalid_count": self.invalid_count,
            "empty_count": self.empty_count,
            "suspicious_price_count": self.suspicious_price_count,
        }

    def reset_stats(self) -> None:
        """Reset statistics counters"""
        self.invalid_count = 0
        self.empty_count = 0
        self.suspicious_price_count = 0
