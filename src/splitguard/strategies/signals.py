from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from splitguard.config.settings import AdverseSelectionConfig
from splitguard.core.events import utc_now
from splitguard.core.types import OrderSide, OrderType
from splitguard.risk.ledger import Position

logger = logging.getLogger(__name__)

STOP_LOSS = "Stop loss"
TAKE_PROFIT = "Take profit"
ADVERSE_SELECTION_PROTECTION = "Adverse selection protection"
FOLLOWING_INFORMED_FLOW = "Following informed flow"


@dataclass(frozen=True)
class TradeSignal:
    """Trading action for the caller to act on."""
    side: OrderSide
    quantity: float
    order_type: OrderType
    reason: str
    price: float | None = None
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "side": self.side.value,
            "quantity": self.quantity,
            "order_type": self.order_type.value,
            "reason": self.reason,
            "price": self.price,
            "timestamp": self.timestamp.isoformat(),
        }


class SignalGenerator:
    """Priority-ordered decision table.

    1. Position risk exit (stop loss / take profit)
    2. Response to an adverse-selection trigger
    3. No signal

    Every call re-evaluates from its inputs; nothing is carried between calls.
    The trigger is passed as a callable so that it is only consulted (and its
    cooldown only consumed) when no risk exit fired.
    """

    def __init__(self, config: AdverseSelectionConfig, clock: Callable[[], float] = time.time):
        self.config = config
        self.clock = clock

    def _now(self) -> datetime:
        return datetime.fromtimestamp(self.clock(), tz=timezone.utc)

    def generate(self,
                 position: Position,
                 price: float | None,
                 adverse_selection: bool | Callable[[], bool],
                 imbalance: float) -> TradeSignal | None:
        if price is None:
            return None

        signal = self._risk_exit(position, price)
        if signal is not None:
            return signal

        triggered = adverse_selection() if callable(adverse_selection) else adverse_selection
        if triggered:
            return self._adverse_selection_response(position, price, imbalance)
        return None

    def _risk_exit(self, position: Position, price: float) -> TradeSignal | None:
        if position.is_flat or not position.reference_price:
            return None

        change = (price - position.reference_price) / position.reference_price
        if position.is_long:
            exit_side = OrderSide.SELL
            pnl = change
        else:
            exit_side = OrderSide.BUY
            pnl = -change

        if pnl <= -self.config.stop_loss_pct:
            reason = STOP_LOSS
        elif pnl >= self.config.take_profit_pct:
            reason = TAKE_PROFIT
        else:
            return None

        logger.info(f"{reason}: pnl={pnl:.4%} on size {position.size} @ ref {position.reference_price}")
        return TradeSignal(
            side=exit_side,
            quantity=abs(position.size),
            order_type=OrderType.MARKET,
            reason=reason,
            price=price,
            timestamp=self._now(),
        )

    def _adverse_selection_response(self,
                                    position: Position,
                                    price: float,
                                    imbalance: float) -> TradeSignal | None:
        if imbalance > 0:
            # Buy pressure: exit longs, follow from flat
            if position.is_long:
                return TradeSignal(OrderSide.SELL, abs(position.size), OrderType.MARKET,
                                   ADVERSE_SELECTION_PROTECTION, price, self._now())
            if position.is_flat:
                return TradeSignal(OrderSide.BUY, self.config.max_position_size, OrderType.LIMIT,
                                   FOLLOWING_INFORMED_FLOW, price, self._now())
        elif imbalance < 0:
            if position.is_short:
                return TradeSignal(OrderSide.BUY, abs(position.size), OrderType.MARKET,
                                   ADVERSE_SELECTION_PROTECTION, price, self._now())
            if position.is_flat:
                return TradeSignal(OrderSide.SELL, self.config.max_position_size, OrderType.LIMIT,
                                   FOLLOWING_INFORMED_FLOW, price, self._now())
        return None
