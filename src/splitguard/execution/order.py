from __future__ import annotations

import json
import numbers
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Union

from splitguard.core.errors import InvalidOrderError
from splitguard.core.types import (
    AssetClass,
    EpochMillis,
    OptionType,
    OrderId,
    OrderSide,
    OrderType,
    ProductType,
    StrategyId,
    Symbol,
    TimeInForce,
    Venue,
)


@dataclass(frozen=True)
class Spot:
    asset_class: AssetClass | None = None


@dataclass(frozen=True)
class Futures:
    delivery_date: EpochMillis | None = None
    contract_size: float | None = None
    margin: float | None = None
    commission: float | None = None
    overnight_fee: float | None = None


@dataclass(frozen=True)
class Options:
    strike_price: float
    option_type: OptionType
    expiry_date: EpochMillis


@dataclass(frozen=True)
class Swap:
    fixed_rate: float
    floating_rate_index: str
    notional_amount: float


@dataclass(frozen=True)
class CFD:
    leverage: int | None = None
    margin: float | None = None
    commission: float | None = None
    overnight_fee: float | None = None
    dividend_adjustment: float | None = None
    contract_size: float | None = None


ProductExtension = Union[Spot, Futures, Options, Swap, CFD]

_EXTENSION_TYPES: dict[ProductType, type] = {
    ProductType.SPOT: Spot,
    ProductType.FUTURES: Futures,
    ProductType.OPTIONS: Options,
    ProductType.SWAP: Swap,
    ProductType.CFD: CFD,
}


def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if is_dataclass(value):
        return {f.name: _plain(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


@dataclass(frozen=True)
class Order:
    """Venue-neutral order descriptor shared by parent and child orders."""
    id: OrderId
    quantity: int
    symbol: Symbol
    side: OrderSide
    order_type: OrderType = OrderType.LIMIT
    product_type: ProductType = ProductType.SPOT
    price: float | None = None
    timestamp: EpochMillis = 0
    expiry_date: EpochMillis | None = None
    currency: str = "USD"
    exchange: Venue | None = None
    time_in_force: TimeInForce | None = None
    extension: ProductExtension | None = None

    def validate(self) -> None:
        """Raise InvalidOrderError if the descriptor is not executable."""
        if not self.id:
            raise InvalidOrderError("Order id must not be empty")
        if not isinstance(self.quantity, numbers.Integral) or isinstance(self.quantity, bool):
            raise InvalidOrderError(f"Order {self.id}: quantity must be an integer, got {self.quantity!r}")
        if self.quantity <= 0:
            raise InvalidOrderError(f"Order {self.id}: quantity must be positive, got {self.quantity}")
        if self.order_type == OrderType.LIMIT and self.price is None:
            raise InvalidOrderError(f"Order {self.id}: limit order requires a price")
        if self.price is not None and self.price <= 0:
            raise InvalidOrderError(f"Order {self.id}: price must be positive, got {self.price}")
        if self.time_in_force == TimeInForce.GTD and self.expiry_date is None:
            raise InvalidOrderError(f"Order {self.id}: GTD order requires an expiry date")
        if self.extension is not None:
            expected = _EXTENSION_TYPES[self.product_type]
            if not isinstance(self.extension, expected):
                raise InvalidOrderError(
                    f"Order {self.id}: {self.product_type.value} order cannot carry "
                    f"{type(self.extension).__name__} fields"
                )

    def to_dict(self) -> dict[str, Any]:
        return _plain(self)

    def to_json(self, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=2 if pretty else None)

    def __str__(self) -> str:
        return self.to_json()


@dataclass(frozen=True)
class ParentOrder:
    order: Order
    strategy_id: StrategyId

    @property
    def id(self) -> OrderId:
        return self.order.id

    @property
    def quantity(self) -> int:
        return self.order.quantity

    @property
    def side(self) -> OrderSide:
        return self.order.side

    def validate(self) -> None:
        if not self.strategy_id:
            raise InvalidOrderError(f"Parent order {self.order.id}: strategy id must not be empty")
        self.order.validate()

    def to_dict(self) -> dict[str, Any]:
        # Descriptor fields are flattened next to strategy_id
        return {**self.order.to_dict(), "strategy_id": self.strategy_id}

    def to_json(self, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=2 if pretty else None)

    def __str__(self) -> str:
        return self.to_json()


@dataclass(frozen=True)
class ChildOrder:
    order: Order
    strategy_id: StrategyId
    parent_id: OrderId
    insert_at: EpochMillis

    @property
    def id(self) -> OrderId:
        return self.order.id

    @property
    def quantity(self) -> int:
        return self.order.quantity

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.order.to_dict(),
            "strategy_id": self.strategy_id,
            "parent_id": self.parent_id,
            "insert_at": self.insert_at,
        }

    def to_json(self, pretty: bool = False) -> str:
        return json.dumps(self.to_dict(), indent=2 if pretty else None)

    def __str__(self) -> str:
        return self.to_json()
