"""Trade event model: event kinds, order sides and the event record itself."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from enum import Enum


class EventType(Enum):
    """Kind of a trading event."""

    ORDER_PLACED = 0
    ORDER_CANCELLED = 1
    ORDER_FILLED = 2
    TRADE_EXECUTED = 3
    PRICE_UPDATE = 4


class OrderSide(Enum):
    """Side of an order."""

    BUY = 0
    SELL = 1


@dataclass
class TradeEvent:
    """A single trading event as it flows through the engine."""

    event_id: str
    timestamp: int
    event_type: EventType
    symbol: str
    price: float
    quantity: float
    order_id: str
    side: OrderSide
    user_id: str
    exchange_id: str

    @classmethod
    def create(
        cls,
        event_type: EventType,
        symbol: str,
        price: float,
        quantity: float,
        order_id: str,
        side: OrderSide,
        user_id: str,
        exchange_id: str,
    ) -> TradeEvent:
        """Build an event with a fresh random id and the current time in milliseconds."""
        return cls(
            event_id=str(uuid.uuid4()),
            timestamp=time.time_ns() // 1_000_000,
            event_type=event_type,
            symbol=symbol,
            price=price,
            quantity=quantity,
            order_id=order_id,
            side=side,
            user_id=user_id,
            exchange_id=exchange_id,
        )

    @classmethod
    def order_placed(
        cls,
        symbol: str,
        price: float,
        quantity: float,
        order_id: str,
        side: OrderSide,
        user_id: str,
        exchange_id: str,
    ) -> TradeEvent:
        """Build an ORDER_PLACED event."""
        return cls.create(
            EventType.ORDER_PLACED,
            symbol,
            price,
            quantity,
            order_id,
            side,
            user_id,
            exchange_id,
        )

    @classmethod
    def trade_executed(
        cls,
        symbol: str,
        price: float,
        quantity: float,
        order_id: str,
        side: OrderSide,
        user_id: str,
        exchange_id: str,
    ) -> TradeEvent:
        """Build a TRADE_EXECUTED event."""
        return cls.create(
            EventType.TRADE_EXECUTED,
            symbol,
            price,
            quantity,
            order_id,
            side,
            user_id,
            exchange_id,
        )