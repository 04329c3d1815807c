"""Binary encoding of trade events in the FlatBuffers table layout."""

from __future__ import annotations

import struct
from typing import Union

from trading_engine.trade_event import EventType, OrderSide, TradeEvent

# Field slots in the vtable, and each field's offset inside the table.
_FIELDS = {
    "event_id": (0, 4),
    "timestamp": (1, 8),
    "event_type": (2, 48),
    "symbol": (3, 32),
    "price": (4, 16),
    "quantity": (5, 24),
    "order_id": (6, 36),
    "side": (7, 49),
    "user_id": (8, 40),
    "exchange_id": (9, 44),
}
_STRING_FIELDS = ("event_id", "symbol", "order_id", "user_id", "exchange_id")

_SLOT_COUNT = len(_FIELDS)
_VTABLE_POS = 4
_VTABLE_SIZE = 4 + 2 * _SLOT_COUNT
_TABLE_POS = 32
_TABLE_SIZE = 52


class SerializationError(Exception):
    """Raised when an event cannot be encoded or a buffer cannot be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"Serialization error: {self.message}"


def _parse_error(detail: str) -> SerializationError:
    return SerializationError(f"Failed to parse FlatBuffer: {detail}")


class _TableView:
    """Bounds-checked read access to the root table of a buffer."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = self._unpack("<I", 0)
        self._vtable = self._pos - self._unpack("<i", self._pos)
        self._vt_size, self._table_size = struct.unpack_from(
            "<HH", data, self._check(self._vtable, 4)
        )
        if self._vt_size < 4 or self._vt_size % 2:
            raise _parse_error("invalid vtable size")
        if self._table_size < 4:
            raise _parse_error("invalid table size")
        self._check(self._vtable, self._vt_size)
        self._check(self._pos, self._table_size)

    def _check(self, offset: int, size: int) -> int:
        if offset < 0 or offset + size > len(self._data):
            raise _parse_error("range out of bounds")
        return offset

    def _unpack(self, fmt: str, offset: int):
        self._check(offset, struct.calcsize(fmt))
        return struct.unpack_from(fmt, self._data, offset)[0]

    def _field(self, slot: int, width: int) -> int:
        entry = 4 + 2 * slot
        if entry + 2 > self._vt_size:
            return 0
        offset = self._unpack("<H", self._vtable + entry)
        if offset and (offset < 4 or offset + width > self._table_size):
            raise _parse_error(f"field {slot} lies outside its table")
        return offset

    def scalar(self, name: str, fmt: str, default):
        slot, _ = _FIELDS[name]
        offset = self._field(slot, struct.calcsize(fmt))
        if not offset:
            return default
        return self._unpack(fmt, self._pos + offset)

    def string(self, name: str) -> str:
        slot, _ = _FIELDS[name]
        offset = self._field(slot, 4)
        if not offset:
            return ""
        at = self._pos + offset
        target = at + self._unpack("<I", at)
        length = self._unpack("<I", target)
        start = self._check(target + 4, length)
        try:
            return self._data[start : start + length].decode("utf-8")
        except UnicodeDecodeError as exc:
            raise _parse_error(f"invalid utf-8 in {name}") from exc


class FlatBufCodec:
    """Encodes TradeEvent objects to bytes and back."""

    def serialize(self, event: TradeEvent) -> bytes:
        """Encode ``event``; raise SerializationError if a field cannot be represented."""
        table = bytearray(_TABLE_SIZE)
        try:
            struct.pack_into("<i", table, 0, _TABLE_POS - _VTABLE_POS)
            struct.pack_into("<Q", table, _FIELDS["timestamp"][1], event.timestamp)
            struct.pack_into("<d", table, _FIELDS["price"][1], event.price)
            struct.pack_into("<d", table, _FIELDS["quantity"][1], event.quantity)
            struct.pack_into("<B", table, _FIELDS["event_type"][1], event.event_type.value)
            struct.pack_into("<B", table, _FIELDS["side"][1], event.side.value)
            strings = [(name, getattr(event, name).encode("utf-8")) for name in _STRING_FIELDS]
        except (struct.error, UnicodeEncodeError, AttributeError, TypeError) as exc:
            raise SerializationError(f"Cannot encode event: {exc}") from exc

        slot_offsets = [0] * _SLOT_COUNT
        for slot, offset in _FIELDS.values():
            slot_offsets[slot] = offset

        buf = bytearray(struct.pack("<I", _TABLE_POS))
        buf += struct.pack("<HH", _VTABLE_SIZE, _TABLE_SIZE)
        buf += struct.pack(f"<{_SLOT_COUNT}H", *slot_offsets)
        buf += bytes(_TABLE_POS - len(buf))
        buf += table

        for name, raw in strings:
            field_pos = _TABLE_POS + _FIELDS[name][1]
            struct.pack_into("<I", buf, field_pos, len(buf) - field_pos)
            buf += struct.pack("<I", len(raw)) + raw + b"\0"
            buf += bytes(-len(buf) % 4)
        return bytes(buf)

    def deserialize(self, data: Union[bytes, bytearray, memoryview]) -> TradeEvent:
        """Decode a buffer produced by ``serialize``; raise SerializationError if invalid."""
        view = _TableView(bytes(data))

        type_code = view.scalar("event_type", "<B", 0)
        try:
            event_type = EventType(type_code)
        except ValueError:
            raise SerializationError(f"Unknown event type: {type_code}") from None

        side_code = view.scalar("side", "<B", 0)
        try:
            side = OrderSide(side_code)
        except ValueError:
            raise SerializationError(f"Unknown order side: {side_code}") from None

        return TradeEvent(
            event_id=view.string("event_id"),
            timestamp=view.scalar("timestamp", "<Q", 0),
            event_type=event_type,
            symbol=view.string("symbol"),
            price=view.scalar("price", "<d", 0.0),
            quantity=view.scalar("quantity", "<d", 0.0),
            order_id=view.string("order_id"),
            side=side,
            user_id=view.string("user_id"),
            exchange_id=view.string("exchange_id"),
        )