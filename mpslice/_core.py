"""Single-value MessagePack decoder.

One call reads one tag byte plus whatever fixed-width field or
length-prefixed payload that tag announces, and nothing more.  Containers
are reported by count only:

    Array(n)  — the next n values in the buffer are its elements
    Map(n)    — the next 2n values are alternating keys and values

String and Binary payloads are memoryview slices of the input, so no
payload byte is ever copied.  The decoder keeps no state between calls.
Every field read checks the remaining length first and raises
NeedMoreData before consuming anything, so a caller can always retry the
whole call from the same starting offset once more bytes have arrived.
"""

from __future__ import annotations

import struct
from typing import Any, Callable, Dict, NamedTuple, Tuple, Union

from ._constants import (
    FIXARRAY_MAX,
    FIXARRAY_MIN,
    FIXCOUNT_MASK,
    FIXMAP_MAX,
    FIXMAP_MIN,
    FIXSTR_MASK,
    FIXSTR_MAX,
    FIXSTR_MIN,
    NEGATIVE_FIXINT_MIN,
    POSITIVE_FIXINT_MAX,
    TAG_ARRAY16,
    TAG_ARRAY32,
    TAG_BIN8,
    TAG_BIN16,
    TAG_BIN32,
    TAG_FALSE,
    TAG_FLOAT32,
    TAG_FLOAT64,
    TAG_INT8,
    TAG_INT16,
    TAG_INT32,
    TAG_INT64,
    TAG_MAP16,
    TAG_MAP32,
    TAG_NIL,
    TAG_RESERVED,
    TAG_STR8,
    TAG_STR16,
    TAG_STR32,
    TAG_TRUE,
    TAG_UINT8,
    TAG_UINT16,
    TAG_UINT32,
    TAG_UINT64,
)
from ._errors import (
    REASON_EXT,
    REASON_RESERVED,
    REASON_UTF8,
    EndOfStream,
    InvalidEncoding,
    NeedMoreData,
)

BytesLike = Union[bytes, bytearray, memoryview]

# ── Value model ───────────────────────────────────────────────

KIND_NIL: str = "nil"
KIND_BOOLEAN: str = "boolean"
KIND_UNSIGNED: str = "unsigned"
KIND_SIGNED: str = "signed"
KIND_FLOAT: str = "float"        # IEEE-754 single, widened to a Python float
KIND_DOUBLE: str = "double"
KIND_STRING: str = "string"      # memoryview, UTF-8 not validated
KIND_BINARY: str = "binary"      # memoryview
KIND_ARRAY: str = "array"        # element count
KIND_MAP: str = "map"            # entry (key/value pair) count


class Value(NamedTuple):
    """One decoded token.  `data` depends on `kind` (see KIND_*)."""

    kind: str
    data: Any = None

    def is_container(self) -> bool:
        return self.kind == KIND_ARRAY or self.kind == KIND_MAP

    def __repr__(self) -> str:
        if isinstance(self.data, memoryview):
            return "Value({}, {!r})".format(self.kind, bytes(self.data))
        if self.kind == KIND_NIL:
            return "Value(nil)"
        return "Value({}, {!r})".format(self.kind, self.data)


NIL = Value(KIND_NIL)
FALSE = Value(KIND_BOOLEAN, False)
TRUE = Value(KIND_BOOLEAN, True)


def _as_view(data: BytesLike) -> memoryview:
    view = memoryview(data)
    if view.ndim != 1 or view.format != "B":
        view = view.cast("B")
    return view


# ── Big-endian field readers ─────────────────────────────────
# Each reader is handed a field of exactly the right width; the length
# check has already happened in _take().

def read_be_u16(field: BytesLike) -> int:
    return struct.unpack(">H", field)[0]


def read_be_u32(field: BytesLike) -> int:
    return struct.unpack(">I", field)[0]


def read_be_u64(field: BytesLike) -> int:
    return struct.unpack(">Q", field)[0]


_READERS: Dict[int, Callable[[BytesLike], int]] = {
    1: lambda field: field[0],
    2: read_be_u16,
    4: read_be_u32,
    8: read_be_u64,
}


def _as_signed(u: int, width: int) -> int:
    """Reinterpret an unsigned `width`-byte integer as two's complement."""
    sign_bit = 1 << (width * 8 - 1)
    return u - (sign_bit << 1) if u & sign_bit else u


def _float32_from_bits(bits: int) -> float:
    """Widen a binary32 bit pattern to a Python float, exactly.

    struct's ">f" widens through a C float-to-double cast, which sets the
    quiet bit of a signaling NaN.  NaNs are therefore rebuilt as binary64
    bit patterns by hand: same sign, all-ones exponent, mantissa shifted
    into the top of the 52-bit field.
    """
    if bits & 0x7F800000 == 0x7F800000 and bits & 0x007FFFFF:
        sign = bits >> 31
        mantissa = bits & 0x007FFFFF
        return struct.unpack(">d", struct.pack(
            ">Q", sign << 63 | 0x7FF << 52 | mantissa << 29))[0]
    return struct.unpack(">f", struct.pack(">I", bits))[0]


def _take(buf: memoryview, off: int, n: int) -> Tuple[memoryview, int]:
    """Return the n bytes at off and the offset just past them."""
    avail = len(buf) - off
    if avail < n:
        raise NeedMoreData(n - avail)
    return buf[off:off + n], off + n


def _read_uint(buf: memoryview, off: int, width: int) -> Tuple[int, int]:
    field, off = _take(buf, off, width)
    return _READERS[width](field), off


# ── Dispatch tables ──────────────────────────────────────────
# Tag → width in bytes of the field that follows the tag.

_UINT_WIDTHS: Dict[int, int] = {
    TAG_UINT8: 1, TAG_UINT16: 2, TAG_UINT32: 4, TAG_UINT64: 8,
}
_INT_WIDTHS: Dict[int, int] = {
    TAG_INT8: 1, TAG_INT16: 2, TAG_INT32: 4, TAG_INT64: 8,
}
# Length-prefixed payloads: (prefix width, kind)
_PREFIXED: Dict[int, Tuple[int, str]] = {
    TAG_STR8: (1, KIND_STRING),
    TAG_STR16: (2, KIND_STRING),
    TAG_STR32: (4, KIND_STRING),
    TAG_BIN8: (1, KIND_BINARY),
    TAG_BIN16: (2, KIND_BINARY),
    TAG_BIN32: (4, KIND_BINARY),
}
# Containers with an explicit count: (count width, kind)
_COUNTED: Dict[int, Tuple[int, str]] = {
    TAG_ARRAY16: (2, KIND_ARRAY),
    TAG_ARRAY32: (4, KIND_ARRAY),
    TAG_MAP16: (2, KIND_MAP),
    TAG_MAP32: (4, KIND_MAP),
}


def decode_at(buf: BytesLike, offset: int = 0) -> Tuple[Value, int]:
    """Decode one value from buf starting at offset.

    Returns (value, end) where end is the offset just past the bytes this
    value occupies.  Raises EndOfStream when offset == len(buf),
    InvalidEncoding for reserved and extension tags, and NeedMoreData
    when the buffer stops inside a field.
    """
    buf = _as_view(buf)
    if offset < 0 or offset > len(buf):
        raise ValueError("offset {} outside buffer of length {}".format(offset, len(buf)))
    if offset == len(buf):
        raise EndOfStream("end of stream")

    tag = buf[offset]
    off = offset + 1

    # ── Tags that carry their payload in the tag byte ────────
    if tag <= POSITIVE_FIXINT_MAX:
        return Value(KIND_UNSIGNED, tag), off
    if tag >= NEGATIVE_FIXINT_MIN:
        return Value(KIND_SIGNED, tag - 0x100), off
    if FIXMAP_MIN <= tag <= FIXMAP_MAX:
        return Value(KIND_MAP, tag & FIXCOUNT_MASK), off
    if FIXARRAY_MIN <= tag <= FIXARRAY_MAX:
        return Value(KIND_ARRAY, tag & FIXCOUNT_MASK), off
    if FIXSTR_MIN <= tag <= FIXSTR_MAX:
        payload, off = _take(buf, off, tag & FIXSTR_MASK)
        return Value(KIND_STRING, payload), off

    if tag == TAG_NIL:
        return NIL, off
    if tag == TAG_FALSE:
        return FALSE, off
    if tag == TAG_TRUE:
        return TRUE, off
    if tag == TAG_RESERVED:
        raise InvalidEncoding(REASON_RESERVED, "reserved tag 0xc1")

    # ── Fixed-width numbers ──────────────────────────────────
    if tag in _UINT_WIDTHS:
        u, off = _read_uint(buf, off, _UINT_WIDTHS[tag])
        return Value(KIND_UNSIGNED, u), off

    if tag in _INT_WIDTHS:
        width = _INT_WIDTHS[tag]
        u, off = _read_uint(buf, off, width)
        return Value(KIND_SIGNED, _as_signed(u, width)), off

    if tag == TAG_FLOAT32:
        bits, off = _read_uint(buf, off, 4)
        return Value(KIND_FLOAT, _float32_from_bits(bits)), off
    if tag == TAG_FLOAT64:
        field, off = _take(buf, off, 8)
        return Value(KIND_DOUBLE, struct.unpack(">d", field)[0]), off

    # ── Length prefix, then payload ──────────────────────────
    # Two separate reads: the prefix itself may be short, and so may the
    # payload it announces.  Each raises with its own shortfall.
    if tag in _PREFIXED:
        width, kind = _PREFIXED[tag]
        n, off = _read_uint(buf, off, width)
        payload, off = _take(buf, off, n)
        return Value(kind, payload), off

    if tag in _COUNTED:
        width, kind = _COUNTED[tag]
        count, off = _read_uint(buf, off, width)
        return Value(kind, count), off

    # Every other byte belongs to the ext / fixext family (EXT_TAGS).
    raise InvalidEncoding(REASON_EXT, "unsupported extension tag 0x{:02x}".format(tag))


def decode_one(data: BytesLike) -> Tuple[Value, memoryview]:
    """Decode the first value in data.

    Returns (value, remainder), where remainder is a memoryview over the
    same bytes with the consumed prefix removed.
    """
    view = _as_view(data)
    value, end = decode_at(view, 0)
    return value, view[end:]


# ── Caller helpers ────────────────────────────────────────────

def child_count(value: Value) -> int:
    """Number of further values a container announces (0 for scalars)."""
    if value.kind == KIND_ARRAY:
        return value.data
    if value.kind == KIND_MAP:
        return 2 * value.data
    return 0


def value_text(value: Value) -> str:
    """Strictly decode a String value's payload as UTF-8."""
    if value.kind != KIND_STRING:
        raise TypeError("expected a string value, got {}".format(value.kind))
    try:
        return str(value.data, "utf-8")
    except UnicodeDecodeError:
        raise InvalidEncoding(REASON_UTF8, "invalid utf-8 in string payload")
