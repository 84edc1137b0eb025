"""mpslice — zero-copy, single-value MessagePack decoding.

Decode exactly one MessagePack value from the front of a buffer and get
back the unconsumed remainder, or a precise reason why not.

Quick start:
    >>> from mpslice import decode_one
    >>> value, rest = decode_one(b"\\x92\\xa3abc\\x05")
    >>> value
    Value(array, 2)
    >>> decode_one(rest)[0]
    Value(string, b'abc')

Truncated input raises NeedMoreData with the exact shortfall, so a
streaming caller can wait for more bytes and retry from the same offset:
    >>> from mpslice import NeedMoreData
    >>> try:
    ...     decode_one(b"\\xd9\\x05ab")
    ... except NeedMoreData as e:
    ...     e.needed
    3
"""

from __future__ import annotations

from ._constants import INT64_MAX, INT64_MIN, MAX_DEPTH, UINT64_MAX
from ._core import (
    FALSE,
    KIND_ARRAY,
    KIND_BINARY,
    KIND_BOOLEAN,
    KIND_DOUBLE,
    KIND_FLOAT,
    KIND_MAP,
    KIND_NIL,
    KIND_SIGNED,
    KIND_STRING,
    KIND_UNSIGNED,
    NIL,
    TRUE,
    Value,
    child_count,
    decode_at,
    decode_one,
    read_be_u16,
    read_be_u32,
    read_be_u64,
    value_text,
)
from ._errors import (
    ERR_EOS,
    ERR_INVALID,
    ERR_NEED_MORE_DATA,
    REASON_DEPTH,
    REASON_EXT,
    REASON_RESERVED,
    REASON_UTF8,
    DecodeError,
    EndOfStream,
    InvalidEncoding,
    NeedMoreData,
    is_retryable,
)
from ._walk import iter_tokens

__version__ = "0.3.0"

__all__ = [
    # Decoding
    "decode_one",
    "decode_at",
    "iter_tokens",
    "child_count",
    "value_text",
    "read_be_u16",
    "read_be_u32",
    "read_be_u64",
    # Value model
    "Value",
    "NIL",
    "TRUE",
    "FALSE",
    "KIND_NIL",
    "KIND_BOOLEAN",
    "KIND_UNSIGNED",
    "KIND_SIGNED",
    "KIND_FLOAT",
    "KIND_DOUBLE",
    "KIND_STRING",
    "KIND_BINARY",
    "KIND_ARRAY",
    "KIND_MAP",
    # Exceptions
    "DecodeError",
    "EndOfStream",
    "InvalidEncoding",
    "NeedMoreData",
    "is_retryable",
    # Error codes and reasons
    "ERR_EOS",
    "ERR_INVALID",
    "ERR_NEED_MORE_DATA",
    "REASON_RESERVED",
    "REASON_EXT",
    "REASON_UTF8",
    "REASON_DEPTH",
    # Limits
    "MAX_DEPTH",
    "UINT64_MAX",
    "INT64_MIN",
    "INT64_MAX",
]
