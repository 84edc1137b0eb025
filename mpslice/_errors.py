"""Failure codes and exception classes for the single-value decoder.

A decode attempt fails in exactly one of three ways, and callers must be
able to tell them apart without parsing messages:

    ERR_EOS             — nothing to decode; the stream ended on a boundary
    ERR_INVALID         — malformed forever; more bytes will not help
    ERR_NEED_MORE_DATA  — well-formed so far but truncated; retry later

The `.code` attribute carries one of these strings.  Invalid encodings also
carry a short `.reason` tag.
"""

from __future__ import annotations

from typing import Optional

# ── Error codes ──────────────────────────────────────────────
ERR_EOS: str = "ERR_EOS"
ERR_INVALID: str = "ERR_INVALID"
ERR_NEED_MORE_DATA: str = "ERR_NEED_MORE_DATA"

# ── Invalid-encoding reasons ─────────────────────────────────
REASON_RESERVED: str = "reserved"            # tag 0xC1
REASON_EXT: str = "unsupported_ext"          # ext / fixext family
REASON_UTF8: str = "invalid_utf8"            # raised by value_text() only
REASON_DEPTH: str = "depth_exceeded"         # raised by token walkers only


class DecodeError(Exception):
    """Base class for every decoder failure.

    The `.code` attribute is one of the ERR_* strings above.
    """

    code: str = ""

    def __init__(self, msg: str = "") -> None:
        super().__init__(msg or self.code)


class EndOfStream(DecodeError):
    """The input was empty where a value was expected to start."""

    code = ERR_EOS


class InvalidEncoding(DecodeError):
    """The tag byte (or a value derived from it) can never be valid."""

    code = ERR_INVALID

    def __init__(self, reason: str, msg: str = "") -> None:
        super().__init__(msg or reason)
        self.reason = reason


class NeedMoreData(DecodeError):
    """The buffer ends inside the current field.

    `needed` is the number of additional bytes required to complete the
    field being read when it is known.  For length-prefixed payloads this is
    either the shortfall of the length prefix or of the payload, never both.
    """

    code = ERR_NEED_MORE_DATA

    def __init__(self, needed: Optional[int] = None, msg: str = "") -> None:
        if not msg:
            msg = ("need {} more byte(s)".format(needed)
                   if needed is not None else "need more data")
        super().__init__(msg)
        self.needed = needed


def is_retryable(exc: BaseException) -> bool:
    """True when the same call may succeed once more bytes are appended."""
    return isinstance(exc, NeedMoreData)
