#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Randomized decoder invariants.
#
# This runner:
# - builds random single-token encodings (every tag family) by hand
# - checks the decoded value and consumed length
# - checks that every proper prefix raises NeedMoreData, and that feeding
#   exactly the hinted number of bytes always makes progress
# - throws random byte strings at decode_one and checks that only
#   DecodeError subclasses come out and that repeated calls agree
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, struct, random
from typing import Any, Optional, Tuple

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

from mpslice import (
    DecodeError, InvalidEncoding, NeedMoreData, decode_one,
    KIND_ARRAY, KIND_BINARY, KIND_BOOLEAN, KIND_DOUBLE, KIND_FLOAT, KIND_MAP,
    KIND_NIL, KIND_SIGNED, KIND_STRING, KIND_UNSIGNED,
)

SEED = int(os.environ.get("MPSLICE_SEED", "1337"))
ROUNDS = int(os.environ.get("MPSLICE_ROUNDS", "5000"))
MAX_PAYLOAD = int(os.environ.get("MPSLICE_MAX_PAYLOAD", "300"))

random.seed(SEED)

def fail(label: str, raw: bytes, detail: Any) -> None:
    print("VIOLATION:", label)
    print("INPUT:", raw.hex())
    print("DETAIL:", detail)
    raise SystemExit(1)

# --- generators ---

def rand_payload() -> bytes:
    n = random.choice([0, 1, random.randint(0, 31), random.randint(0, MAX_PAYLOAD)])
    return bytes(random.getrandbits(8) for _ in range(n))

def rand_token() -> Tuple[bytes, str, Any]:
    """Return (encoding, kind, expected data) for one random token."""
    r = random.randrange(12)
    if r == 0:
        n = random.randint(0, 0x7F)
        return bytes([n]), KIND_UNSIGNED, n
    if r == 1:
        n = random.randint(-32, -1)
        return struct.pack(">b", n), KIND_SIGNED, n
    if r == 2:
        tag, fmt = random.choice([(0xCC, ">B"), (0xCD, ">H"), (0xCE, ">I"), (0xCF, ">Q")])
        n = random.randint(0, 2 ** (struct.calcsize(fmt) * 8) - 1)
        return bytes([tag]) + struct.pack(fmt, n), KIND_UNSIGNED, n
    if r == 3:
        tag, fmt = random.choice([(0xD0, ">b"), (0xD1, ">h"), (0xD2, ">i"), (0xD3, ">q")])
        bits = struct.calcsize(fmt) * 8
        n = random.randint(-(2 ** (bits - 1)), 2 ** (bits - 1) - 1)
        return bytes([tag]) + struct.pack(fmt, n), KIND_SIGNED, n
    if r == 4:
        raw = struct.pack(">f", random.uniform(-1e6, 1e6))
        return b"\xca" + raw, KIND_FLOAT, struct.unpack(">f", raw)[0]
    if r == 5:
        x = random.uniform(-1e300, 1e300)
        return b"\xcb" + struct.pack(">d", x), KIND_DOUBLE, x
    if r == 6:
        p = rand_payload()[:31]
        return bytes([0xA0 | len(p)]) + p, KIND_STRING, p
    if r in (7, 8):
        p = rand_payload()
        kind = KIND_STRING if r == 7 else KIND_BINARY
        tags = (0xD9, 0xDA, 0xDB) if r == 7 else (0xC4, 0xC5, 0xC6)
        if len(p) <= 0xFF and random.random() < 0.5:
            return bytes([tags[0], len(p)]) + p, kind, p
        if random.random() < 0.5:
            return bytes([tags[1]]) + struct.pack(">H", len(p)) + p, kind, p
        return bytes([tags[2]]) + struct.pack(">I", len(p)) + p, kind, p
    if r == 9:
        kind = random.choice([KIND_ARRAY, KIND_MAP])
        n = random.randint(0, 15)
        base = 0x90 if kind == KIND_ARRAY else 0x80
        return bytes([base | n]), kind, n
    if r == 10:
        kind = random.choice([KIND_ARRAY, KIND_MAP])
        n = random.randint(0, 2**32 - 1)
        if n <= 0xFFFF and random.random() < 0.5:
            tag = 0xDC if kind == KIND_ARRAY else 0xDE
            return bytes([tag]) + struct.pack(">H", n), kind, n
        tag = 0xDD if kind == KIND_ARRAY else 0xDF
        return bytes([tag]) + struct.pack(">I", n), kind, n
    b = random.choice([0xC0, 0xC2, 0xC3])
    return bytes([b]), (KIND_NIL if b == 0xC0 else KIND_BOOLEAN), {0xC0: None, 0xC2: False, 0xC3: True}[b]

def outcome(raw: bytes) -> Tuple[str, Optional[Any]]:
    try:
        value, rest = decode_one(raw)
    except NeedMoreData as e:
        return e.code, e.needed
    except InvalidEncoding as e:
        return e.code, e.reason
    except DecodeError as e:
        return e.code, None
    data = bytes(value.data) if isinstance(value.data, memoryview) else value.data
    return value.kind, (data, len(rest))

# --- checks ---

def check_token(enc: bytes, kind: str, data: Any) -> None:
    trailer = bytes(random.getrandbits(8) for _ in range(random.randint(0, 3)))
    value, rest = decode_one(enc + trailer)
    got = bytes(value.data) if isinstance(value.data, memoryview) else value.data
    if value.kind != kind or got != data:
        fail("decoded value", enc, (value, kind, data))
    if bytes(rest) != trailer:
        fail("remainder", enc, bytes(rest))

    # Replay the streaming protocol: start with the tag byte alone and
    # append exactly the hinted shortfall until the value decodes.
    have = 1
    while True:
        try:
            decode_one(enc[:have])
        except NeedMoreData as e:
            if e.needed is None or e.needed <= 0:
                fail("hint", enc[:have], e.needed)
            have += e.needed
            if have > len(enc):
                fail("hint overshoots", enc[:have], e.needed)
            continue
        break
    if have != len(enc):
        fail("decoded before all bytes arrived", enc, have)

    for cut in range(1, len(enc)):
        try:
            decode_one(enc[:cut])
        except NeedMoreData:
            continue
        fail("prefix decoded", enc[:cut], cut)

def check_random_bytes() -> None:
    raw = bytes(random.getrandbits(8) for _ in range(random.randint(0, 12)))
    try:
        first = outcome(raw)
    except Exception as e:  # anything but DecodeError is a decoder bug
        fail("unexpected exception", raw, repr(e))
    # repr() so that NaN payloads compare equal
    if repr(outcome(raw)) != repr(first):
        fail("not repeatable", raw, first)

def main() -> int:
    for _ in range(ROUNDS):
        if random.random() < 0.7:
            check_token(*rand_token())
        else:
            check_random_bytes()
    print(f"OK: invariant rounds={ROUNDS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
