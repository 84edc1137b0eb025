"""MessagePack tag bytes, masks, and field widths.

Every encoded value starts with one tag byte.  Some tags carry the whole
value (fixints, nil, booleans), some carry a small length in their low bits
(fixstr, fixarray, fixmap), and the rest announce a fixed-width field that
follows the tag.  All multi-byte fields are big-endian.
"""

from __future__ import annotations

# ── Tag ranges with embedded payload ─────────────────────────
POSITIVE_FIXINT_MAX: int = 0x7F          # 0x00–0x7F: value is the tag
FIXMAP_MIN: int = 0x80                   # 0x80–0x8F: entry count in low nibble
FIXMAP_MAX: int = 0x8F
FIXARRAY_MIN: int = 0x90                 # 0x90–0x9F: element count in low nibble
FIXARRAY_MAX: int = 0x9F
FIXSTR_MIN: int = 0xA0                   # 0xA0–0xBF: byte length in low 5 bits
FIXSTR_MAX: int = 0xBF
NEGATIVE_FIXINT_MIN: int = 0xE0          # 0xE0–0xFF: tag as int8

FIXCOUNT_MASK: int = 0x0F
FIXSTR_MASK: int = 0x1F

# ── Single-byte tags ─────────────────────────────────────────
TAG_NIL: int = 0xC0
TAG_RESERVED: int = 0xC1                 # never used by any encoder
TAG_FALSE: int = 0xC2
TAG_TRUE: int = 0xC3

TAG_BIN8: int = 0xC4
TAG_BIN16: int = 0xC5
TAG_BIN32: int = 0xC6

TAG_EXT8: int = 0xC7
TAG_EXT16: int = 0xC8
TAG_EXT32: int = 0xC9

TAG_FLOAT32: int = 0xCA
TAG_FLOAT64: int = 0xCB

TAG_UINT8: int = 0xCC
TAG_UINT16: int = 0xCD
TAG_UINT32: int = 0xCE
TAG_UINT64: int = 0xCF

TAG_INT8: int = 0xD0
TAG_INT16: int = 0xD1
TAG_INT32: int = 0xD2
TAG_INT64: int = 0xD3

TAG_FIXEXT1: int = 0xD4
TAG_FIXEXT2: int = 0xD5
TAG_FIXEXT4: int = 0xD6
TAG_FIXEXT8: int = 0xD7
TAG_FIXEXT16: int = 0xD8

TAG_STR8: int = 0xD9
TAG_STR16: int = 0xDA
TAG_STR32: int = 0xDB

TAG_ARRAY16: int = 0xDC
TAG_ARRAY32: int = 0xDD
TAG_MAP16: int = 0xDE
TAG_MAP32: int = 0xDF

# Extension types are recognised only so they can be rejected by name.
EXT_TAGS = frozenset([
    TAG_EXT8, TAG_EXT16, TAG_EXT32,
    TAG_FIXEXT1, TAG_FIXEXT2, TAG_FIXEXT4, TAG_FIXEXT8, TAG_FIXEXT16,
])

# ── Integer ranges ───────────────────────────────────────────
UINT64_MAX: int = 2**64 - 1
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# ── Caller-side limits ───────────────────────────────────────
# The wire format has no nesting limit.  Token walkers that follow
# Array/Map counts bound their depth with this.
MAX_DEPTH: int = 512
