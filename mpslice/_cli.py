"""mpslice command-line interface.

Usage:
    printf '\\x92\\xa3abc\\x05' | python3 -m mpslice dump
    python3 -m mpslice peek --hex 'cd 01 00'
    python3 -m mpslice dump --input payload.msgpack [--max-depth N]
    python3 -m mpslice version

Exit codes: 0 ok, 1 usage, 2 invalid or empty input, 3 truncated input.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from . import (
    MAX_DEPTH,
    DecodeError,
    NeedMoreData,
    Value,
    __version__,
    decode_one,
    iter_tokens,
)


class _Parser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors exit 1, leaving 2 for bad input."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        print(f"{self.prog}: error: {message}", file=sys.stderr)
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="mpslice",
        description="mpslice — inspect MessagePack bytes one token at a time",
    )
    sub = parser.add_subparsers(dest="command")

    # ── peek ──
    peek_p = sub.add_parser("peek", help="Decode the first value only")
    _add_source_args(peek_p)

    # ── dump ──
    dump_p = sub.add_parser("dump", help="List every token with its offset")
    _add_source_args(dump_p)
    dump_p.add_argument("--max-depth", type=int, default=MAX_DEPTH, metavar="N",
                        help="Reject nesting deeper than N (default {})".format(MAX_DEPTH))

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _add_source_args(p: argparse.ArgumentParser) -> None:
    src = p.add_mutually_exclusive_group()
    src.add_argument("--input", "-i", metavar="FILE",
                     help="Read bytes from FILE instead of stdin")
    src.add_argument("--hex", metavar="HEX",
                     help="Take bytes from a hex string (whitespace allowed)")


def _read_input(args: argparse.Namespace) -> bytes:
    """Read raw bytes from --hex, a file, or stdin."""
    if args.hex is not None:
        return bytes.fromhex(args.hex)
    if args.input:
        with open(args.input, "rb") as f:
            return f.read()
    if sys.stdin.isatty():
        print("mpslice: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def describe(value: Value) -> str:
    """One-line human-readable rendering of a token."""
    if isinstance(value.data, memoryview):
        return "{} {!r}".format(value.kind, bytes(value.data))
    if value.is_container():
        return "{}({})".format(value.kind, value.data)
    if value.data is None:
        return value.kind
    return "{} {!r}".format(value.kind, value.data)


def _cmd_peek(args: argparse.Namespace) -> None:
    raw = _read_input(args)
    value, rest = decode_one(raw)
    print("{}\tconsumed={}".format(describe(value), len(raw) - len(rest)))


def _cmd_dump(args: argparse.Namespace) -> None:
    raw = _read_input(args)
    for off, depth, value in iter_tokens(raw, max_depth=args.max_depth):
        print("{:08x}  {}{}".format(off, "  " * depth, describe(value)))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"mpslice {__version__}")
        return

    try:
        if args.command == "peek":
            _cmd_peek(args)
        elif args.command == "dump":
            _cmd_dump(args)
    except NeedMoreData as e:
        print(f"mpslice: truncated [{e.code}]: {e}", file=sys.stderr)
        sys.exit(3)
    except DecodeError as e:
        print(f"mpslice: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except ValueError as e:
        # bytes.fromhex
        print(f"mpslice: bad hex input: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
