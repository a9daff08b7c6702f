#!/usr/bin/env python3
"""
Decode console.log calldata using the generated selector table.

A console.log call is a staticcall to the console address whose calldata is
``selector ++ abi.encode(args...)``. The selector picks the argument types out
of the table; eth_abi does the rest.
"""
from __future__ import annotations

import sys
import runpy
import argparse
from typing import Any, Dict, List, Sequence, Tuple

from eth_abi import decode
from eth_abi.exceptions import DecodingError
from eth_utils import to_bytes
from web3 import Web3

from console_selectors import GenerationError, GenerationModel, build_model
from console_types import abi_type

SelectorTable = Dict[bytes, Tuple[str, ...]]  # selector -> ABI types

__all__ = [
    "DecodeError",
    "UnknownSelectorError",
    "table_from_model",
    "load_table",
    "decode_args",
    "format_value",
    "decode_log",
]


class DecodeError(Exception):
    pass


class UnknownSelectorError(DecodeError):
    def __init__(self, selector: bytes):
        self.selector = selector
        super().__init__(f"unknown console.log selector 0x{selector.hex()}")


# --- tables ----------------------------------------------------------------


def table_from_model(model: GenerationModel) -> SelectorTable:
    return {e.selector: tuple(abi_type(a) for a in e.args) for e in model.entries}


def load_table(path: str) -> Tuple[str, SelectorTable]:
    """
    Load ADDRESS and SELECTORS from a generated console_args.py.

    The file is executed as Python, so only point this at a trusted file
    written by console_gen.py.
    """
    ns = runpy.run_path(path)
    try:
        return ns["ADDRESS"], dict(ns["SELECTORS"])
    except KeyError as e:
        raise DecodeError(f"{path} is missing {e.args[0]}") from e


# --- decoding --------------------------------------------------------------


def decode_args(calldata: bytes, table: SelectorTable) -> List[Any]:
    if len(calldata) < 4:
        raise DecodeError(f"calldata too short for a selector ({len(calldata)} bytes)")
    selector = bytes(calldata[:4])
    types = table.get(selector)
    if types is None:
        raise UnknownSelectorError(selector)
    if not types:
        return []
    try:
        return list(decode(list(types), bytes(calldata[4:])))
    except DecodingError as e:
        raise DecodeError(f"failed to decode {list(types)}: {e}") from e


def format_value(value: Any, typ: str) -> str:
    if typ == "bool":
        return "true" if value else "false"
    if typ == "address":
        return Web3.to_checksum_address(value)
    if typ.startswith("bytes"):
        return "0x" + bytes(value).hex()
    return str(value)


def decode_log(calldata: bytes, table: SelectorTable) -> str:
    """Render a console.log call the way a node prints it: values joined by spaces."""
    values = decode_args(calldata, table)
    types = table[bytes(calldata[:4])]
    return " ".join(format_value(v, t) for v, t in zip(values, types))


# --- CLI -------------------------------------------------------------------


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Decode console.log calldata into the logged line.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    ap.add_argument("calldata", help="Call input (0x...) sent to the console address")
    ap.add_argument(
        "--table",
        help="Path to a generated console_args.py (default: build the table in-process)",
    )
    return ap.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)

    try:
        calldata = to_bytes(hexstr=args.calldata)
    except ValueError as e:
        print(f"❌ Invalid calldata hex: {e}", file=sys.stderr)
        sys.exit(2)

    if args.table:
        try:
            _, table = load_table(args.table)
        except (OSError, DecodeError) as e:
            print(f"❌ Failed to load selector table from {args.table}: {e}", file=sys.stderr)
            sys.exit(2)
    else:
        try:
            table = table_from_model(build_model())
        except GenerationError as e:
            print(f"❌ {e}", file=sys.stderr)
            sys.exit(2)

    try:
        line = decode_log(calldata, table)
    except DecodeError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(2)
    print(line)


if __name__ == "__main__":
    main()
