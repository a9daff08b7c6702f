"""
Selector derivation and the rendering model for the console.log catalogue.

Every enumerated signature becomes a SelectorEntry carrying its canonical
text (``log(uint,bool)``), its 4-byte selector and the helpers the templates
need to print parameter lists. build_model() wraps the entries together with
the fixed console address.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from eth_utils import keccak
from web3 import Web3

from console_signatures import gen_signatures
from console_types import COMBINABLE_SET, COMBINABLE_TYPES, REFERENCE_TYPES, Signature, abi_type

SelectorHex = str  # 8 hex chars, no 0x

# ASCII "console.log", left-padded to 20 bytes.
CONSOLE_ADDRESS = os.getenv("CONSOLE_ADDRESS", "0x000000000000000000636f6e736f6c652e6c6f67")

__all__ = [
    "CONSOLE_ADDRESS",
    "GenerationError",
    "SelectorCollisionError",
    "SelectorEntry",
    "GenerationModel",
    "canonical_signature",
    "selector_of",
    "checksum",
    "find_collisions",
    "build_model",
]


class GenerationError(Exception):
    pass


class SelectorCollisionError(GenerationError):
    def __init__(self, collisions: Dict[SelectorHex, List[str]]):
        self.collisions = collisions
        super().__init__(f"selector collisions: {collisions}")


# --- selector helpers ------------------------------------------------------


def canonical_signature(args: Sequence[str]) -> str:
    return f"log({','.join(args)})"


def selector_of(sig: str) -> bytes:
    """First 4 bytes of keccak256 over the signature text."""
    return keccak(text=sig)[:4]


def checksum(addr: str) -> str:
    if not isinstance(addr, str) or not Web3.is_address(addr):
        raise GenerationError(f"Invalid Ethereum address: {addr!r}")
    return Web3.to_checksum_address(addr)


# --- model -----------------------------------------------------------------


@dataclass(frozen=True)
class SelectorEntry:
    sig: str
    selector: bytes
    args: Signature
    # Vocabulary the signature was enumerated from; drives is_log.
    combinable: FrozenSet[str] = field(default=COMBINABLE_SET, repr=False)

    @classmethod
    def from_args(
        cls, args: Sequence[str], combinable: FrozenSet[str] = COMBINABLE_SET
    ) -> "SelectorEntry":
        sig = canonical_signature(args)
        return cls(sig=sig, selector=selector_of(sig), args=tuple(args), combinable=combinable)

    @property
    def selector_hex(self) -> SelectorHex:
        return self.selector.hex()

    def selector_literal(self) -> str:
        return f'bytes.fromhex("{self.selector_hex}")'

    @property
    def is_log_type(self) -> bool:
        return len(self.args) == 1

    @property
    def is_log(self) -> bool:
        if len(self.args) != 1:
            return True
        return self.args[0] in self.combinable

    def params(self) -> str:
        return ", ".join(f"p{i}" for i in range(len(self.args)))

    def signature_args(self) -> str:
        """Solidity parameter list, e.g. ``string memory p0, uint p1``."""
        out = []
        for i, arg in enumerate(self.args):
            if arg in REFERENCE_TYPES:
                out.append(f"{arg} memory p{i}")
            else:
                out.append(f"{arg} p{i}")
        return ", ".join(out)

    def log_signature(self) -> str:
        return f"log({self.signature_args()})"

    def log_type_signature(self) -> str:
        return f"log{self.args[0].title()}({self.signature_args()})"

    def arg_types(self) -> List[str]:
        """Names of the per-type ABI constants in the generated data module."""
        return [f"ARG_{arg.upper()}" for arg in self.args]


@dataclass(frozen=True)
class GenerationModel:
    address: str
    entries: Tuple[SelectorEntry, ...]

    def arg_constants(self) -> List[Tuple[str, str]]:
        """Unique (identifier, abi type) pairs, in first-use order."""
        seen: Dict[str, str] = {}
        for entry in self.entries:
            for arg, ident in zip(entry.args, entry.arg_types()):
                seen.setdefault(ident, abi_type(arg))
        return list(seen.items())

    def to_json(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "count": len(self.entries),
            "entries": [
                {
                    "sig": e.sig,
                    "selector": e.selector_hex,
                    "args": list(e.args),
                    "isLog": e.is_log,
                    "isLogType": e.is_log_type,
                }
                for e in self.entries
            ],
        }


def find_collisions(entries: Iterable[SelectorEntry]) -> Dict[SelectorHex, List[str]]:
    """Selectors shared by more than one signature."""
    sel_to_sigs: Dict[SelectorHex, List[str]] = {}
    for entry in entries:
        sel_to_sigs.setdefault(entry.selector_hex, []).append(entry.sig)
    return {sel: sigs for sel, sigs in sel_to_sigs.items() if len(sigs) > 1}


def build_model(
    address: str = CONSOLE_ADDRESS,
    signatures: Optional[Sequence[Signature]] = None,
    combinable_types: Sequence[str] = COMBINABLE_TYPES,
) -> GenerationModel:
    """
    Build the rendering model.

    combinable_types must be the vocabulary the signatures were enumerated
    with; it decides which single-argument entries also get a generic log.
    """
    if signatures is None:
        signatures = gen_signatures(combinable_types=combinable_types)
    combinable = frozenset(combinable_types)
    entries = tuple(SelectorEntry.from_args(args, combinable) for args in signatures)

    collisions = find_collisions(entries)
    if collisions:
        raise SelectorCollisionError(collisions)

    return GenerationModel(address=checksum(address), entries=entries)
