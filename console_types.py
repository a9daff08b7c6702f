"""Type vocabulary for the console.log signature catalogue."""
from __future__ import annotations

from typing import FrozenSet, Tuple

TypeName = str
Signature = Tuple[TypeName, ...]

__all__ = [
    "FULL_TYPES",
    "COMBINABLE_TYPES",
    "COMBINABLE_SET",
    "REFERENCE_TYPES",
    "abi_type",
]

# Single-argument forms, in the order they appear in the generated files.
FULL_TYPES: Tuple[TypeName, ...] = (
    "string",
    "uint",
    "int",
    "bool",
    "address",
    "bytes",
) + tuple(f"bytes{n}" for n in range(1, 33))

# Types used for the 2..4 argument permutations.
COMBINABLE_TYPES: Tuple[TypeName, ...] = ("string", "uint", "address", "bool")
COMBINABLE_SET: FrozenSet[TypeName] = frozenset(COMBINABLE_TYPES)

# Passed with a `memory` location in Solidity.
REFERENCE_TYPES: FrozenSet[TypeName] = frozenset({"string", "bytes"})

_ABI_ALIASES = {
    "uint": "uint256",
    "int": "int256",
}


def abi_type(name: TypeName) -> str:
    """
    Map a vocabulary name to its canonical ABI type (uint -> uint256).

    Only used for decoding; selectors are derived from the short names.
    """
    return _ABI_ALIASES.get(name, name)
