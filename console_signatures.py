"""Enumerate every overloaded console.log signature.

Order is: log(), the single-type forms, then every 2-, 3- and 4-tuple over the
combinable types in odometer order. Generated files depend on this order
staying stable between runs.
"""
from __future__ import annotations

import itertools
from typing import List, Sequence

from console_types import COMBINABLE_TYPES, FULL_TYPES, Signature, TypeName

MAX_ARGS = 4

__all__ = ["MAX_ARGS", "arg_block", "gen_signatures"]


def arg_block(k: int, combinable_types: Sequence[TypeName] = COMBINABLE_TYPES) -> List[Signature]:
    """All ordered k-tuples over combinable_types, with repetition."""
    return list(itertools.product(combinable_types, repeat=k))


def gen_signatures(
    full_types: Sequence[TypeName] = FULL_TYPES,
    combinable_types: Sequence[TypeName] = COMBINABLE_TYPES,
    max_args: int = MAX_ARGS,
) -> List[Signature]:
    signatures: List[Signature] = [()]
    signatures.extend((t,) for t in full_types)
    for k in range(2, max_args + 1):
        signatures.extend(arg_block(k, combinable_types))
    return signatures
