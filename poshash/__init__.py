"""
Zobrist position hashing for chess positions.

Builds a reproducible random table from a seed and xor-folds its entries
into a 64-bit key for transposition tables, opening books and repetition
detection.
"""

from .core.errors import ContractViolation
from .core.hashing import compute
from .core.position import PositionView, Snapshot
from .core.zobrist import DEFAULT_SEED, ZobristTable, default_table, generate

__all__ = [
    "ContractViolation",
    "compute",
    "PositionView",
    "Snapshot",
    "DEFAULT_SEED",
    "ZobristTable",
    "default_table",
    "generate",
]
