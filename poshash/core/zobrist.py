"""
Zobrist random table.

Layout (794 entries, drawn in this exact order):
    piece_square[square][side][kind]   64 * 2 * 6 = 768
    castling[rights]                   16  (one per combined rights value)
    en_passant[file]                   8
    side_to_move[side]                 2   (index 0 fixed to 0, not drawn)

Changing the seed, the algorithm or the draw order changes every hash and
invalidates any book or table persisted with the old keys.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, NamedTuple, Optional, Tuple

from poshash.core.errors import ContractViolation, check_range
from poshash.core.rng import make_source
from poshash.core.types import (
    NUM_CASTLING_STATES,
    NUM_FILES,
    NUM_KINDS,
    NUM_SIDES,
    NUM_SQUARES,
)

_LOGGER = logging.getLogger(__name__)

DEFAULT_SEED = 24
DEFAULT_ALGORITHM = "lcg48"

TABLE_SIZE = NUM_SQUARES * NUM_SIDES * NUM_KINDS + NUM_CASTLING_STATES + NUM_FILES + NUM_SIDES


class Category(IntEnum):
    PIECE_SQUARE = 0
    CASTLING = 1
    EN_PASSANT = 2
    SIDE_TO_MOVE = 3


class Feature(NamedTuple):
    """One hashable fact about a position: a table category plus its index tuple."""

    category: Category
    index: Tuple[int, ...]


def piece_feature(square: int, side: int, kind: int) -> Feature:
    return Feature(Category.PIECE_SQUARE, (square, side, kind))


def castling_feature(rights: int) -> Feature:
    return Feature(Category.CASTLING, (rights,))


def en_passant_feature(file: int) -> Feature:
    return Feature(Category.EN_PASSANT, (file,))


def side_feature(side: int) -> Feature:
    return Feature(Category.SIDE_TO_MOVE, (side,))


@dataclass(frozen=True, slots=True)
class ZobristTable:
    """Holds random keys; positions xor them together to form their hash."""

    seed: int
    algorithm: str
    piece_square: Tuple[Tuple[Tuple[int, ...], ...], ...]
    castling: Tuple[int, ...]
    en_passant: Tuple[int, ...]
    side_to_move: Tuple[int, ...]

    def piece(self, square: int, side: int, kind: int) -> int:
        check_range("square", square, NUM_SQUARES)
        check_range("side", side, NUM_SIDES)
        check_range("piece kind", kind, NUM_KINDS)
        return self.piece_square[square][side][kind]

    def castle(self, rights: int) -> int:
        return self.castling[check_range("castling rights", rights, NUM_CASTLING_STATES)]

    def ep_file(self, file: int) -> int:
        return self.en_passant[check_range("en passant file", file, NUM_FILES)]

    def side(self, active: int) -> int:
        return self.side_to_move[check_range("side to move", active, NUM_SIDES)]

    def value(self, feature: Feature) -> int:
        category, index = feature
        if category == Category.PIECE_SQUARE and len(index) == 3:
            return self.piece(*index)
        if len(index) == 1:
            if category == Category.CASTLING:
                return self.castle(index[0])
            if category == Category.EN_PASSANT:
                return self.ep_file(index[0])
            if category == Category.SIDE_TO_MOVE:
                return self.side(index[0])
        raise ContractViolation(f"invalid feature: {feature!r}")

    def __len__(self) -> int:
        return TABLE_SIZE

    def __iter__(self) -> Iterator[Tuple[Feature, int]]:
        """Yield (feature, value) pairs in generation order."""
        for sq in range(NUM_SQUARES):
            for side in range(NUM_SIDES):
                for kind in range(NUM_KINDS):
                    yield piece_feature(sq, side, kind), self.piece_square[sq][side][kind]
        for rights in range(NUM_CASTLING_STATES):
            yield castling_feature(rights), self.castling[rights]
        for file in range(NUM_FILES):
            yield en_passant_feature(file), self.en_passant[file]
        for side in range(NUM_SIDES):
            yield side_feature(side), self.side_to_move[side]


def generate(seed: int = DEFAULT_SEED, algorithm: str = DEFAULT_ALGORITHM) -> ZobristTable:
    """
    Build a table from a seed.

    The source is seeded exactly once and every entry is drawn in the
    order documented at the top of this module.
    """
    source = make_source(algorithm, seed)

    piece_square = tuple(
        tuple(
            tuple(source.next_u64() for _kind in range(NUM_KINDS))
            for _side in range(NUM_SIDES)
        )
        for _sq in range(NUM_SQUARES)
    )
    castling = tuple(source.next_u64() for _ in range(NUM_CASTLING_STATES))
    en_passant = tuple(source.next_u64() for _ in range(NUM_FILES))
    # Index 0 (white) is fixed to 0 and not drawn.
    side_to_move = (0, source.next_u64())

    table = ZobristTable(
        seed=seed,
        algorithm=algorithm,
        piece_square=piece_square,
        castling=castling,
        en_passant=en_passant,
        side_to_move=side_to_move,
    )
    _LOGGER.debug("generated zobrist table seed=%d algorithm=%s entries=%d", seed, algorithm, len(table))
    return table


_default: Optional[ZobristTable] = None
_default_lock = threading.Lock()


def default_table() -> ZobristTable:
    """Process-wide table for DEFAULT_SEED, built on first use at most once."""
    global _default
    table = _default
    if table is None:
        with _default_lock:
            if _default is None:
                _default = generate(DEFAULT_SEED, DEFAULT_ALGORITHM)
            table = _default
    return table
