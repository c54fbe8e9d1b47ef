"""
Position hashing by xor-folding Zobrist table entries.

compute() folds every active feature of a position. The helpers below it
update an existing hash in place of recomputation: xor is its own inverse,
so xoring the same entry twice cancels out.
"""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from poshash.core.errors import check_range
from poshash.core.position import PositionView, iter_squares
from poshash.core.rng import MASK_64
from poshash.core.types import NUM_CASTLING_STATES, NUM_KINDS, NUM_SIDES, NUM_SQUARES, file_of
from poshash.core.zobrist import (
    Feature,
    ZobristTable,
    castling_feature,
    default_table,
    en_passant_feature,
    piece_feature,
    side_feature,
)


def iter_features(position: PositionView) -> Iterator[Feature]:
    """
    Yield every active feature of a position in a stable order:
    pieces (side, then kind, then ascending square), castling rights,
    en passant file when a target exists, side to move.
    """
    for side in range(NUM_SIDES):
        for kind in range(NUM_KINDS):
            for sq in iter_squares(position.occupancy(side, kind)):
                yield piece_feature(sq, side, kind)

    yield castling_feature(check_range("castling rights", position.castling_rights(), NUM_CASTLING_STATES))

    ep = position.en_passant_target()
    if ep is not None:
        yield en_passant_feature(file_of(check_range("en passant square", ep, NUM_SQUARES)))

    yield side_feature(check_range("side to move", position.active_side(), NUM_SIDES))


def fold(table: ZobristTable, features: Iterable[Feature]) -> int:
    h = 0
    for feature in features:
        h ^= table.value(feature)
    return h


def compute(position: PositionView, table: Optional[ZobristTable] = None) -> int:
    """Full hash of a position; uses the process-wide default table if none is given."""
    if table is None:
        table = default_table()
    return fold(table, iter_features(position))


# Incremental updates


def toggle_piece(table: ZobristTable, h: int, square: int, side: int, kind: int) -> int:
    """Add or remove one piece."""
    return h ^ table.piece(square, side, kind)


def move_piece(table: ZobristTable, h: int, src: int, dst: int, side: int, kind: int) -> int:
    return h ^ table.piece(src, side, kind) ^ table.piece(dst, side, kind)


def change_castling(table: ZobristTable, h: int, old: int, new: int) -> int:
    # Rights are keyed by their combined value, never flag by flag.
    return h ^ table.castle(old) ^ table.castle(new)


def change_en_passant(table: ZobristTable, h: int, old: Optional[int], new: Optional[int]) -> int:
    if old is not None:
        h ^= table.ep_file(file_of(check_range("en passant square", old, NUM_SQUARES)))
    if new is not None:
        h ^= table.ep_file(file_of(check_range("en passant square", new, NUM_SQUARES)))
    return h


def flip_side(table: ZobristTable, h: int) -> int:
    return h ^ table.side(0) ^ table.side(1)


# Signed interop


def to_signed64(h: int) -> int:
    """Two's-complement view of a hash, as stored by signed 64-bit keys."""
    h &= MASK_64
    return h - (1 << 64) if h >> 63 else h


def from_signed64(value: int) -> int:
    return value & MASK_64
