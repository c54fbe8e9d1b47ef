from __future__ import annotations

from enum import IntEnum, IntFlag


class Color(IntEnum):
    WHITE = 0
    BLACK = 1

    def other(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(IntEnum):
    # Ordinals double as table indices.
    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5


class CastlingRights(IntFlag):
    NONE = 0
    WK = 1
    WQ = 2
    BK = 4
    BQ = 8
    ALL = 15


NUM_SQUARES = 64
NUM_SIDES = 2
NUM_KINDS = 6
NUM_CASTLING_STATES = 16
NUM_FILES = 8


def str_to_square(s: str) -> int:
    """
    'a1' -> 0, 'b1' -> 1, ..., 'h8' -> 63.
    Rank 1 is index 0..7, rank 8 is index 56..63.
    """
    if len(s) != 2:
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = ord(s[1]) - ord("1")
    if not (0 <= file < 8 and 0 <= rank < 8):
        raise ValueError(f"invalid square: {s!r}")
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    if not (0 <= idx < NUM_SQUARES):
        raise ValueError(f"square out of range: {idx}")
    return chr(ord("a") + file_of(idx)) + chr(ord("1") + rank_of(idx))


def file_of(idx: int) -> int:
    return idx % 8


def rank_of(idx: int) -> int:
    return idx // 8


def castling_from_fen(field: str) -> CastlingRights:
    if field == "-":
        return CastlingRights.NONE
    rights = CastlingRights.NONE
    for ch in field:
        flag = {
            "K": CastlingRights.WK,
            "Q": CastlingRights.WQ,
            "k": CastlingRights.BK,
            "q": CastlingRights.BQ,
        }.get(ch)
        if flag is None:
            raise ValueError(f"invalid FEN castling: {field!r}")
        rights |= flag
    return rights
