from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, List, Optional, Protocol, Sequence, Tuple

from poshash.core.errors import ContractViolation, check_range
from poshash.core.types import (
    NUM_CASTLING_STATES,
    NUM_KINDS,
    NUM_SIDES,
    NUM_SQUARES,
    CastlingRights,
    Color,
    PieceType,
    castling_from_fen,
    str_to_square,
)

Piece = Tuple[Color, PieceType]

STARTPOS_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_BOARD_MASK = (1 << NUM_SQUARES) - 1

_FEN_SIDES = {"w": Color.WHITE, "b": Color.BLACK}
_FEN_KINDS = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}


def _parse_placement(field: str) -> List[Optional[Piece]]:
    """FEN piece placement -> 64-entry mailbox, a1 = 0."""
    rows = field.split("/")
    if len(rows) != 8:
        raise ValueError(f"invalid FEN ranks: {field!r}")

    squares: List[Optional[Piece]] = [None] * NUM_SQUARES
    # FEN lists rank 8 first.
    for rank, row in zip(range(7, -1, -1), rows):
        file = 0
        for ch in row:
            if ch in "12345678":
                file += int(ch)
            elif ch.lower() in _FEN_KINDS:
                if file >= 8:
                    raise ValueError(f"invalid FEN rank width: {row!r}")
                color = Color.WHITE if ch.isupper() else Color.BLACK
                squares[rank * 8 + file] = (color, _FEN_KINDS[ch.lower()])
                file += 1
            else:
                raise ValueError(f"invalid FEN piece: {ch!r}")
        if file != 8:
            raise ValueError(f"invalid FEN rank width: {row!r}")
    return squares


class PositionView(Protocol):
    """Read-only accessors the hash composer needs from a position."""

    def occupancy(self, side: int, kind: int) -> int: ...

    def castling_rights(self) -> int: ...

    def en_passant_target(self) -> Optional[int]: ...

    def active_side(self) -> int: ...


def iter_squares(bitmask: int) -> Iterator[int]:
    """Yield the index of every set bit, lowest first."""
    if bitmask < 0 or bitmask & ~_BOARD_MASK:
        raise ContractViolation(f"invalid occupancy bitmask: {bitmask:#x}")
    while bitmask:
        low = bitmask & -bitmask
        yield low.bit_length() - 1
        bitmask ^= low


@dataclass(frozen=True, slots=True)
class Snapshot:
    """
    Immutable position snapshot implementing PositionView.

    bitboards[side][kind] holds the occupied squares of that side's pieces of
    that kind (bit n = square n, a1 = 0).
    """

    bitboards: Tuple[Tuple[int, ...], ...]
    castling: int = int(CastlingRights.NONE)
    ep_square: Optional[int] = None
    side: int = int(Color.WHITE)

    def __post_init__(self) -> None:
        if len(self.bitboards) != NUM_SIDES or any(len(row) != NUM_KINDS for row in self.bitboards):
            raise ContractViolation(f"invalid bitboard shape: {self.bitboards!r}")
        seen = 0
        for row in self.bitboards:
            for bb in row:
                if bb < 0 or bb & ~_BOARD_MASK:
                    raise ContractViolation(f"invalid occupancy bitmask: {bb:#x}")
                if seen & bb:
                    raise ContractViolation(f"square occupied twice: {(seen & bb):#x}")
                seen |= bb
        check_range("castling rights", self.castling, NUM_CASTLING_STATES)
        if self.ep_square is not None:
            check_range("en passant square", self.ep_square, NUM_SQUARES)
        check_range("side to move", self.side, NUM_SIDES)

    # PositionView

    def occupancy(self, side: int, kind: int) -> int:
        check_range("side", side, NUM_SIDES)
        check_range("piece kind", kind, NUM_KINDS)
        return self.bitboards[side][kind]

    def castling_rights(self) -> int:
        return self.castling

    def en_passant_target(self) -> Optional[int]:
        return self.ep_square

    def active_side(self) -> int:
        return self.side

    # Construction

    @staticmethod
    def empty() -> "Snapshot":
        return Snapshot(bitboards=((0,) * NUM_KINDS,) * NUM_SIDES)

    @staticmethod
    def startpos() -> "Snapshot":
        return Snapshot.from_fen(STARTPOS_FEN)

    @staticmethod
    def from_squares(
        squares: Sequence[Optional[Tuple[int, int]]],
        side_to_move: int = int(Color.WHITE),
        castling_rights: int = int(CastlingRights.NONE),
        ep_square: Optional[int] = None,
    ) -> "Snapshot":
        """Build a snapshot from a 64-entry mailbox of (color, kind) or None."""
        if len(squares) != NUM_SQUARES:
            raise ContractViolation(f"invalid mailbox length: {len(squares)}")
        boards: List[List[int]] = [[0] * NUM_KINDS for _ in range(NUM_SIDES)]
        for sq, piece in enumerate(squares):
            if piece is None:
                continue
            color, kind = piece
            check_range("side", color, NUM_SIDES)
            check_range("piece kind", kind, NUM_KINDS)
            boards[color][kind] |= 1 << sq
        return Snapshot(
            bitboards=tuple(tuple(row) for row in boards),
            castling=int(castling_rights),
            ep_square=ep_square,
            side=int(side_to_move),
        )

    @staticmethod
    def from_fen(fen: str) -> "Snapshot":
        """
        Read placement, side to move, castling and en passant from a FEN.

        The halfmove and fullmove counters are optional and do not take part
        in the hash, so they are ignored.
        """
        parts = fen.strip().split()
        if len(parts) not in (4, 6):
            raise ValueError(f"invalid FEN (expected 4 or 6 fields): {fen!r}")

        placement, stm, castling, ep = parts[:4]

        side = _FEN_SIDES.get(stm)
        if side is None:
            raise ValueError(f"invalid FEN stm: {stm!r}")

        return Snapshot.from_squares(
            _parse_placement(placement),
            side_to_move=side,
            castling_rights=castling_from_fen(castling),
            ep_square=None if ep == "-" else str_to_square(ep),
        )

    # Queries

    def piece_at(self, square: int) -> Optional[Piece]:
        check_range("square", square, NUM_SQUARES)
        bit = 1 << square
        for side in range(NUM_SIDES):
            for kind in range(NUM_KINDS):
                if self.bitboards[side][kind] & bit:
                    return Color(side), PieceType(kind)
        return None

    # Derived snapshots

    def _with_board(self, side: int, kind: int, bb: int) -> "Snapshot":
        boards = [list(row) for row in self.bitboards]
        boards[side][kind] = bb
        return replace(self, bitboards=tuple(tuple(row) for row in boards))

    def place(self, square: int, side: int, kind: int) -> "Snapshot":
        check_range("square", square, NUM_SQUARES)
        check_range("side", side, NUM_SIDES)
        check_range("piece kind", kind, NUM_KINDS)
        if self.piece_at(square) is not None:
            raise ContractViolation(f"square already occupied: {square!r}")
        return self._with_board(side, kind, self.bitboards[side][kind] | (1 << square))

    def remove(self, square: int) -> "Snapshot":
        piece = self.piece_at(square)
        if piece is None:
            raise ContractViolation(f"square is empty: {square!r}")
        side, kind = piece
        return self._with_board(side, kind, self.bitboards[side][kind] & ~(1 << square))

    def move_piece(self, src: int, dst: int) -> "Snapshot":
        piece = self.piece_at(src)
        if piece is None:
            raise ContractViolation(f"square is empty: {src!r}")
        side, kind = piece
        return self.remove(src).place(dst, side, kind)

    def with_castling(self, rights: int) -> "Snapshot":
        return replace(self, castling=int(rights))

    def with_en_passant(self, square: Optional[int]) -> "Snapshot":
        return replace(self, ep_square=square)

    def with_side(self, side: int) -> "Snapshot":
        return replace(self, side=int(side))
