"""Tests for Square, Piece and Board."""

import pytest

from gambit.core.board import Board
from gambit.core.enums import Color, PieceType
from gambit.core.piece import Piece
from gambit.core.types import A1, E1, E4, E8, H8, Square, parse_square


class TestSquare:
    def test_names(self) -> None:
        assert A1.name == "a1"
        assert H8.name == "h8"
        assert Square(4, 3) == E4

    def test_parse(self) -> None:
        assert parse_square("e4") == E4
        assert parse_square("h8") == H8

    @pytest.mark.parametrize("name", ["", "e", "i1", "a9", "e44"])
    def test_parse_invalid(self, name: str) -> None:
        with pytest.raises(ValueError):
            parse_square(name)

    @pytest.mark.parametrize("file,rank", [(-1, 0), (8, 0), (0, -1), (0, 8)])
    def test_out_of_range_rejected(self, file: int, rank: int) -> None:
        with pytest.raises(ValueError):
            Square(file, rank)

    def test_offset(self) -> None:
        assert A1.offset(1, 1) == Square(1, 1)
        assert A1.offset(-1, 0) is None
        assert H8.offset(0, 1) is None

    def test_index(self) -> None:
        assert A1.index == 0
        assert H8.index == 63


class TestPiece:
    def test_from_char(self) -> None:
        assert Piece.from_char("N") == Piece(Color.WHITE, PieceType.KNIGHT)
        assert Piece.from_char("q") == Piece(Color.BLACK, PieceType.QUEEN)

    def test_invalid_char(self) -> None:
        with pytest.raises(ValueError, match="Invalid piece character"):
            Piece.from_char("x")

    def test_str(self) -> None:
        assert str(Piece(Color.WHITE, PieceType.KING)) == "K"
        assert str(Piece(Color.BLACK, PieceType.PAWN)) == "p"


class TestBoard:
    def test_initial_layout(self) -> None:
        b = Board.initial()
        assert b[E1] == Piece(Color.WHITE, PieceType.KING)
        assert b[E8] == Piece(Color.BLACK, PieceType.KING)
        assert b.piece_count() == 32
        assert b.is_empty(E4)

    def test_king_cache_follows_moves(self) -> None:
        b = Board.initial()
        king = b[E1]
        b[E1] = None
        b[E4] = king
        assert b.king_square(Color.WHITE) == E4
        b[E4] = None
        assert b.king_square(Color.WHITE) is None

    def test_find_uses_identity(self) -> None:
        b = Board()
        first = Piece(Color.WHITE, PieceType.ROOK)
        second = Piece(Color.WHITE, PieceType.ROOK)
        b[A1] = first
        b[H8] = second
        assert b.find(second) == H8
        assert b.find(Piece(Color.WHITE, PieceType.ROOK)) is None

    def test_promote_keeps_identity(self) -> None:
        b = Board()
        pawn = Piece(Color.WHITE, PieceType.PAWN)
        b[E8] = pawn
        promoted = b.promote(E8, PieceType.QUEEN)
        assert promoted is pawn
        assert b[E8].piece_type == PieceType.QUEEN

    def test_promote_empty_square_raises(self) -> None:
        with pytest.raises(ValueError):
            Board().promote(E4, PieceType.QUEEN)

    def test_placement_hash_is_incremental(self) -> None:
        b = Board.initial()
        fresh = Board.initial()
        assert b.placement_hash == fresh.placement_hash
        pawn = b[Square(4, 1)]
        b[Square(4, 1)] = None
        b[E4] = pawn
        assert b.placement_hash != fresh.placement_hash
        b[E4] = None
        b[Square(4, 1)] = pawn
        assert b.placement_hash == fresh.placement_hash

    def test_copy_is_independent(self) -> None:
        b = Board.initial()
        c = b.copy()
        assert b == c
        c[E1] = None
        assert b[E1] is not None
        assert b != c

    def test_repr(self) -> None:
        text = repr(Board.initial())
        assert text.splitlines()[0] == "8 r n b q k b n r"
        assert text.splitlines()[-1] == "  a b c d e f g h"
