"""Tests for GameState, the turn and rule state machine."""

import pytest

from gambit.core.enums import CastlingRights, Color, GameResult, PieceType
from gambit.core.notation import STARTING_FEN
from gambit.core.piece import Piece
from gambit.core.types import parse_square
from gambit.game.interfaces import (
    AwaitingMove,
    AwaitingPromotion,
    GameEndReason,
    GameOver,
    TimeControl,
)
from gambit.game.state import GameEvents, GameState


class _Recorder:
    """Collects every outbound signal as ``(name, args)``."""

    def __init__(self, events: GameEvents) -> None:
        self.calls: list[tuple[str, tuple]] = []
        for name in (
            "on_turn_changed",
            "on_check",
            "on_checkmate",
            "on_draw",
            "on_timeout",
            "on_game_end",
            "on_promotion_required",
            "on_move",
        ):
            getattr(events, name).append(self._make(name))

    def _make(self, name: str):
        return lambda *args: self.calls.append((name, args))

    def named(self, name: str) -> list[tuple]:
        return [args for n, args in self.calls if n == name]


def _play(state: GameState, *moves: str) -> None:
    """Play moves given as 'e2e4' strings; each must be accepted."""
    for text in moves:
        ok = state.submit_square_move(parse_square(text[:2]), parse_square(text[2:4]))
        assert ok, text


def _make_state(fen: str | None = None, **kwargs: object) -> tuple[GameState, _Recorder]:
    state = GameState(fen, **kwargs)
    return state, _Recorder(state.events)


class TestSetup:
    def test_initial_state(self) -> None:
        state = GameState()
        assert isinstance(state.phase, AwaitingMove)
        assert state.side_to_move == Color.WHITE
        assert state.turn_number == 1
        assert state.move_history == []
        assert state.export_fen() == STARTING_FEN
        assert state.position.repetition_count(Color.WHITE) == 1
        assert state.result == GameResult.IN_PROGRESS

    def test_custom_fen(self) -> None:
        state = GameState("4k3/8/8/8/8/8/8/R3K3 b - - 0 1")
        assert state.side_to_move == Color.BLACK

    def test_legal_moves_for_highlighting(self) -> None:
        state = GameState()
        names = {sq.name for sq in state.legal_moves(parse_square("e2"))}
        assert names == {"e3", "e4"}
        assert state.legal_moves(parse_square("e7")) == []
        assert state.legal_moves(parse_square("e4")) == []


class TestSubmitMove:
    def test_legal_move_applied(self) -> None:
        state, rec = _make_state()
        _play(state, "e2e4")
        assert state.side_to_move == Color.BLACK
        assert state.turn_number == 2
        assert state.move_history == ["e2 to e4"]
        assert state.position.en_passant == parse_square("e3")
        assert rec.named("on_move") == [("e2 to e4",)]
        assert rec.named("on_turn_changed") == [(Color.BLACK,)]
        assert state.export_fen() == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )

    def test_unreachable_square_rejected(self) -> None:
        state, rec = _make_state()
        pawn = state.position.board[parse_square("e2")]
        assert not state.submit_move(pawn, parse_square("e5"))
        assert state.export_fen() == STARTING_FEN
        assert rec.calls == []

    def test_wrong_side_rejected(self) -> None:
        state = GameState()
        black_pawn = state.position.board[parse_square("e7")]
        assert not state.submit_move(black_pawn, parse_square("e5"))
        assert state.side_to_move == Color.WHITE

    def test_piece_not_on_board_rejected(self) -> None:
        state = GameState()
        stranger = Piece(Color.WHITE, PieceType.PAWN)
        assert not state.submit_move(stranger, parse_square("e4"))

    def test_move_leaving_king_in_check_rejected(self) -> None:
        state = GameState("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        bishop = state.position.board[parse_square("e2")]
        assert not state.submit_move(bishop, parse_square("d3"))
        assert state.position.board[parse_square("e2")] is bishop

    def test_en_passant_cleared_after_one_ply(self) -> None:
        state = GameState()
        _play(state, "e2e4", "g8f6")
        assert state.position.en_passant is None

    def test_halfmove_clock(self) -> None:
        state = GameState()
        _play(state, "g1f3", "g8f6")
        assert state.position.halfmove_clock == 2
        _play(state, "e2e4")
        assert state.position.halfmove_clock == 0
        _play(state, "f6e4")
        assert state.position.halfmove_clock == 0
        assert state.position.fullmove_number == 3


class TestSpecialMoves:
    def test_en_passant_capture(self) -> None:
        state = GameState()
        _play(state, "e2e4", "a7a6", "e4e5", "d7d5")
        assert parse_square("d6") in state.legal_moves(parse_square("e5"))
        _play(state, "e5d6")
        board = state.position.board
        assert board[parse_square("d5")] is None
        assert board[parse_square("d6")].color == Color.WHITE
        assert state.move_history[-1] == "e5 to d6"

    def test_kingside_castling(self) -> None:
        state, rec = _make_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        _play(state, "e1g1")
        board = state.position.board
        assert board[parse_square("g1")].piece_type == PieceType.KING
        assert board[parse_square("f1")].piece_type == PieceType.ROOK
        assert board[parse_square("h1")] is None
        assert state.move_history == ["O-O"]
        assert not state.position.castling & CastlingRights.WHITE_BOTH
        assert rec.named("on_move") == [("O-O",)]

    def test_queenside_castling(self) -> None:
        state = GameState("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
        _play(state, "e8c8")
        board = state.position.board
        assert board[parse_square("c8")].piece_type == PieceType.KING
        assert board[parse_square("d8")].piece_type == PieceType.ROOK
        assert state.move_history == ["O-O-O"]
        assert state.position.castling == CastlingRights.WHITE_BOTH

    def test_castling_refused_through_attack(self) -> None:
        state = GameState("r3kr2/8/8/8/8/8/8/R3K2R w KQq - 0 1")
        king = state.position.board[parse_square("e1")]
        assert not state.submit_move(king, parse_square("g1"))

    def test_rook_move_clears_one_right(self) -> None:
        state = GameState("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        _play(state, "h1h2")
        castling = state.position.castling
        assert not castling & CastlingRights.WHITE_KINGSIDE
        assert castling & CastlingRights.WHITE_QUEENSIDE


class TestPromotion:
    FEN = "4k3/P7/8/8/8/8/7p/4K3 w - - 0 1"

    def test_promotion_suspends_until_choice(self) -> None:
        state, rec = _make_state(self.FEN)
        pawn = state.position.board[parse_square("a7")]
        _play(state, "a7a8")

        assert isinstance(state.phase, AwaitingPromotion)
        assert state.phase.pawn is pawn
        assert state.phase.square == parse_square("a8")
        assert state.phase.origin == parse_square("a7")
        assert rec.named("on_promotion_required") == [(Color.WHITE,)]
        assert state.side_to_move == Color.WHITE
        assert state.move_history == []

        king = state.position.board[parse_square("e1")]
        assert not state.submit_move(king, parse_square("d1"))
        assert not state.choose_promotion(PieceType.KING)
        assert not state.choose_promotion(PieceType.PAWN)

        assert state.choose_promotion(PieceType.KNIGHT)
        assert pawn.piece_type == PieceType.KNIGHT
        assert state.position.board[parse_square("a8")] is pawn
        assert isinstance(state.phase, AwaitingMove)
        assert state.side_to_move == Color.BLACK
        assert state.move_history == ["a7 to a8"]

    def test_choose_promotion_without_pending_rejected(self) -> None:
        assert not GameState().choose_promotion(PieceType.QUEEN)

    def test_queen_promotion_gives_check(self) -> None:
        state, rec = _make_state(self.FEN)
        _play(state, "a7a8")
        state.choose_promotion(PieceType.QUEEN)
        assert rec.named("on_check") == [(Color.BLACK,)]


class TestEndConditions:
    def test_fools_mate(self) -> None:
        state, rec = _make_state()
        _play(state, "f2f3", "e7e5", "g2g4", "d8h4")
        assert state.phase == GameOver(GameEndReason.CHECKMATE, Color.BLACK)
        assert state.result == GameResult.BLACK_WINS
        assert rec.named("on_checkmate") == [(Color.BLACK,)]
        assert rec.named("on_game_end") == [()]
        assert rec.named("on_check") == []
        pawn = state.position.board[parse_square("e2")]
        assert not state.submit_move(pawn, parse_square("e3"))

    def test_check_signal(self) -> None:
        state, rec = _make_state()
        _play(state, "e2e4", "f7f5", "d1h5")
        assert rec.named("on_check") == [(Color.BLACK,)]
        assert isinstance(state.phase, AwaitingMove)
        assert state.side_to_move == Color.BLACK

    def test_stalemate(self) -> None:
        state, rec = _make_state("7k/8/5K2/6Q1/8/8/8/8 w - - 0 1")
        _play(state, "g5g6")
        assert state.phase == GameOver(GameEndReason.STALEMATE, None)
        assert state.result == GameResult.DRAW
        assert rec.named("on_draw") == [(GameEndReason.STALEMATE,)]

    def test_fifty_move_rule(self) -> None:
        state, rec = _make_state("4k3/8/8/8/8/8/8/R3K3 w - - 99 80")
        _play(state, "a1a2")
        assert state.phase == GameOver(GameEndReason.FIFTY_MOVE_RULE, None)
        assert rec.named("on_draw") == [(GameEndReason.FIFTY_MOVE_RULE,)]

    def test_threefold_by_king_shuffle(self) -> None:
        state, rec = _make_state("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        shuffle = ("e1d1", "e8d8", "d1e1", "d8e8")
        _play(state, *shuffle)
        assert isinstance(state.phase, AwaitingMove)
        _play(state, *shuffle)
        assert state.phase == GameOver(GameEndReason.THREEFOLD_REPETITION, None)
        assert rec.named("on_draw") == [(GameEndReason.THREEFOLD_REPETITION,)]
        assert rec.named("on_game_end") == [()]

    def test_threefold_by_knights(self) -> None:
        state = GameState()
        cycle = ("g1f3", "g8f6", "f3g1", "f6g8")
        _play(state, *cycle, *cycle)
        assert state.phase == GameOver(GameEndReason.THREEFOLD_REPETITION, None)

    def test_different_rights_are_not_repetitions(self) -> None:
        state = GameState("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        # The first rook trip drops both kingside rights.
        trip = ("h1h2", "h8h7", "h2h1", "h7h8")
        _play(state, *trip, *trip)
        assert isinstance(state.phase, AwaitingMove)
        _play(state, "h1h2", "h8h7")
        assert state.phase == GameOver(GameEndReason.THREEFOLD_REPETITION, None)

    def test_insufficient_material(self) -> None:
        state, rec = _make_state("4k3/8/8/8/8/8/3r4/4K3 w - - 0 1")
        _play(state, "e1d2")
        assert state.phase == GameOver(GameEndReason.INSUFFICIENT_MATERIAL, None)
        assert rec.named("on_draw") == [(GameEndReason.INSUFFICIENT_MATERIAL,)]

    def test_draw_by_agreement(self) -> None:
        state, rec = _make_state()
        assert state.agree_draw()
        assert state.phase == GameOver(GameEndReason.AGREEMENT, None)
        assert rec.named("on_draw") == [(GameEndReason.AGREEMENT,)]
        assert not state.agree_draw()


class TestClockIntegration:
    def test_clock_switches_with_turns(self, fake_time) -> None:
        state = GameState(time_control=TimeControl(60, 2), time_source=fake_time)
        fake_time.advance(5)
        _play(state, "e2e4")
        fake_time.advance(3)
        assert state.clock is not None
        assert state.clock.remaining(Color.WHITE) == pytest.approx(57)
        assert state.clock.remaining(Color.BLACK) == pytest.approx(57)

    def test_timeout(self, fake_time) -> None:
        state, rec = _make_state(time_control=TimeControl(60), time_source=fake_time)
        assert not state.tick()
        fake_time.advance(61)
        assert state.tick()
        assert state.phase == GameOver(GameEndReason.TIMEOUT, Color.BLACK)
        assert state.result == GameResult.BLACK_WINS
        assert rec.named("on_timeout") == [(Color.WHITE,)]
        assert rec.named("on_game_end") == [()]
        assert not state.tick()

    def test_no_clock_by_default(self) -> None:
        state = GameState()
        assert state.clock is None
        assert not state.tick()


class TestDecidedPositions:
    FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"

    def test_loaded_checkmate_ends_game(self) -> None:
        events = GameEvents()
        rec = _Recorder(events)
        state = GameState(self.FOOLS_MATE, events=events)
        assert state.phase == GameOver(GameEndReason.CHECKMATE, Color.BLACK)
        assert rec.named("on_checkmate") == [(Color.BLACK,)]
        assert rec.named("on_game_end") == [()]
        pawn = state.position.board[parse_square("a2")]
        assert not state.submit_move(pawn, parse_square("a3"))

    def test_loaded_stalemate(self) -> None:
        state = GameState("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert state.phase == GameOver(GameEndReason.STALEMATE, None)

    def test_loaded_fifty_move_limit(self) -> None:
        state = GameState("4k3/8/8/8/8/8/8/R3K3 w - - 100 80")
        assert state.phase == GameOver(GameEndReason.FIFTY_MOVE_RULE, None)

    def test_load_fen_of_decided_position(self) -> None:
        state, rec = _make_state()
        state.load_fen(self.FOOLS_MATE)
        assert state.is_game_over
        assert rec.named("on_game_end") == [()]
        assert rec.named("on_turn_changed") == []


class TestRestart:
    def test_restart_resets_everything(self, fake_time) -> None:
        state, rec = _make_state(time_control=TimeControl(60), time_source=fake_time)
        _play(state, "e2e4", "e7e5")
        fake_time.advance(20)
        state.restart()
        assert state.export_fen() == STARTING_FEN
        assert state.move_history == []
        assert state.turn_number == 1
        assert state.position.position_history == {
            state.position.hash_for(Color.WHITE): 1
        }
        assert state.clock.remaining(Color.WHITE) == 60
        assert rec.calls[-1] == ("on_turn_changed", (Color.WHITE,))

    def test_restart_after_game_over(self) -> None:
        state = GameState()
        _play(state, "f2f3", "e7e5", "g2g4", "d8h4")
        state.restart()
        assert isinstance(state.phase, AwaitingMove)

    def test_malformed_fen_leaves_game_untouched(self) -> None:
        state = GameState()
        _play(state, "e2e4")
        fen = state.export_fen()
        with pytest.raises(ValueError):
            state.load_fen("rnbqkbnr/pppppppp/8/8 w KQkq - 0 1")
        assert state.export_fen() == fen
        assert state.move_history == ["e2 to e4"]
