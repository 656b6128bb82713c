"""Unit tests for src/kred/challenge.py"""

from src.kred.board import Board
from src.kred.challenge import ChallengeOutcome, ChallengeState, ChallengeStatus, PlayedTile
from src.kred.location import Location
from src.kred.moves import Move


def test_challenge_lifecycle() -> None:
    state = ChallengeState()
    assert state.status == ChallengeStatus.PENDING
    assert not state.receiver_accepted

    state = state.accepted(tile_player=1, player_count=4, receiver=3)
    assert state.receiver_accepted
    assert state.next_challenger == 2

    state = state.passed()
    assert state.next_challenger == 4
    assert state.has_more_challengers

    state = state.challenged_by(4)
    assert state.status == ChallengeStatus.CHALLENGED
    assert state.challenger == 4

    state = state.resolved(ChallengeOutcome.CHALLENGE_FAILED)
    assert state.status == ChallengeStatus.RESOLVED
    assert state.outcome == ChallengeOutcome.CHALLENGE_FAILED


def test_everybody_passes() -> None:
    state = ChallengeState().accepted(tile_player=1, player_count=3, receiver=2)
    assert state.next_challenger == 3
    state = state.passed()
    assert not state.has_more_challengers
    assert state.next_challenger is None


def test_rejected_tile_is_resolved_without_challenge() -> None:
    state = ChallengeState().rejected()
    assert state.status == ChallengeStatus.RESOLVED
    assert state.outcome == ChallengeOutcome.REJECTED
    assert state.challenger is None


def test_challenge_state_survives_storage() -> None:
    state = (
        ChallengeState()
        .accepted(tile_player=2, player_count=5, receiver=4)
        .passed()
        .challenged_by(5)
    )
    assert ChallengeState.from_dict(state.to_dict()) == state


def test_played_tile_survives_storage() -> None:
    board = Board.from_notation({"m1": "mark@community1", "m2": "mark@p2_seat1"}, 3)
    move = Move.create("m1", Location.community(1), Location.seat(1, 1), 1, 3)
    played = PlayedTile("05", 1, 2, (move,), board)

    restored = PlayedTile.from_dict(played.to_dict(), 3)
    assert restored.moves == (move,)
    assert restored.board_at_start.to_notation() == board.to_notation()
    assert restored.receiver == 2
