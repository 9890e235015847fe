import math

import pytest

from intrinsic import AbsoluteMoves, Direction, RelativeMoves, move_calculator


def test_absolute_moves_are_signed_differences():
    moves = AbsoluteMoves()
    assert moves.move_size(101.5, 100.0, Direction.UP) == 1.5
    assert moves.move_size(98.0, 100.0, Direction.DOWN) == 2.0
    assert moves.move_size(102.0, 100.0, Direction.DOWN) == -2.0


def test_relative_moves_are_signed_log_ratios():
    moves = RelativeMoves()
    assert moves.move_size(110.0, 100.0, Direction.UP) == pytest.approx(math.log(1.1))
    assert moves.move_size(90.0, 100.0, Direction.DOWN) == pytest.approx(-math.log(0.9))
    # scale invariant, unlike absolute moves
    assert moves.move_size(1100.0, 1000.0, Direction.UP) == pytest.approx(moves.move_size(110.0, 100.0, Direction.UP))


def test_move_calculator_selection():
    assert move_calculator(True).name == "relative"
    assert move_calculator(False).name == "absolute"
